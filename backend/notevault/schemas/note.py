from datetime import datetime
from typing import Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field


class NoteCreate(BaseModel):
    model_config = ConfigDict(extra="ignore")

    title: Optional[str] = Field(default=None, max_length=500)
    content: Optional[str] = None


class NoteUpdate(BaseModel):
    model_config = ConfigDict(extra="ignore")

    # Omitted / null / "" => keep the stored value
    title: Optional[str] = Field(default=None, max_length=500)
    content: Optional[str] = None


class NoteOut(BaseModel):
    id: UUID
    title: str
    content: str
    tenant_id: UUID
    owner_id: UUID
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}
