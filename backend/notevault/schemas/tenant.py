from typing import Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict


class TenantOut(BaseModel):
    id: UUID
    slug: str
    name: str
    plan: str
    note_count: int

    model_config = {"from_attributes": True}


class UpgradeResponse(BaseModel):
    message: str
    tenant: TenantOut


class InviteCreate(BaseModel):
    model_config = ConfigDict(extra="ignore")

    email: Optional[str] = None
    role: Optional[str] = None


class InvitedUserOut(BaseModel):
    id: UUID
    email: str
    role: str

    model_config = {"from_attributes": True}


class InviteResponse(BaseModel):
    message: str
    user: InvitedUserOut
