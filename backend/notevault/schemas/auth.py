# backend/notevault/schemas/auth.py
from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, ConfigDict


class LoginRequest(BaseModel):
    model_config = ConfigDict(extra="ignore")

    # Optional at the schema level so a missing field is reported by the
    # credential check as a 400 with the usual error body.
    email: Optional[str] = None
    password: Optional[str] = None


class LoginUser(BaseModel):
    id: str
    email: str
    role: str
    tenant: str


class LoginResponse(BaseModel):
    token: str
    user: LoginUser


class MeResponse(BaseModel):
    id: str
    role: str
    tenant: str
