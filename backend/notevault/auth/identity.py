from __future__ import annotations

from dataclasses import dataclass

from notevault.core.roles import UserRole


@dataclass(frozen=True)
class UserIdentity:
    """Result of a successful credential check (login)."""

    user_id: str
    email: str
    role: UserRole
    tenant_slug: str


@dataclass(frozen=True)
class IdentityContext:
    """Who is calling, as proven by the session token. Lives for one request."""

    user_id: str
    role: UserRole
    tenant_slug: str

    @property
    def is_admin(self) -> bool:
        return self.role is UserRole.ADMIN
