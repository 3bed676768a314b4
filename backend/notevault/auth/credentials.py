from __future__ import annotations

from sqlalchemy.ext.asyncio import AsyncSession

from notevault.auth.identity import UserIdentity
from notevault.core.errors import InvalidCredentials, ValidationError
from notevault.core.logging import get_logger
from notevault.core.roles import normalize_role
from notevault.core.security import dummy_password_hash, verify_password
from notevault.crud.users import get_user_by_email

log = get_logger(__name__)


async def verify_credentials(db: AsyncSession, email: str | None, password: str | None) -> UserIdentity:
    """
    Check an email/password pair against the stored user.

    Unknown email and wrong password raise the same InvalidCredentials; the
    unknown-email path still runs one bcrypt comparison.
    """
    if not email or not password:
        raise ValidationError("email and password required")

    user = await get_user_by_email(db, email)
    if user is None:
        verify_password(password, dummy_password_hash())
        log.info("login_failed", reason="unknown_email")
        raise InvalidCredentials()

    if not verify_password(password, user.password_hash):
        log.info("login_failed", reason="bad_password", user_id=str(user.id))
        raise InvalidCredentials()

    return UserIdentity(
        user_id=str(user.id),
        email=user.email,
        role=normalize_role(user.role),
        tenant_slug=user.tenant.slug,
    )
