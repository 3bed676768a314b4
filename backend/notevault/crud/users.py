# notevault/crud/users.py
from __future__ import annotations

import uuid

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from notevault.core.errors import ConflictError, ValidationError
from notevault.core.roles import UserRole, normalize_role
from notevault.core.security import hash_password
from notevault.models.user import User


async def get_user_by_email(db: AsyncSession, email: str) -> User | None:
    """
    Exact (case-sensitive) email lookup; the tenant relation is eager-loaded.
    """
    res = await db.execute(select(User).where(User.email == email).limit(1))
    return res.scalar_one_or_none()


async def create_user(
    db: AsyncSession,
    *,
    tenant_id: uuid.UUID,
    email: str,
    password: str,
    role: UserRole | str = UserRole.MEMBER,
) -> User:
    """
    Insert a user into `tenant_id` and commit. Duplicate email -> ConflictError.
    """
    email = (email or "").strip()
    if not email:
        raise ValidationError("email required")
    canonical_role = normalize_role(role)

    if await get_user_by_email(db, email) is not None:
        raise ConflictError("A user with this email already exists")

    user = User(
        email=email,
        password_hash=hash_password(password),
        role=canonical_role.value,
        tenant_id=tenant_id,
    )
    db.add(user)
    try:
        await db.commit()
    except IntegrityError:
        # lost a race with a concurrent invite for the same email
        await db.rollback()
        raise ConflictError("A user with this email already exists")

    await db.refresh(user)
    return user
