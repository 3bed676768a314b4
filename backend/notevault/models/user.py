# backend/notevault/models/user.py
import uuid
from datetime import datetime

from sqlalchemy import String, DateTime, ForeignKey, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy.sql import func

from notevault.core.roles import UserRole
from notevault.db.base import Base


class User(Base):
    __tablename__ = "users"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)

    # Exact-match login key (no case folding)
    email: Mapped[str] = mapped_column(String(320), unique=True, index=True, nullable=False)

    # bcrypt
    password_hash: Mapped[str] = mapped_column(String(255), nullable=False)

    # admin | member (stored lowercase)
    role: Mapped[str] = mapped_column(String(20), nullable=False, default=UserRole.MEMBER.value)

    tenant_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("tenants.id", ondelete="CASCADE"),
        index=True,
        nullable=False,
    )
    tenant: Mapped["Tenant"] = relationship(lazy="joined")  # noqa: F821

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )
