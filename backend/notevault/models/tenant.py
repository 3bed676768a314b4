# backend/notevault/models/tenant.py

import uuid
from datetime import datetime

from sqlalchemy import CheckConstraint, Integer, String, DateTime, Uuid
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.sql import func

from notevault.core.plans import TenantPlan
from notevault.db.base import Base


class Tenant(Base):
    __tablename__ = "tenants"
    __table_args__ = (
        CheckConstraint("note_count >= 0", name="ck_tenants_note_count_non_negative"),
    )

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)

    # URL + token identifier
    slug: Mapped[str] = mapped_column(String(100), unique=True, index=True, nullable=False)
    name: Mapped[str] = mapped_column(String(200), nullable=False)

    # free | pro, kept as string like the role column
    plan: Mapped[str] = mapped_column(String(20), nullable=False, default=TenantPlan.FREE.value)

    # Live notes; only moved by crud.tenant_quota inside the note insert/delete transaction
    note_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0, server_default="0")

    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)
