# notevault/crud/tenant_quota.py
from __future__ import annotations

import uuid

from sqlalchemy import and_, func, or_, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from notevault.core.errors import QuotaExceeded, TenantNotFound
from notevault.core.logging import get_logger
from notevault.core.plans import PLAN_NOTE_LIMITS, get_note_limit_for_plan, normalize_plan
from notevault.models.note import Note
from notevault.models.tenant import Tenant

log = get_logger(__name__)


async def count_tenant_notes(db: AsyncSession, tenant_id: uuid.UUID) -> int:
    stmt = select(func.count(Note.id)).where(Note.tenant_id == tenant_id)
    res = await db.execute(stmt)
    return int(res.scalar() or 0)


async def check_create_allowed(db: AsyncSession, tenant: Tenant) -> None:
    """
    Advisory pre-check: is there room for one more note on the tenant's plan?

    Not safe on its own under concurrent creates; the binding check is
    reserve_note_slot(), which runs in the insert transaction.
    """
    limit = get_note_limit_for_plan(tenant.plan)
    if limit is None:
        return

    current = await count_tenant_notes(db, tenant.id)
    if current >= limit:
        log.info("quota_exceeded", tenant=tenant.slug, plan=normalize_plan(tenant.plan).value, limit=limit, notes=current)
        raise QuotaExceeded(context={"limit": limit, "notes": current})


def _has_room_clause():
    """
    SQL condition "this tenant's plan still allows one more note", built from
    PLAN_NOTE_LIMITS so the table stays the single source of truth.
    """
    clauses = []
    for plan, limit in PLAN_NOTE_LIMITS.items():
        if limit.max_notes is None:
            clauses.append(Tenant.plan == plan.value)
        else:
            clauses.append(and_(Tenant.plan == plan.value, Tenant.note_count < limit.max_notes))
    return or_(*clauses)


async def reserve_note_slot(db: AsyncSession, tenant_id: uuid.UUID) -> None:
    """
    Atomically take one note slot: a single conditional increment of
    tenants.note_count. The row lock taken by the UPDATE serializes concurrent
    creates for the same tenant, and the WHERE clause is re-checked after the
    lock is granted, so the counter can never pass the plan limit.

    Must run inside the transaction that inserts the note. Does not commit.
    """
    stmt = (
        update(Tenant)
        .where(Tenant.id == tenant_id)
        .where(_has_room_clause())
        .values(note_count=Tenant.note_count + 1)
        .execution_options(synchronize_session=False)
    )
    res = await db.execute(stmt)
    if res.rowcount == 1:
        return

    row = (
        await db.execute(select(Tenant.slug, Tenant.plan, Tenant.note_count).where(Tenant.id == tenant_id))
    ).one_or_none()
    if row is None:
        raise TenantNotFound()

    limit = get_note_limit_for_plan(row.plan)
    log.info("quota_exceeded", tenant=row.slug, plan=normalize_plan(row.plan).value, limit=limit, notes=row.note_count)
    raise QuotaExceeded(context={"limit": limit, "notes": row.note_count})


async def release_note_slot(db: AsyncSession, tenant_id: uuid.UUID) -> None:
    """
    Give a slot back after a delete, in the same transaction. Never goes below zero.
    """
    stmt = (
        update(Tenant)
        .where(Tenant.id == tenant_id)
        .where(Tenant.note_count > 0)
        .values(note_count=Tenant.note_count - 1)
        .execution_options(synchronize_session=False)
    )
    await db.execute(stmt)
