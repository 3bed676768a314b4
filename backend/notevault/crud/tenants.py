# notevault/crud/tenants.py
from __future__ import annotations

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from notevault.core.logging import get_logger
from notevault.core.plans import TenantPlan, get_next_plan, normalize_plan
from notevault.models.tenant import Tenant

log = get_logger(__name__)


async def get_tenant_by_slug(db: AsyncSession, slug: str) -> Tenant | None:
    res = await db.execute(select(Tenant).where(Tenant.slug == slug).limit(1))
    return res.scalar_one_or_none()


async def create_tenant(
    db: AsyncSession,
    *,
    slug: str,
    name: str,
    plan: TenantPlan = TenantPlan.FREE,
) -> Tenant:
    """
    Out-of-band provisioning (seed script, tests). Flushes, does not commit.
    """
    tenant = Tenant(slug=slug, name=name, plan=normalize_plan(plan).value, note_count=0)
    db.add(tenant)
    await db.flush()
    return tenant


async def upgrade_tenant_plan(db: AsyncSession, tenant: Tenant) -> Tenant:
    """
    Move the tenant one step up the plan ladder (free -> pro) and commit.
    Already on the top plan: no-op, returned unchanged.
    """
    current = normalize_plan(tenant.plan)
    nxt = get_next_plan(current)
    if nxt is None:
        return tenant

    tenant.plan = nxt.value
    await db.commit()
    await db.refresh(tenant)

    log.info("tenant_upgraded", tenant=tenant.slug, old=current.value, new=nxt.value)
    return tenant
