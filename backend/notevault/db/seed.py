"""Provision the demo tenants and users.

Idempotent - safe to run multiple times. Creates, if missing:
- tenants "acme" and "globex" on the free plan
- admin@<slug>.test (admin) and user@<slug>.test (member), password "password"

Usage: python -m notevault.db.seed
"""

from __future__ import annotations

import asyncio

from sqlalchemy.ext.asyncio import AsyncSession

from notevault.core.config import settings
from notevault.core.logging import configure_logging, get_logger
from notevault.core.plans import TenantPlan
from notevault.core.roles import UserRole
from notevault.core.security import hash_password
from notevault.crud.tenants import create_tenant, get_tenant_by_slug
from notevault.crud.users import get_user_by_email
from notevault.models.user import User

log = get_logger(__name__)

SEED_PASSWORD = "password"

SEED_TENANTS: dict[str, str] = {
    "acme": "Acme",
    "globex": "Globex",
}


async def seed_demo_data(db: AsyncSession) -> None:
    for slug, name in SEED_TENANTS.items():
        tenant = await get_tenant_by_slug(db, slug)
        if tenant is None:
            tenant = await create_tenant(db, slug=slug, name=name, plan=TenantPlan.FREE)
            log.info("seed_tenant_created", tenant=slug)

        for local, role in (("admin", UserRole.ADMIN), ("user", UserRole.MEMBER)):
            email = f"{local}@{slug}.test"
            if await get_user_by_email(db, email) is not None:
                continue
            db.add(
                User(
                    email=email,
                    password_hash=hash_password(SEED_PASSWORD),
                    role=role.value,
                    tenant_id=tenant.id,
                )
            )
            await db.flush()
            log.info("seed_user_created", tenant=slug, email=email, role=role.value)

    await db.commit()


async def main() -> None:
    from notevault.db.session import AsyncSessionLocal, engine, init_models

    await init_models()
    async with AsyncSessionLocal() as session:
        await seed_demo_data(session)
    await engine.dispose()
    log.info("seed_complete")


if __name__ == "__main__":
    configure_logging(settings.LOG_LEVEL, json_output=settings.LOG_JSON)
    asyncio.run(main())
