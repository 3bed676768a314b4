from __future__ import annotations

import os

# Settings are read at import time; give the app a signing secret before anything imports it.
os.environ.setdefault("ENVIRONMENT", "test")
os.environ.setdefault("JWT_SECRET", "test-only-signing-secret-0123456789abcdef")

import pytest
import pytest_asyncio
from httpx import AsyncClient, ASGITransport
from sqlalchemy.ext.asyncio import (
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import NullPool

from notevault.core.plans import TenantPlan
from notevault.core.roles import UserRole
from notevault.core.security import TokenService, get_token_service, hash_password
from notevault.db.session import get_db

# Ensure Base + models are registered before create_all
from notevault.db.base import Base
import notevault.models  # noqa: F401
from notevault.models.note import Note
from notevault.models.tenant import Tenant
from notevault.models.user import User

TEST_SECRET = "test-only-signing-secret-0123456789abcdef"
TEST_PASSWORD = "s3cret-pass"


# ---------------------------------------------------------
# Engine + schema lifecycle (one SQLite file per test)
# ---------------------------------------------------------
@pytest_asyncio.fixture()
async def engine(tmp_path):
    """
    A fresh database per test. NullPool gives every session its own
    connection, so concurrent requests really contend on the database lock.
    """
    engine = create_async_engine(
        f"sqlite+aiosqlite:///{tmp_path / 'notevault-test.db'}",
        future=True,
        echo=False,
        poolclass=NullPool,
        connect_args={"timeout": 30},
    )

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    await engine.dispose()


@pytest.fixture()
def sessionmaker(engine):
    return async_sessionmaker(
        engine, class_=AsyncSession, expire_on_commit=False
    )


# ---------------------------------------------------------
# DB session for assertions / setup
# ---------------------------------------------------------
@pytest_asyncio.fixture()
async def db(sessionmaker):
    """
    Session for test setup & assertions ONLY.
    """
    async with sessionmaker() as session:
        yield session
        await session.rollback()


@pytest.fixture()
def token_service() -> TokenService:
    return TokenService(lambda: TEST_SECRET)


# ---------------------------------------------------------
# FastAPI app + dependency override
# ---------------------------------------------------------
@pytest.fixture()
def app(sessionmaker, token_service):
    from notevault.main import app as fastapi_app

    async def _override_get_db():
        async with sessionmaker() as session:
            yield session

    fastapi_app.dependency_overrides[get_db] = _override_get_db
    fastapi_app.dependency_overrides[get_token_service] = lambda: token_service
    yield fastapi_app
    fastapi_app.dependency_overrides.clear()


# ---------------------------------------------------------
# HTTP client
# ---------------------------------------------------------
@pytest_asyncio.fixture()
async def client(app):
    transport = ASGITransport(app=app)
    async with AsyncClient(
        transport=transport,
        base_url="http://test",
    ) as ac:
        yield ac


# ---------------------------------------------------------
# Data helpers
# ---------------------------------------------------------
async def create_tenant(db, slug: str, plan: TenantPlan = TenantPlan.FREE) -> Tenant:
    tenant = Tenant(slug=slug, name=slug.title(), plan=plan.value, note_count=0)
    db.add(tenant)
    await db.flush()
    return tenant


async def create_user(
    db,
    tenant: Tenant,
    email: str,
    role: UserRole = UserRole.MEMBER,
    password: str = TEST_PASSWORD,
) -> User:
    user = User(
        email=email,
        password_hash=hash_password(password),
        role=role.value,
        tenant_id=tenant.id,
    )
    db.add(user)
    await db.flush()
    return user


async def create_notes(db, tenant: Tenant, owner: User, count: int) -> list[Note]:
    """
    Insert notes directly, keeping tenants.note_count in step.
    """
    notes = [
        Note(title=f"note {i}", content="", tenant_id=tenant.id, owner_id=owner.id)
        for i in range(count)
    ]
    db.add_all(notes)
    tenant.note_count = (tenant.note_count or 0) + count
    await db.flush()
    return notes


def bearer(token_service: TokenService, user: User, tenant: Tenant) -> dict[str, str]:
    token = token_service.issue(str(user.id), UserRole(user.role), tenant.slug)
    return {"Authorization": f"Bearer {token}"}
