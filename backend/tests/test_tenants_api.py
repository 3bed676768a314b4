# tests/test_tenants_api.py
from __future__ import annotations

import pytest
from sqlalchemy import select

from conftest import bearer, create_tenant, create_user
from notevault.core.plans import TenantPlan
from notevault.core.roles import UserRole
from notevault.models.tenant import Tenant
from notevault.models.user import User


@pytest.mark.asyncio
async def test_admin_upgrades_own_tenant(client, db, sessionmaker, token_service):
    acme = await create_tenant(db, "acme")
    admin = await create_user(db, acme, "admin@acme.test", role=UserRole.ADMIN)
    await db.commit()

    r = await client.post("/api/tenants/acme/upgrade", headers=bearer(token_service, admin, acme))

    assert r.status_code == 200
    body = r.json()
    assert body["message"] == "Tenant upgraded to Pro"
    assert body["tenant"]["slug"] == "acme"
    assert body["tenant"]["plan"] == "pro"

    async with sessionmaker() as s:
        assert (await s.execute(select(Tenant.plan).where(Tenant.slug == "acme"))).scalar_one() == "pro"

    # already pro: stays pro
    r = await client.post("/api/tenants/acme/upgrade", headers=bearer(token_service, admin, acme))
    assert r.status_code == 200
    assert r.json()["tenant"]["plan"] == "pro"


@pytest.mark.asyncio
async def test_member_cannot_upgrade(client, db, token_service):
    acme = await create_tenant(db, "acme")
    member = await create_user(db, acme, "user@acme.test")
    await db.commit()

    r = await client.post("/api/tenants/acme/upgrade", headers=bearer(token_service, member, acme))

    assert r.status_code == 403
    assert r.json()["detail"]["code"] == "forbidden"


@pytest.mark.asyncio
async def test_admin_cannot_upgrade_other_tenant(client, db, sessionmaker, token_service):
    acme = await create_tenant(db, "acme")
    await create_tenant(db, "other")
    admin = await create_user(db, acme, "admin@acme.test", role=UserRole.ADMIN)
    await db.commit()

    r = await client.post("/api/tenants/other/upgrade", headers=bearer(token_service, admin, acme))
    assert r.status_code == 403

    # unknown slug is still a 403, not a 404
    r = await client.post("/api/tenants/does-not-exist/upgrade", headers=bearer(token_service, admin, acme))
    assert r.status_code == 403

    async with sessionmaker() as s:
        assert (await s.execute(select(Tenant.plan).where(Tenant.slug == "other"))).scalar_one() == "free"


@pytest.mark.asyncio
async def test_upgrade_requires_auth(client):
    r = await client.post("/api/tenants/acme/upgrade")
    assert r.status_code == 401


@pytest.mark.asyncio
async def test_admin_invites_member_who_can_log_in(client, db, sessionmaker, token_service):
    acme = await create_tenant(db, "acme")
    admin = await create_user(db, acme, "admin@acme.test", role=UserRole.ADMIN)
    await db.commit()

    r = await client.post(
        "/api/tenants/acme/invite",
        json={"email": "new@acme.test"},
        headers=bearer(token_service, admin, acme),
    )

    assert r.status_code == 200
    body = r.json()
    assert body["message"] == "User invited successfully"
    assert body["user"]["email"] == "new@acme.test"
    assert body["user"]["role"] == "member"

    async with sessionmaker() as s:
        invited = (await s.execute(select(User).where(User.email == "new@acme.test"))).scalar_one()
        assert invited.tenant_id == acme.id
        assert invited.password_hash != "password"

    r = await client.post("/api/auth/login", json={"email": "new@acme.test", "password": "password"})
    assert r.status_code == 200
    assert r.json()["user"]["tenant"] == "acme"


@pytest.mark.asyncio
async def test_invite_role_is_normalized(client, db, token_service):
    acme = await create_tenant(db, "acme")
    admin = await create_user(db, acme, "admin@acme.test", role=UserRole.ADMIN)
    await db.commit()

    r = await client.post(
        "/api/tenants/acme/invite",
        json={"email": "boss@acme.test", "role": "ADMIN"},
        headers=bearer(token_service, admin, acme),
    )

    assert r.status_code == 200
    assert r.json()["user"]["role"] == "admin"


@pytest.mark.asyncio
@pytest.mark.parametrize("payload", [{}, {"email": ""}, {"email": "x@acme.test", "role": "owner"}])
async def test_invite_rejects_bad_input(client, db, token_service, payload):
    acme = await create_tenant(db, "acme")
    admin = await create_user(db, acme, "admin@acme.test", role=UserRole.ADMIN)
    await db.commit()

    r = await client.post("/api/tenants/acme/invite", json=payload, headers=bearer(token_service, admin, acme))

    assert r.status_code == 400


@pytest.mark.asyncio
async def test_invite_existing_email_conflicts(client, db, token_service):
    acme = await create_tenant(db, "acme")
    admin = await create_user(db, acme, "admin@acme.test", role=UserRole.ADMIN)
    await create_user(db, acme, "taken@acme.test")
    await db.commit()

    r = await client.post(
        "/api/tenants/acme/invite",
        json={"email": "taken@acme.test"},
        headers=bearer(token_service, admin, acme),
    )

    assert r.status_code == 409


@pytest.mark.asyncio
async def test_member_and_foreign_admin_cannot_invite(client, db, token_service):
    acme = await create_tenant(db, "acme")
    globex = await create_tenant(db, "globex", plan=TenantPlan.PRO)
    member = await create_user(db, acme, "user@acme.test")
    foreign_admin = await create_user(db, globex, "admin@globex.test", role=UserRole.ADMIN)
    await db.commit()

    r = await client.post("/api/tenants/acme/invite", json={"email": "a@acme.test"}, headers=bearer(token_service, member, acme))
    assert r.status_code == 403

    r = await client.post(
        "/api/tenants/acme/invite",
        json={"email": "b@acme.test"},
        headers=bearer(token_service, foreign_admin, globex),
    )
    assert r.status_code == 403


@pytest.mark.asyncio
async def test_invite_into_vanished_tenant_is_404(client, db, token_service):
    acme = await create_tenant(db, "acme")
    admin = await create_user(db, acme, "admin@acme.test", role=UserRole.ADMIN)
    await db.commit()
    h = bearer(token_service, admin, acme)

    await db.delete(await db.get(Tenant, acme.id))
    await db.commit()

    r = await client.post("/api/tenants/acme/invite", json={"email": "late@acme.test"}, headers=h)
    assert r.status_code == 404
