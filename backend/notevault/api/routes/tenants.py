# backend/notevault/api/routes/tenants.py
from __future__ import annotations

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from notevault.api.deps.permissions import require_tenant_admin
from notevault.api.deps.tenant import resolve_tenant
from notevault.auth.identity import IdentityContext
from notevault.auth.permissions import Action
from notevault.core.errors import ValidationError
from notevault.core.logging import get_logger
from notevault.core.roles import UserRole, normalize_role
from notevault.crud.tenants import upgrade_tenant_plan
from notevault.crud.users import create_user
from notevault.db.session import get_db
from notevault.schemas.tenant import (
    InviteCreate,
    InvitedUserOut,
    InviteResponse,
    TenantOut,
    UpgradeResponse,
)

log = get_logger(__name__)

router = APIRouter(prefix="/tenants", tags=["tenants"])

# Known weak default; invited users are expected to change it out-of-band.
DEFAULT_INVITE_PASSWORD = "password"


@router.post("/{slug}/upgrade", response_model=UpgradeResponse)
async def upgrade_tenant(
    slug: str,
    db: AsyncSession = Depends(get_db),
    _admin: IdentityContext = Depends(require_tenant_admin(Action.TENANT_UPGRADE)),
) -> UpgradeResponse:
    tenant = await resolve_tenant(db, slug)
    tenant = await upgrade_tenant_plan(db, tenant)
    return UpgradeResponse(message="Tenant upgraded to Pro", tenant=TenantOut.model_validate(tenant))


@router.post("/{slug}/invite", response_model=InviteResponse)
async def invite_user(
    slug: str,
    payload: InviteCreate,
    db: AsyncSession = Depends(get_db),
    admin: IdentityContext = Depends(require_tenant_admin(Action.TENANT_INVITE)),
) -> InviteResponse:
    """
    Body: {"email": "new@acme.test", "role": "member"}
    Creates the user directly in this tenant with the default password.
    """
    email = (payload.email or "").strip()
    if not email:
        raise ValidationError("email required")
    role = normalize_role(payload.role) if payload.role else UserRole.MEMBER

    tenant = await resolve_tenant(db, slug)
    user = await create_user(
        db,
        tenant_id=tenant.id,
        email=email,
        password=DEFAULT_INVITE_PASSWORD,
        role=role,
    )

    log.info("user_invited", tenant=tenant.slug, user_id=str(user.id), role=role.value, invited_by=admin.user_id)
    return InviteResponse(message="User invited successfully", user=InvitedUserOut.model_validate(user))
