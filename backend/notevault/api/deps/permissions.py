from __future__ import annotations

from typing import Callable

from fastapi import Depends

from notevault.api.deps.auth import get_identity
from notevault.api.deps.tenant import get_current_tenant
from notevault.auth.identity import IdentityContext
from notevault.auth.permissions import ADMIN_ACTIONS, Action, authorize
from notevault.models.tenant import Tenant


def require_note_action(action: Action) -> Callable:
    """
    Notes are always scoped by the caller's own tenant, so the target is the
    tenant resolved from the token. Returns that tenant.
    """
    if action in ADMIN_ACTIONS:
        raise ValueError(f"{action.value} is a tenant admin action; use require_tenant_admin()")

    async def _checker(
        identity: IdentityContext = Depends(get_identity),
        tenant: Tenant = Depends(get_current_tenant),
    ) -> Tenant:
        authorize(identity, action, tenant.slug)
        return tenant

    return _checker


def require_tenant_admin(action: Action) -> Callable:
    """
    Admin actions on /tenants/{slug}/...: the path slug is checked against the
    caller before the tenant is loaded, so another tenant's slug is a 403
    whether or not it exists.
    """
    if action not in ADMIN_ACTIONS:
        raise ValueError(f"{action.value} is not a tenant admin action")

    async def _checker(
        slug: str,
        identity: IdentityContext = Depends(get_identity),
    ) -> IdentityContext:
        authorize(identity, action, slug)
        return identity

    return _checker
