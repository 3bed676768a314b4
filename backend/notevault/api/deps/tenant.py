from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from notevault.api.deps.auth import get_identity
from notevault.auth.identity import IdentityContext
from notevault.core.errors import TenantNotFound
from notevault.crud.tenants import get_tenant_by_slug
from notevault.db.session import get_db
from notevault.models.tenant import Tenant


async def resolve_tenant(db: AsyncSession, slug: str) -> Tenant:
    """
    The only way a tenant's internal id enters a query: slug -> Tenant row.
    """
    tenant = await get_tenant_by_slug(db, slug)
    if tenant is None:
        raise TenantNotFound()
    return tenant


async def get_current_tenant(
    identity: IdentityContext = Depends(get_identity),
    db: AsyncSession = Depends(get_db),
) -> Tenant:
    """
    Resolve the tenant named in the caller's session token.
    """
    return await resolve_tenant(db, identity.tenant_slug)
