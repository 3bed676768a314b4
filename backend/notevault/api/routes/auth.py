# backend/notevault/api/routes/auth.py
from __future__ import annotations

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from notevault.api.deps.auth import get_identity
from notevault.auth.credentials import verify_credentials
from notevault.auth.identity import IdentityContext
from notevault.core.logging import get_logger
from notevault.core.security import TokenService, get_token_service
from notevault.db.session import get_db
from notevault.schemas.auth import LoginRequest, LoginResponse, LoginUser, MeResponse

log = get_logger(__name__)

router = APIRouter(prefix="/auth", tags=["auth"])


@router.post("/login", response_model=LoginResponse)
async def login(
    payload: LoginRequest,
    db: AsyncSession = Depends(get_db),
    tokens: TokenService = Depends(get_token_service),
) -> LoginResponse:
    """
    Body: {"email": "admin@acme.test", "password": "..."}
    Returns: session token (8h) + the user's id/email/role/tenant.
    """
    identity = await verify_credentials(db, payload.email, payload.password)

    token = tokens.issue(identity.user_id, identity.role, identity.tenant_slug)
    log.info("login_succeeded", user_id=identity.user_id, tenant=identity.tenant_slug)

    return LoginResponse(
        token=token,
        user=LoginUser(
            id=identity.user_id,
            email=identity.email,
            role=identity.role.value,
            tenant=identity.tenant_slug,
        ),
    )


@router.get("/me", response_model=MeResponse)
async def me(identity: IdentityContext = Depends(get_identity)) -> MeResponse:
    """
    Echo the identity carried by the session token.
    """
    return MeResponse(id=identity.user_id, role=identity.role.value, tenant=identity.tenant_slug)
