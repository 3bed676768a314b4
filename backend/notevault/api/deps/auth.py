from __future__ import annotations

import uuid
from typing import Optional

import structlog
from fastapi import Depends, Header

from notevault.auth.identity import IdentityContext
from notevault.core.errors import InvalidToken, MalformedAuthorizationHeader, MissingAuthorization
from notevault.core.security import TokenService, get_token_service


def authenticate(raw_authorization: Optional[str], tokens: TokenService) -> IdentityContext:
    """
    Turn a raw Authorization header value into the caller's identity.

    - absent / empty                        -> MissingAuthorization
    - not exactly "<scheme> <credential>"   -> MalformedAuthorizationHeader
    - scheme other than Bearer              -> MalformedAuthorizationHeader
    - token rejected by the TokenService    -> InvalidToken
    - subject that is not a user id         -> InvalidToken
    """
    if raw_authorization is None or not raw_authorization.strip():
        raise MissingAuthorization()

    parts = raw_authorization.split()
    if len(parts) != 2:
        raise MalformedAuthorizationHeader()

    scheme, credential = parts
    if scheme.lower() != "bearer":
        raise MalformedAuthorizationHeader()

    claims = tokens.validate(credential)
    try:
        user_id = uuid.UUID(claims.subject)
    except ValueError:
        raise InvalidToken()

    return IdentityContext(
        user_id=str(user_id),
        role=claims.role,
        tenant_slug=claims.tenant,
    )


async def get_identity(
    authorization: Optional[str] = Header(default=None),
    tokens: TokenService = Depends(get_token_service),
) -> IdentityContext:
    """
    Dependency for protected endpoints. The identity is request-scoped and
    never cached across requests.
    """
    identity = authenticate(authorization, tokens)
    structlog.contextvars.bind_contextvars(user_id=identity.user_id, tenant=identity.tenant_slug)
    return identity
