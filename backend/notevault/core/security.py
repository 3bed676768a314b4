from __future__ import annotations

import uuid
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from functools import lru_cache
from typing import Any, Callable, Optional

import bcrypt
from jose import JWTError, jwt

from notevault.core.config import settings
from notevault.core.errors import InvalidToken, ValidationError
from notevault.core.logging import get_logger
from notevault.core.roles import UserRole

log = get_logger(__name__)

SESSION_TTL = timedelta(hours=8)
BCRYPT_ROUNDS = 10

SecretProvider = Callable[[], str]
Clock = Callable[[], datetime]


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


# ---------------------------------------------------------
# Passwords
# ---------------------------------------------------------
def hash_password(password: str) -> str:
    if not password:
        raise ValidationError("password is required")
    return bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt(rounds=BCRYPT_ROUNDS)).decode("utf-8")


def verify_password(password: str, password_hash: str | None) -> bool:
    """
    Salted, deliberately slow comparison. Malformed hashes and over-long
    passwords count as a mismatch.
    """
    if not password or not password_hash:
        return False
    try:
        return bcrypt.checkpw(password.encode("utf-8"), password_hash.encode("utf-8"))
    except ValueError:
        return False


@lru_cache(maxsize=1)
def dummy_password_hash() -> str:
    # Compared against when the email is unknown, so both login failures cost one bcrypt check.
    return hash_password(uuid.uuid4().hex)


# ---------------------------------------------------------
# Session tokens
# ---------------------------------------------------------
@dataclass(frozen=True)
class SessionClaims:
    subject: str
    role: UserRole
    tenant: str
    issued_at: datetime
    expires_at: datetime


class TokenService:
    """
    Issues and validates the signed session token (HS256 JWT):

        {"sub": <user id>, "role": "admin"|"member", "tenant": <slug>, "iat": ..., "exp": iat + 8h}

    The signing secret is read through `secret_provider` on every call, so
    rotating the configured value does not require rebuilding the service.
    No revocation: a token is valid until `exp`.
    """

    def __init__(
        self,
        secret_provider: SecretProvider,
        *,
        algorithm: str = "HS256",
        ttl: timedelta = SESSION_TTL,
        clock: Optional[Clock] = None,
    ) -> None:
        self._secret_provider = secret_provider
        self._algorithm = algorithm
        self._ttl = ttl
        self._clock: Clock = clock or _utcnow

    def _secret(self) -> str:
        secret = self._secret_provider()
        if not secret:
            raise RuntimeError("Session signing secret is not configured")
        return secret

    def issue(self, subject: str, role: UserRole | str, tenant_slug: str) -> str:
        issued = int(self._clock().timestamp())
        expires = issued + int(self._ttl.total_seconds())

        # Use numeric timestamps for maximum compatibility
        to_encode: dict[str, Any] = {
            "sub": str(subject),
            "role": UserRole(role).value if isinstance(role, UserRole) else str(role).strip().lower(),
            "tenant": tenant_slug,
            "iat": issued,
            "exp": expires,
        }
        return jwt.encode(to_encode, self._secret(), algorithm=self._algorithm)

    def validate(self, token: str) -> SessionClaims:
        if not token:
            raise InvalidToken()

        try:
            payload = jwt.decode(
                token,
                self._secret(),
                algorithms=[self._algorithm],
                # expiry is checked below against the injected clock
                options={"verify_exp": False, "require_sub": True},
            )
        except JWTError:
            # bad format, bad signature, wrong algorithm, missing claims
            log.info("session_token_rejected", reason="decode")
            raise InvalidToken()

        sub = payload.get("sub")
        tenant = payload.get("tenant")
        exp = payload.get("exp")
        if not sub or not isinstance(tenant, str) or not tenant or not isinstance(exp, (int, float)):
            log.info("session_token_rejected", reason="claims")
            raise InvalidToken()

        try:
            role = UserRole(str(payload.get("role") or "").strip().lower())
        except ValueError:
            log.info("session_token_rejected", reason="role")
            raise InvalidToken()

        expires_at = datetime.fromtimestamp(exp, tz=timezone.utc)
        if self._clock() >= expires_at:
            log.info("session_token_rejected", reason="expired", sub=str(sub))
            raise InvalidToken()

        iat = payload.get("iat")
        issued_at = (
            datetime.fromtimestamp(iat, tz=timezone.utc)
            if isinstance(iat, (int, float))
            else expires_at - self._ttl
        )

        return SessionClaims(
            subject=str(sub),
            role=role,
            tenant=tenant,
            issued_at=issued_at,
            expires_at=expires_at,
        )


def _configured_secret() -> str:
    return settings.JWT_SECRET


@lru_cache(maxsize=1)
def get_token_service() -> TokenService:
    """
    FastAPI dependency / process-wide accessor, wired from Settings.
    Tests override it via app.dependency_overrides.
    """
    return TokenService(
        _configured_secret,
        algorithm=settings.JWT_ALGORITHM,
        ttl=timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES),
    )
