# backend/notevault/core/config.py

from __future__ import annotations

from urllib.parse import urlsplit, urlunsplit, parse_qsl, urlencode

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


def _strip_asyncpg_unsupported_params(url: str) -> str:
    """
    asyncpg does NOT accept sslmode or channel_binding as connect kwargs.
    Hosted Postgres providers put them in the URL query anyway, so drop them
    before SQLAlchemy forwards them to asyncpg.connect().
    """
    parts = urlsplit(url)
    if not parts.query or not parts.scheme.endswith("asyncpg"):
        return url

    params = parse_qsl(parts.query, keep_blank_values=True)
    filtered = [(k, v) for (k, v) in params if k not in {"sslmode", "channel_binding"}]
    new_query = urlencode(filtered, doseq=True)
    return urlunsplit((parts.scheme, parts.netloc, parts.path, new_query, parts.fragment))


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # -----------------------------
    # Environment
    # -----------------------------
    # Use: development | staging | production
    ENVIRONMENT: str = "development"

    # -----------------------------
    # DB
    # -----------------------------
    DATABASE_URL_ASYNC: str = "sqlite+aiosqlite:///./notevault.db"

    # Create tables on startup (local dev / demo deployments only)
    AUTO_CREATE_TABLES: bool = False

    # -----------------------------
    # JWT
    # -----------------------------
    # No default on purpose: a missing secret must fail at startup.
    JWT_SECRET: str
    JWT_ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 8 * 60

    # -----------------------------
    # HTTP
    # -----------------------------
    CORS_ORIGINS: list[str] = Field(
        default_factory=lambda: ["http://localhost:5173", "http://127.0.0.1:5173"]
    )

    # -----------------------------
    # Logging
    # -----------------------------
    LOG_LEVEL: str = "INFO"
    LOG_JSON: bool = False

    @property
    def DATABASE_URL_ASYNC_CLEAN(self) -> str:
        return _strip_asyncpg_unsupported_params(self.DATABASE_URL_ASYNC)

    @property
    def is_development(self) -> bool:
        return (self.ENVIRONMENT or "").strip().lower() in {"development", "dev", "test"}

    def model_post_init(self, __context) -> None:  # pydantic v2 hook
        secret = (self.JWT_SECRET or "").strip()
        if not secret:
            raise ValueError("JWT_SECRET must be set.")

        # Staging/production need a long, random secret.
        if not self.is_development and len(secret) < 32:
            raise ValueError("JWT_SECRET is too short; use at least 32 characters outside development.")

        if self.JWT_ALGORITHM not in {"HS256"}:
            raise ValueError(f"Unsupported JWT_ALGORITHM={self.JWT_ALGORITHM!r}. Allowed: HS256")

        if self.ACCESS_TOKEN_EXPIRE_MINUTES <= 0:
            raise ValueError("ACCESS_TOKEN_EXPIRE_MINUTES must be positive.")


# this must exist for: `from notevault.core.config import settings`
settings = Settings()
