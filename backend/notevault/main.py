import uuid
from contextlib import asynccontextmanager

import structlog
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from notevault.core.config import settings
from notevault.core.errors import AppError, InternalError, ValidationError
from notevault.core.logging import configure_logging, get_logger
import notevault.models  # noqa: F401  # force model registration

from notevault.api.routes.auth import router as auth_router
from notevault.api.routes.notes import router as notes_router
from notevault.api.routes.tenants import router as tenants_router
from notevault.db.session import init_models

log = get_logger(__name__)


@asynccontextmanager
async def lifespan(_app: FastAPI):
    if settings.AUTO_CREATE_TABLES:
        await init_models()
        log.info("database_tables_ensured")
    yield


def _error_response(exc: AppError) -> JSONResponse:
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.to_detail()})


def register_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(AppError)
    async def _app_error(request: Request, exc: AppError):
        if exc.status_code >= 500:
            log.error("request_failed", code=exc.code, path=request.url.path)
        return _error_response(exc)

    @app.exception_handler(RequestValidationError)
    async def _request_validation_error(request: Request, exc: RequestValidationError):
        fields = [".".join(str(p) for p in err.get("loc", ())) for err in exc.errors()]
        message = f"Invalid request: {', '.join(fields)}" if fields else "Invalid request"
        return _error_response(ValidationError(message))

    @app.exception_handler(Exception)
    async def _unhandled(request: Request, exc: Exception):
        # full detail stays server-side
        log.exception("unhandled_error", path=request.url.path, method=request.method)
        return _error_response(InternalError())


def create_application() -> FastAPI:
    configure_logging(settings.LOG_LEVEL, json_output=settings.LOG_JSON)

    app = FastAPI(title="NoteVault API", lifespan=lifespan)

    # CORS: browser frontends listed in CORS_ORIGINS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
        allow_headers=["Content-Type", "Authorization"],
    )

    @app.middleware("http")
    async def bind_request_context(request: Request, call_next):
        structlog.contextvars.clear_contextvars()
        structlog.contextvars.bind_contextvars(
            request_id=request.headers.get("x-request-id") or uuid.uuid4().hex,
            method=request.method,
            path=request.url.path,
        )
        return await call_next(request)

    register_exception_handlers(app)

    @app.get("/api/health")
    def health():
        return {"status": "ok"}

    # Routers
    app.include_router(auth_router, prefix="/api")
    app.include_router(notes_router, prefix="/api")
    app.include_router(tenants_router, prefix="/api")

    return app


app = create_application()
