"""FastAPI application factory. No business logic; only wiring, middleware and error mapping."""

import logging
import time
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from datetime import timedelta
from typing import Any

from dotenv import load_dotenv

load_dotenv()

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from meetsync.api.routes import api_router, root_router
from meetsync.core.config import Settings, get_settings
from meetsync.core.database import build_engine, build_session_factory
from meetsync.core.errors import MeetSyncError
from meetsync.core.logging_config import configure_logging
from meetsync.core.security import SessionTokenIssuer
from meetsync.models import Base
from meetsync.schemas.auth import MISSING_FIELDS_MESSAGE, ErrorResponse
from meetsync.schemas.provider import TOKEN_PROVIDER_MISSING_MESSAGE
from meetsync.services.auth_flow import AuthService
from meetsync.services.auth_gate import AuthorizationGate
from meetsync.services.credential_store import CredentialStore
from meetsync.services.video_provider import StreamVideoProvider

logger = logging.getLogger("meetsync.api")

SERVER_ERROR_MESSAGE = "Server error"

# Endpoints whose missing-fields message differs from MISSING_FIELDS_MESSAGE.
MISSING_MESSAGE_BY_PATH = {
    "/tokenProvider": TOKEN_PROVIDER_MISSING_MESSAGE,
}


def _error_response(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content=ErrorResponse(message=message).model_dump(),
    )


def _validation_message(errors: list[dict[str, Any]], missing_message: str = MISSING_FIELDS_MESSAGE) -> str:
    """Pick the client-facing message for a request body that failed validation."""
    for err in errors:
        if err.get("type") == "value_error":
            msg = str(err.get("msg", "")).removeprefix("Value error, ")
            return msg or missing_message
    if any(err.get("type") == "missing" for err in errors):
        return missing_message
    return "Invalid request body"


def _register_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(MeetSyncError)
    async def meetsync_error_handler(request: Request, exc: MeetSyncError) -> JSONResponse:
        if exc.status_code >= 500:
            logger.error(
                "Request failed",
                extra={"path": request.url.path, "error": type(exc).__name__, "reason": exc.message[:300]},
            )
        return _error_response(exc.status_code, exc.message)

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
        missing_message = MISSING_MESSAGE_BY_PATH.get(request.url.path, MISSING_FIELDS_MESSAGE)
        return _error_response(400, _validation_message(list(exc.errors()), missing_message))

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
        return _error_response(exc.status_code, str(exc.detail))

    @app.exception_handler(Exception)
    async def unexpected_error_handler(request: Request, exc: Exception) -> JSONResponse:
        logger.exception("Unexpected error", extra={"path": request.url.path})
        return _error_response(500, SERVER_ERROR_MESSAGE)


def create_app(
    settings: Settings | None = None,
    provider: StreamVideoProvider | None = None,
) -> FastAPI:
    """
    Build the application and its service handles.

    Handles are constructed once here and live on app.state for the process
    lifetime. Raises pydantic.ValidationError when required secrets are missing.
    """
    settings = settings or get_settings()
    configure_logging(settings.LOG_LEVEL)

    engine = build_engine(settings.DATABASE_URL, echo=settings.DEBUG)
    if settings.DATABASE_URL.startswith("sqlite"):
        # Alembic migrations target Postgres; local SQLite gets the schema directly.
        Base.metadata.create_all(engine)
    session_factory = build_session_factory(engine)
    store = CredentialStore(session_factory)
    tokens = SessionTokenIssuer(
        secret=settings.JWT_SECRET.get_secret_value(),
        algorithm=settings.JWT_ALGORITHM,
        lifetime=timedelta(seconds=settings.SESSION_TOKEN_TTL_SEC),
    )
    video = provider or StreamVideoProvider.from_settings(settings)
    gate = AuthorizationGate(tokens, store)
    auth_service = AuthService(store, tokens, video, bcrypt_rounds=settings.BCRYPT_ROUNDS)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        logger.info("MeetSync API starting up (env=%s)", settings.APP_ENV)
        yield
        await video.aclose()
        engine.dispose()
        logger.info("MeetSync API shutdown complete")

    app = FastAPI(
        title="MeetSync API",
        version="0.1.0",
        docs_url="/docs" if settings.APP_ENV == "dev" else None,
        redoc_url="/redoc" if settings.APP_ENV == "dev" else None,
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.engine = engine
    app.state.session_factory = session_factory
    app.state.store = store
    app.state.tokens = tokens
    app.state.provider = video
    app.state.gate = gate
    app.state.auth_service = auth_service

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["GET", "POST"],
        allow_headers=["Content-Type", "Authorization"],
    )

    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        start = time.perf_counter()
        response = await call_next(request)
        ms = (time.perf_counter() - start) * 1000
        logger.info(
            "%s %s %d %.1fms",
            request.method,
            request.url.path,
            response.status_code,
            ms,
        )
        return response

    _register_exception_handlers(app)
    app.include_router(api_router, prefix=settings.API_PREFIX)
    app.include_router(root_router)
    return app
