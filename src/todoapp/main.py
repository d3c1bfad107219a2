"""FastAPI application factory.

Learn: App factory pattern — create_app() returns a configured FastAPI
instance. Lifespan manages startup/shutdown. Middleware, exception
handlers, and routers are all registered here.

The TokenService is built once from settings and stored on app.state;
routes reach it through the get_token_service dependency, so the signing
key is never a mutable module global.
"""

from contextlib import asynccontextmanager
from datetime import timedelta
from typing import Optional

import structlog
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from todoapp import __version__
from todoapp.api import api_router
from todoapp.auth.jwt import TokenService
from todoapp.auth.password import prepare_dummy_hash
from todoapp.config import Settings, settings as default_settings
from todoapp.errors import TodoAppError, UnauthorizedError
from todoapp.log import configure_logging
from todoapp.middleware.request_context import RequestContextMiddleware

logger = structlog.get_logger()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup and shutdown lifecycle."""
    from todoapp.db.engine import create_schema, engine

    cfg: Settings = app.state.settings
    logger.info(
        "todoapp.starting",
        version=__version__,
        environment=cfg.environment,
        port=cfg.port,
    )
    if cfg.create_schema:
        await create_schema(engine)
        logger.info("todoapp.schema_created")

    yield

    logger.info("todoapp.shutdown")
    await engine.dispose()


# ─── Error handlers ─────────────────────────────────────


async def _app_error_handler(request: Request, exc: TodoAppError) -> JSONResponse:
    headers = None
    if isinstance(exc, UnauthorizedError):
        headers = {"WWW-Authenticate": "Bearer"}
    if exc.status_code >= 500:
        logger.error("todoapp.internal_error", error=exc.message, path=request.url.path)
    return JSONResponse(
        status_code=exc.status_code,
        content={"message": exc.message},
        headers=headers,
    )


async def _validation_error_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    logger.info("todoapp.invalid_input", errors=exc.errors())
    return JSONResponse(status_code=400, content={"message": "invalid input body"})


async def _unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("todoapp.unhandled_error", path=request.url.path)
    # Runs outside RequestContextMiddleware, so the id comes from request.state.
    request_id = getattr(request.state, "request_id", None)
    headers = {"X-Request-ID": request_id} if request_id else None
    return JSONResponse(status_code=500, content={"message": str(exc)}, headers=headers)


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """Build and return the FastAPI application."""
    settings = settings or default_settings
    configure_logging(settings.log_level, json=settings.log_json)

    app = FastAPI(
        title="todoapp",
        description="Per-user todo lists and items behind bearer-token auth",
        version=__version__,
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.bcrypt_rounds = settings.bcrypt_rounds
    prepare_dummy_hash(settings.bcrypt_rounds)
    app.state.tokens = TokenService(
        secret=settings.jwt_secret,
        algorithm=settings.jwt_algorithm,
        ttl=timedelta(minutes=settings.access_token_expire_minutes),
    )

    app.add_middleware(RequestContextMiddleware)

    app.add_exception_handler(TodoAppError, _app_error_handler)
    app.add_exception_handler(RequestValidationError, _validation_error_handler)
    app.add_exception_handler(Exception, _unhandled_error_handler)

    app.include_router(api_router)

    return app


# Default app instance (used by uvicorn: todoapp.main:app)
app = create_app()
