"""
Name: FastAPI Application Entry Point

Responsibilities:
  - Build the FastAPI application (create_app) with metadata
  - Configure middleware (CORS, request context)
  - Mount auth, users and tenant routers
  - Own process lifecycle: logger setup/shutdown, DB pool init/close
  - Expose a health check

Collaborators:
  - container: get_logger, get_user_repository
  - RequestContextMiddleware: request id and logging context
  - infrastructure.db.pool: init_pool / close_pool / ensure_schema

Notes:
  - Middleware order matters: RequestContext -> CORS -> routes
  - Without DATABASE_URL the app runs on the in-memory store (dev/tests)
"""

from contextlib import asynccontextmanager

from fastapi import Depends, FastAPI, Request, Response
from fastapi.middleware.cors import CORSMiddleware

from ..container import get_logger, reset_container
from ..crosscutting.config import get_settings
from ..crosscutting.logger import shutdown_logger
from ..crosscutting.metrics import get_metrics_response
from ..crosscutting.middleware import REQUEST_ID_HEADER, RequestContextMiddleware
from ..identity.guards import admin_only
from ..identity.pipeline import authorize
from ..infrastructure.db.pool import close_pool, ensure_schema, init_pool
from .auth_routes import router as auth_router
from .exception_handlers import register_exception_handlers
from .tenant_routes import router as tenant_router
from .user_routes import router as user_router

APP_VERSION = "0.1.0"


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup/shutdown lifecycle. Sets up logging and the DB pool."""
    settings = get_settings()
    logger = get_logger()

    if settings.uses_database():
        pool = init_pool(
            settings.database_url,
            settings.db_pool_min_size,
            settings.db_pool_max_size,
            logger=logger,
            statement_timeout_ms=settings.db_statement_timeout_ms,
        )
        if settings.db_auto_create_schema:
            ensure_schema(pool, logger)

    logger.info(
        "Authgate API starting up",
        extra={
            "app_env": settings.app_env,
            "store": "postgres" if settings.uses_database() else "in_memory",
            "mail": "smtp" if settings.mail_enabled() else "null",
            "jwt_ttl_minutes": settings.jwt_access_ttl_minutes,
        },
    )

    try:
        yield
    finally:
        close_pool(logger)
        logger.info("Authgate API shutting down")
        shutdown_logger(logger)
        reset_container()


def create_app() -> FastAPI:
    settings = get_settings()

    app = FastAPI(
        title="Authgate API",
        version=APP_VERSION,
        lifespan=lifespan,
        openapi_tags=[
            {"name": "auth", "description": "Signup, login y sesión (JWT Bearer)"},
            {"name": "users", "description": "Gestión de usuarios"},
            {"name": "tenants", "description": "Rutas protegidas por rol / tenant"},
        ],
    )

    # R: Middleware order (bottom = first to execute).
    app.add_middleware(RequestContextMiddleware, logger=get_logger())
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.get_allowed_origins_list(),
        allow_credentials=False,
        allow_methods=["GET", "POST", "PATCH", "DELETE", "OPTIONS"],
        allow_headers=["Content-Type", "Authorization", REQUEST_ID_HEADER],
    )

    app.include_router(auth_router)
    app.include_router(user_router)
    app.include_router(tenant_router)

    register_exception_handlers(app)

    @app.get("/healthz", tags=["health"])
    def healthz(request: Request):
        return {
            "ok": True,
            "version": APP_VERSION,
            "request_id": getattr(request.state, "request_id", None),
        }

    # R: Prometheus metrics endpoint (solo admin).
    @app.get(
        "/metrics",
        tags=["health"],
        dependencies=[Depends(authorize(admin_only()))],
    )
    def metrics():
        body, content_type = get_metrics_response()
        return Response(content=body, media_type=content_type)

    return app


app = create_app()
