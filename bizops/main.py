"""BizOps API — FastAPI application factory."""


import logging
import sys
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from bizops.core.config import settings
from bizops.core.exceptions import register_exception_handlers
from bizops.db.base import create_all, engine
from bizops.middleware.audit import AuditMiddleware
from bizops.schemas.common import HealthResponse

# v1 routers
from bizops.routers.v1.forms import router as forms_v1_router
from bizops.routers.v1.forms import tables_router as tables_v1_router
from bizops.routers.v1.members import router as members_v1_router
from bizops.routers.v1.offers import router as offers_v1_router
from bizops.routers.v1.organizations import contacts_router as contacts_v1_router
from bizops.routers.v1.organizations import router as organizations_v1_router
from bizops.routers.v1.projects import router as projects_v1_router
from bizops.routers.v1.public import router as public_v1_router
from bizops.routers.v1.services import router as services_v1_router
from bizops.routers.v1.settings import routers as settings_v1_routers

logger = logging.getLogger(__name__)


def _configure_logging() -> None:
    """Set up structured logging for the application."""
    level = logging.DEBUG if settings.app_env == "development" else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
        stream=sys.stdout,
        force=True,
    )
    # Quiet noisy libraries
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
    logging.getLogger("aiosqlite").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)
    logging.getLogger("httpx").setLevel(logging.WARNING)


@asynccontextmanager
async def lifespan(app: FastAPI):
    if settings.auto_create_tables:
        # Local dev / tests; production schemas come from Alembic
        await create_all()
        logger.info("Database tables ensured")
    yield
    await engine.dispose()
    logger.info("Database engine disposed")


def create_app() -> FastAPI:
    _configure_logging()

    app = FastAPI(
        title=settings.app_name,
        version="1.0.0",
        docs_url="/docs" if settings.app_env == "development" else None,
        redoc_url="/redoc" if settings.app_env == "development" else None,
        lifespan=lifespan,
    )

    # --- CORS ---
    app.add_middleware(
        CORSMiddleware,
        allow_origins=[settings.frontend_url],
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"],
        allow_headers=["*"],
    )

    # --- Audit middleware ---
    if settings.audit_enabled:
        app.add_middleware(AuditMiddleware)

    # --- Global exception handlers ---
    register_exception_handlers(app)

    # --- v1 API routes (/api/v1/*) ---
    for router in (
        organizations_v1_router,
        contacts_v1_router,
        projects_v1_router,
        services_v1_router,
        offers_v1_router,
        *settings_v1_routers,
        members_v1_router,
        forms_v1_router,
        tables_v1_router,
        public_v1_router,
    ):
        app.include_router(router, prefix="/api/v1")

    # --- Health check ---
    @app.get("/health", response_model=HealthResponse, tags=["Health"])
    async def health():
        return HealthResponse(app=settings.app_name, env=settings.app_env)

    return app


app = create_app()
