"""
NetCafe - Main Application Entry Point
Multi-tenant restaurant management with one database per tenant
"""

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from contextlib import asynccontextmanager
from typing import Optional
import structlog

from netcafe import __version__
from netcafe.core.config import Settings, get_settings
from netcafe.core.database import init_master_db
from netcafe.core.errors import register_exception_handlers
from netcafe.tenancy.runtime import TenancyRuntime
from netcafe.api import (
    master, subscriptions, tenant_auth, categories, dishes,
    roles, chat, websockets,
)

# Configure structured logging
structlog.configure(
    processors=[
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.JSONRenderer()
    ],
    context_class=dict,
    logger_factory=structlog.stdlib.LoggerFactory(),
)

logger = structlog.get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager"""
    runtime: TenancyRuntime = app.state.runtime

    # Startup
    logger.info("Initializing NetCafe backend")
    if runtime.settings.MASTER_SCHEMA_AUTO_CREATE:
        await init_master_db(runtime.master_engine)
    else:
        logger.info("Master database managed by Alembic migrations")

    yield

    # Shutdown; tenant connections live until here
    logger.info("Shutting down NetCafe backend")
    await runtime.aclose()


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """Build the application with its own tenancy runtime"""
    settings = settings or get_settings()

    app = FastAPI(
        title=f"{settings.APP_NAME} API",
        description="Multi-tenant restaurant management with per-tenant databases",
        version=__version__,
        lifespan=lifespan,
    )
    app.state.runtime = TenancyRuntime(settings)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.ALLOWED_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    register_exception_handlers(app)

    # Include routers
    app.include_router(master.router, prefix="/master", tags=["master"])
    app.include_router(subscriptions.router, prefix="/master/subscriptions", tags=["subscriptions"])
    app.include_router(tenant_auth.router, prefix="/tenant", tags=["tenant-auth"])
    app.include_router(categories.router, prefix="/tenant/categories", tags=["categories"])
    app.include_router(dishes.router, prefix="/tenant/dishes", tags=["dishes"])
    app.include_router(roles.router, prefix="/tenant", tags=["roles"])
    app.include_router(chat.router, prefix="/tenant", tags=["chat"])
    app.include_router(websockets.router, prefix="/ws", tags=["websockets"])

    @app.get("/health")
    async def health_check():
        """Health check endpoint"""
        return {"status": "healthy", "service": "netcafe-api"}

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn
    settings = get_settings()
    uvicorn.run(
        "netcafe.main:app",
        host="0.0.0.0",
        port=8000,
        reload=settings.ENVIRONMENT == "development",
        log_level="info",
    )
