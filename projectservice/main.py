"""
Project Service API

Entry point for the FastAPI application.
"""

import structlog
import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from projectservice.core.config import get_settings
from projectservice.core.errors import ServiceError, service_error_handler
from projectservice.core.logging import configure_logging
from projectservice.core.middleware import RequestContextMiddleware
from projectservice.core.redis import close_redis
from projectservice.core.roles import RoleCatalog, default_role_catalog
from projectservice.api.v1 import router as api_v1_router
from projectservice.services.users import close_user_service

settings = get_settings()
log = structlog.get_logger()


def create_app(role_catalog: RoleCatalog | None = None) -> FastAPI:
    """Create and configure the FastAPI application."""
    app = FastAPI(
        title="Project Service",
        description="Crowdfunding organizations, memberships and invitations.",
        version="0.1.0",
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
    )
    app.state.role_catalog = role_catalog or default_role_catalog()

    app.add_middleware(RequestContextMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["GET", "POST", "PATCH", "PUT", "DELETE"],
        allow_headers=["Content-Type", "Authorization", "X-Request-ID"],
    )

    app.add_exception_handler(ServiceError, service_error_handler)

    app.include_router(api_v1_router, prefix="/api/v1")

    @app.get("/health", tags=["System"])
    async def health_check():
        """Health check endpoint for liveness checks."""
        return {"status": "ok"}

    @app.get("/ready", tags=["System"])
    async def readiness_check():
        return {"status": "ready"}

    @app.on_event("startup")
    async def on_startup():
        configure_logging(settings.log_level, settings.log_format)
        log.info("Project service starting", roles=len(app.state.role_catalog))

    @app.on_event("shutdown")
    async def on_shutdown():
        log.info("Project service shutting down")
        await close_redis()
        await close_user_service()

    return app


app = create_app()


def run() -> None:
    """Console entry point."""
    uvicorn.run(
        "projectservice.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
    )
