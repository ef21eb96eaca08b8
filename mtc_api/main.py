"""
MTC API Server

Entry point for the FastAPI application.
"""

from __future__ import annotations

import argparse
from contextlib import asynccontextmanager
from typing import Optional

import structlog
import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from mtc_api.api import router as api_router
from mtc_api.core.auth import Clock
from mtc_api.core.config import Settings, get_settings
from mtc_api.core.context import AppContext
from mtc_api.core.errors import register_exception_handlers
from mtc_api.core.log_config import configure_logging
from mtc_api.core.middleware import RequestContextMiddleware, SecurityHeadersMiddleware
from mtc_api.services.projects import ProjectRegistry

log = structlog.get_logger()


async def prepare_store(ctx: AppContext) -> None:
    """Create tables and, when enabled, seed the project catalog."""
    await ctx.database.create_all()
    if ctx.settings.seed_projects:
        async with ctx.database.session() as session:
            await ProjectRegistry(session, ctx.clock).seed_catalog()


@asynccontextmanager
async def lifespan(app: FastAPI):
    ctx: AppContext = app.state.context
    log.info("mtc.starting", environment=ctx.settings.environment, database=ctx.database.engine.dialect.name)
    await prepare_store(ctx)
    try:
        yield
    finally:
        log.info("mtc.shutting_down")
        await ctx.database.dispose()


def create_app(settings: Optional[Settings] = None, *, clock: Optional[Clock] = None) -> FastAPI:
    """Create and configure the FastAPI application."""
    settings = settings or get_settings()
    if settings.secret_key == Settings.model_fields["secret_key"].default and settings.environment == "prod":
        raise RuntimeError("MTC_SECRET_KEY must be set in production")

    app = FastAPI(
        title="MTC API",
        description="Community platform: members, project catalog, approvals and memberships.",
        version="0.1.0",
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
        lifespan=lifespan,
    )
    app.state.context = AppContext.from_settings(settings, clock=clock)

    # Middleware (last added is outermost)
    app.add_middleware(SecurityHeadersMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=False,
        allow_methods=["GET", "POST", "PUT", "DELETE"],
        allow_headers=["Content-Type", "Authorization"],
    )
    app.add_middleware(RequestContextMiddleware)

    register_exception_handlers(app)
    app.include_router(api_router, prefix="/api")
    return app


def run() -> None:
    """CLI entry point: serve the API with uvicorn."""
    settings = get_settings()
    parser = argparse.ArgumentParser(description="MTC community platform API")
    parser.add_argument("--host", default=settings.host, help=f"Bind address (default: {settings.host})")
    parser.add_argument("--port", type=int, default=settings.port, help=f"Port (default: {settings.port})")
    args = parser.parse_args()

    configure_logging(settings.log_level, settings.log_format)
    uvicorn.run(create_app(settings), host=args.host, port=args.port, log_level=settings.log_level)


if __name__ == "__main__":
    run()
