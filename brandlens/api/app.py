"""FastAPI application factory and entry point."""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import TYPE_CHECKING

import structlog
from fastapi import FastAPI

from brandlens import __version__
from brandlens.api.deps import HueyTaskQueue
from brandlens.api.middleware import CorrelationIdMiddleware, add_exception_handlers
from brandlens.api.routes import actions, ai, auth, projects, results, system, tasks
from brandlens.clients import AnalysisWebhookClient
from brandlens.config import Settings
from brandlens.db import Database
from brandlens.llm import LLMClient
from brandlens.logging import configure_logging

if TYPE_CHECKING:
    from collections.abc import AsyncGenerator

logger = structlog.get_logger()


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Initialize DB, clients and settings on startup, cleanup on shutdown."""
    settings = Settings()
    settings.ensure_data_dir()

    configure_logging(
        log_level=settings.log_level,
        log_format=settings.log_format,
        service="brandlens-api",
    )

    db = Database(settings.db_url)
    db.init_schema()

    app.state.db = db
    app.state.settings = settings
    app.state.llm = LLMClient(settings)
    app.state.analysis_client = AnalysisWebhookClient(
        settings.analysis_webhook_url, settings.analysis_timeout
    )
    app.state.task_queue = HueyTaskQueue()

    logger.info("Brandlens API started", host=settings.api_host, port=settings.api_port)
    yield

    db.close()
    logger.info("Brandlens API shut down")


def create_app() -> FastAPI:
    """Application factory."""
    app = FastAPI(
        title="Brandlens",
        description="Brand visibility research across AI assistants",
        version=__version__,
        lifespan=lifespan,
    )

    app.add_middleware(CorrelationIdMiddleware)
    add_exception_handlers(app)

    # Prometheus metrics endpoint
    from prometheus_client import make_asgi_app

    metrics_app = make_asgi_app()
    app.mount("/metrics", metrics_app)

    # Mount routes under /api/v1
    prefix = "/api/v1"
    app.include_router(system.router, prefix=prefix)
    app.include_router(auth.router, prefix=prefix)
    app.include_router(ai.router, prefix=prefix)
    app.include_router(actions.router, prefix=prefix)
    app.include_router(projects.router, prefix=prefix)
    app.include_router(results.router, prefix=prefix)
    app.include_router(tasks.router, prefix=prefix)

    return app


def main() -> None:
    """Entry point for `brandlens-api` command."""
    import uvicorn

    settings = Settings()
    uvicorn.run(
        "brandlens.api.app:create_app",
        factory=True,
        host=settings.api_host,
        port=settings.api_port,
    )
