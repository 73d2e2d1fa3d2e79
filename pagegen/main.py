"""
Page Generation Agent API.

Endpoints:
- POST /analyze - Analyze a URL and generate/update its artifacts
- POST /analyze/batch - Analyze several URLs sequentially
- POST /generate/{kind} - Generate a single artifact
- GET /artifacts/registry - Prior page artifacts
- GET /health - Health check
"""

import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI

from pagegen import __version__
from pagegen.routers import analysis, health
from pagegen.services.orchestrator import AnalysisOrchestrator
from pagegen.utils.config import Settings, validate_settings
from pagegen.utils.logging import log_configuration, setup_logging

logger = logging.getLogger(__name__)


def create_app(
    settings: Optional[Settings] = None,
    orchestrator: Optional[AnalysisOrchestrator] = None
) -> FastAPI:
    """Build the application with explicitly constructed settings."""
    settings = settings or Settings()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        setup_logging(settings)
        validate_settings(settings)
        log_configuration(settings)
        app.state.orchestrator = orchestrator or AnalysisOrchestrator.from_settings(settings)
        logger.info(f"Page generation agent started (environment={settings.ENVIRONMENT})")
        yield
        await app.state.orchestrator.close()
        logger.info("Page generation agent stopped")

    app = FastAPI(
        title="Page Generation Agent",
        version=__version__,
        docs_url="/docs" if settings.ENABLE_DOCS else None,
        redoc_url=None,
        lifespan=lifespan,
    )
    app.state.settings = settings

    app.include_router(health.router, tags=["health"])
    app.include_router(analysis.router, tags=["analysis"])

    return app


def run() -> None:
    import uvicorn

    settings = Settings()
    uvicorn.run(create_app(settings), host=settings.API_HOST, port=settings.API_PORT)


if __name__ == "__main__":
    run()
