"""Health check endpoints."""

import logging
from datetime import datetime, timezone
from fastapi import APIRouter, Request

from pagegen import __version__

logger = logging.getLogger(__name__)
router = APIRouter()


@router.get("/health")
async def health_check():
    """Basic health check."""
    return {
        "status": "healthy",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "service": "pagegen-agent",
        "version": __version__
    }


@router.get("/health/config")
async def config_check(request: Request):
    """Show non-sensitive configuration."""
    settings = request.app.state.settings
    orchestrator = request.app.state.orchestrator
    return {
        "environment": settings.ENVIRONMENT,
        "model_type": settings.AI_MODEL_TYPE,
        "model_name": settings.ai_config().model_name,
        "output_root": settings.OUTPUT_ROOT,
        "locator_strategy_timeout_ms": settings.LOCATOR_STRATEGY_TIMEOUT_MS,
        "batch_continue_on_error": settings.BATCH_CONTINUE_ON_ERROR,
        "openai_api_key_configured": bool(settings.OPENAI_API_KEY),
        "model_available": await orchestrator.model_available(),
    }
