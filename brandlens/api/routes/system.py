"""Health check and config endpoints."""

from __future__ import annotations

import structlog
from fastapi import APIRouter

from brandlens import __version__
from brandlens.api.deps import DbDep, LLMDep, SettingsDep
from brandlens.api.schemas import ConfigCheckResponse, HealthResponse

router = APIRouter(tags=["system"])

logger = structlog.get_logger()


@router.get("/health", response_model=HealthResponse)
def health_check(
    db: DbDep,
) -> HealthResponse:
    db_ok = False
    try:
        db.check_connection()
        db_ok = True
    except Exception as exc:
        logger.warning("Database health check failed", error=str(exc))

    return HealthResponse(
        status="healthy" if db_ok else "unhealthy",
        version=__version__,
        db_connected=db_ok,
    )


@router.get("/config/check", response_model=ConfigCheckResponse)
def config_check(
    settings: SettingsDep,
    llm: LLMDep,
) -> ConfigCheckResponse:
    return ConfigCheckResponse(
        configured={
            "openai": llm.is_available("openai"),
            "anthropic": llm.is_available("anthropic"),
            "analysis_webhook": bool(settings.analysis_webhook_url),
        }
    )
