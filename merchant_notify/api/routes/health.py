"""
Routes de santé et diagnostic.

Endpoints:
- GET /api/health - Statut de l'API
- GET /api/health/ready - Prêt à servir des requêtes
- GET /api/health/live - Processus vivant
"""

from datetime import datetime
from typing import Dict

from fastapi import APIRouter, Depends
from pydantic import BaseModel

from merchant_notify import __version__
from merchant_notify.api.dependencies import get_app_settings
from merchant_notify.config.settings import Settings
from merchant_notify.jobs.scheduler import get_scheduler

router = APIRouter(prefix="/health", tags=["health"])


class HealthResponse(BaseModel):
    """Réponse de santé."""

    status: str
    timestamp: str
    version: str
    services: Dict[str, str]


class ReadyResponse(BaseModel):
    """Réponse de disponibilité."""

    ready: bool
    message: str


@router.get("", response_model=HealthResponse)
async def health_check(settings: Settings = Depends(get_app_settings)):
    """
    Vérifie l'état de santé de l'API.

    Retourne toujours 200 si l'API fonctionne.
    """
    scheduler = get_scheduler()
    return HealthResponse(
        status="healthy",
        timestamp=datetime.now().isoformat(),
        version=__version__,
        services={
            "api": "up",
            "discord_webhook": "configured" if settings.is_discord_webhook_configured else "not_configured",
            "discord_dm": "configured" if settings.is_captcha_handler_configured else "not_configured",
            "scheduler": "running" if scheduler is not None and scheduler.running else "stopped",
        },
    )


@router.get("/ready", response_model=ReadyResponse)
async def readiness_check(settings: Settings = Depends(get_app_settings)):
    """Prêt dès qu'au moins un canal de notification est configuré."""
    if settings.is_discord_webhook_configured or settings.is_captcha_handler_configured:
        return ReadyResponse(ready=True, message="API ready to serve requests")
    return ReadyResponse(ready=False, message="No Discord channel configured")


@router.get("/live")
async def liveness_check():
    """Vérifie si l'API est vivante (probe liveness)."""
    return {"alive": True}
