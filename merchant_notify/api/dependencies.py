"""
Injection de dépendances FastAPI.

Fournit les instances des services pour les routes.

UTILISATION:
    from merchant_notify.api.dependencies import get_notifier

    @router.post("/test")
    async def test(discord: DiscordService = Depends(get_notifier)):
        ...
"""

from fastapi import Depends

from merchant_notify.config.settings import Settings, get_settings
from merchant_notify.infrastructure.notifications.discord_service import (
    DiscordService,
    get_discord_service,
)


def get_app_settings() -> Settings:
    """Retourne les settings (singleton)."""
    return get_settings()


def get_notifier(settings: Settings = Depends(get_app_settings)) -> DiscordService:
    """Retourne le service Discord partagé, construit avec les settings de l'application."""
    return get_discord_service(settings)
