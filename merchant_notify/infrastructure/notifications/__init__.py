"""
Infrastructure de notifications pour merchant-notify.

Fournit:
- Service Discord pour les alertes de stock, heartbeats et messages privés
- Builder d'embeds et clients REST Discord
"""

from merchant_notify.infrastructure.notifications.discord_embed import DiscordEmbed
from merchant_notify.infrastructure.notifications.discord_service import (
    DiscordService,
    get_discord_service,
)

__all__ = [
    "DiscordEmbed",
    "DiscordService",
    "get_discord_service",
]
