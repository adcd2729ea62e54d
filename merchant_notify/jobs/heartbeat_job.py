"""
Job de heartbeat Discord.

Envoie periodiquement un message generique sur le webhook de heartbeat
pour confirmer que le suivi des stocks tourne toujours.

FREQUENCE:
- DISCORD_HEARTBEAT_INTERVAL_MINUTES (0 = job non enregistre)

GESTION DES ERREURS:
- Le service Discord journalise les echecs d'envoi
- Le job ne leve jamais d'exception vers le scheduler
"""

import logging
from typing import Optional

from merchant_notify.config.settings import Settings, get_settings
from merchant_notify.infrastructure.notifications.discord_service import DiscordService

logger = logging.getLogger(__name__)


class HeartbeatJob:
    """
    Job d'envoi du heartbeat.

    Chaque execution utilise son propre DiscordService: le scheduler
    tourne dans un thread avec sa propre boucle d'evenements.
    """

    def __init__(
        self,
        settings: Optional[Settings] = None,
        service: Optional[DiscordService] = None,
    ):
        self.settings = settings or get_settings()
        self._service = service

    def build_message(self) -> str:
        """Texte du heartbeat, l'heure est portee par l'embed."""
        return f"Heartbeat: {self.settings.APP_NAME} is running"

    async def run(self) -> dict:
        """
        Execute le job.

        Returns:
            Dict avec le nombre de messages envoyes
        """
        service = self._service or DiscordService(settings=self.settings)
        try:
            sent = await service.send_generic_message(self.build_message())
        finally:
            if self._service is None:
                await service.close()

        if not sent:
            logger.warning("Heartbeat not delivered")
        return {"sent": len(sent), "message_ids": sent}


def create_heartbeat_job(settings: Optional[Settings] = None) -> HeartbeatJob:
    """Factory du job de heartbeat."""
    return HeartbeatJob(settings=settings)
