"""
Service de résolution de captcha par un humain.

Quand un magasin présente un captcha, le moteur de suivi demande à
l'utilisateur de le résoudre via un message privé Discord.

FLOW:
1. La capture d'écran du captcha est envoyée en message privé (si fournie)
2. Un message texte demande à l'utilisateur d'y répondre
3. Le service attend la réponse (fil "répondre à") jusqu'au timeout
4. Le texte de la réponse est retourné au moteur de suivi
"""

import logging
from typing import Optional

from merchant_notify.domain.entities.message import DMPayload
from merchant_notify.infrastructure.notifications.discord_service import (
    DiscordService,
    get_discord_service,
)

logger = logging.getLogger(__name__)

PROMPT_TEMPLATE = (
    "Captcha required on **{store}**. "
    "Reply to this message with the captcha text."
)


class CaptchaService:
    """Demande à l'utilisateur de résoudre un captcha."""

    def __init__(self, discord: Optional[DiscordService] = None):
        self._discord = discord or get_discord_service()

    async def request_solution(
        self,
        store_name: str,
        image_path: Optional[str] = None,
        timeout: Optional[float] = None,
    ) -> str:
        """
        Envoie le captcha et attend la solution.

        Args:
            store_name: Magasin qui présente le captcha
            image_path: Capture d'écran du captcha
            timeout: Délai d'attente (défaut: CAPTCHA_HANDLER_RESPONSE_TIMEOUT)

        Returns:
            La solution saisie, "" si aucune réponse
        """
        if not self._discord.is_dm_configured:
            logger.warning(f"Captcha on {store_name} but Discord DM is not configured")
            return ""

        if image_path:
            image = await self._discord.send_dm(DMPayload.image(image_path))
            if image is None:
                logger.warning(f"Captcha screenshot for {store_name} could not be sent")

        response = await self._discord.send_dm_and_get_response(
            DMPayload.text(PROMPT_TEMPLATE.format(store=store_name)),
            timeout,
        )

        if response:
            logger.info(f"Captcha solution received for {store_name}")
        else:
            logger.warning(f"No captcha solution for {store_name}")
        return response
