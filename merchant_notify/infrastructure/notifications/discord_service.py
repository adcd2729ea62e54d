"""
Service d'envoi de notifications Discord.

Ce module gère:
- Les alertes de stock et messages génériques via webhooks
- Les messages privés via un bot, avec attente d'une réponse de l'utilisateur

CONFIGURATION:
    DISCORD_WEB_HOOK: Webhooks des alertes (séparés par des virgules)
    DISCORD_HEARTBEAT_WEB_HOOK: Webhook des messages génériques
    CAPTCHA_HANDLER_TOKEN / CAPTCHA_HANDLER_USER_ID: Bot et destinataire des DM

UTILISATION:
    from merchant_notify.infrastructure.notifications.discord_service import get_discord_service

    discord = get_discord_service()
    await discord.send_stock_alert(link, store)
    answer = await discord.send_dm_and_get_response(DMPayload.text("captcha?"))
"""

import asyncio
import logging
from typing import List, Optional

import httpx

from merchant_notify.config.settings import Settings, get_settings
from merchant_notify.config.constants import (
    CART_URL_PLACEHOLDER,
    EMBED_COLOR,
    PRICE_PLACEHOLDER,
    RESPONSE_ACK_EMOJI,
    RESPONSE_TIMEOUT_TEXT,
    STOCK_ALERT_TITLE,
)
from merchant_notify.domain.entities.message import DMPayload, DiscordMessage, sort_by_id
from merchant_notify.domain.entities.product import Link, Store
from merchant_notify.domain.exceptions import NotificationError
from merchant_notify.infrastructure.notifications.discord_client import (
    DiscordBotClient,
    DiscordWebhookClient,
)
from merchant_notify.infrastructure.notifications.discord_embed import DiscordEmbed

logger = logging.getLogger(__name__)


def format_price(link: Link, store: Store) -> str:
    """Retourne le prix préfixé de la devise, ou le texte par défaut."""
    price = link.price
    if not price:
        return PRICE_PLACEHOLDER
    if isinstance(price, float) and price.is_integer():
        price = int(price)
    return f"{store.currency}{price}"


class DiscordService:
    """
    Service d'envoi de messages Discord.

    Les erreurs d'envoi sont journalisées et jamais propagées:
    une notification ratée ne doit pas interrompre le suivi des stocks.
    """

    def __init__(
        self,
        settings: Optional[Settings] = None,
        http: Optional[httpx.AsyncClient] = None,
        timeout: float = 30.0,
    ):
        """
        Initialise le service Discord.

        Args:
            settings: Configuration. Par défaut depuis get_settings().
            http: Client HTTP à utiliser (tests). Créé à la demande sinon.
            timeout: Timeout des requêtes HTTP.
        """
        self._settings = settings or get_settings()
        self._timeout = timeout
        self._client: Optional[httpx.AsyncClient] = http
        self._owns_client = http is None

    @property
    def settings(self) -> Settings:
        return self._settings

    @property
    def is_webhook_configured(self) -> bool:
        return self._settings.is_discord_webhook_configured

    @property
    def is_dm_configured(self) -> bool:
        return self._settings.is_captcha_handler_configured

    @property
    def response_timeout(self) -> float:
        """Délai d'attente par défaut d'une réponse en secondes."""
        return self._settings.CAPTCHA_HANDLER_RESPONSE_TIMEOUT

    async def _get_client(self) -> httpx.AsyncClient:
        """Retourne le client HTTP (singleton)."""
        if self._client is None:
            self._client = httpx.AsyncClient(timeout=self._timeout)
            self._owns_client = True
        return self._client

    async def close(self) -> None:
        """Ferme le client HTTP s'il a été créé par le service."""
        if self._client is not None and self._owns_client:
            await self._client.aclose()
            self._client = None

    # =========================================================================
    # WEBHOOKS
    # =========================================================================

    async def send_message(
        self,
        message: str,
        embed: DiscordEmbed,
        custom_webhook: Optional[str] = None,
    ) -> List[str]:
        """
        Envoie un message avec embed sur les webhooks.

        Args:
            message: Contenu texte (mentions)
            embed: Embed affiché sous le message
            custom_webhook: Webhook unique à utiliser à la place des webhooks configurés

        Returns:
            Les identifiants des messages envoyés
        """
        webhooks = [custom_webhook] if custom_webhook else self._settings.discord_webhooks_list
        if not webhooks:
            logger.debug("Discord webhooks not configured, skipping message")
            return []

        logger.debug("Sending Discord message")

        client = DiscordWebhookClient(await self._get_client())
        results = await asyncio.gather(
            *(self._execute_webhook(client, url, message, embed) for url in webhooks)
        )
        return [message_id for message_id in results if message_id]

    async def _execute_webhook(
        self,
        client: DiscordWebhookClient,
        webhook_url: str,
        message: str,
        embed: DiscordEmbed,
    ) -> Optional[str]:
        try:
            response = await client.execute(
                webhook_url,
                content=message,
                embeds=[embed.to_dict()],
                username=self._settings.DISCORD_USERNAME,
            )
        except NotificationError as e:
            logger.error(f"Couldn't send Discord message: {e.message}")
            return None
        except Exception as e:
            logger.exception(f"Unexpected error sending Discord message: {e}")
            return None

        logger.info(f"Discord message sent resp.id: {response.id}")
        return response.id

    async def send_generic_message(self, message: str) -> List[str]:
        """Envoie un message simple (heartbeat) sur le webhook dédié."""
        embed = (
            DiscordEmbed()
            .set_title(message)
            .set_color(EMBED_COLOR)
            .set_timestamp()
        )
        return await self.send_message("", embed, self._settings.DISCORD_HEARTBEAT_WEB_HOOK)

    async def send_stock_alert(self, link: Link, store: Store) -> List[str]:
        """
        Envoie une alerte de disponibilité.

        Le contenu mentionne le groupe global puis le groupe de la série.
        """
        cart_url = link.cart_url or CART_URL_PLACEHOLDER

        embed = (
            DiscordEmbed()
            .set_title(STOCK_ALERT_TITLE)
            .set_description(self._settings.DISCORD_EMBED_DESCRIPTION)
            .set_timestamp()
            .set_color(EMBED_COLOR)
            .add_field("Store", store.name, inline=True)
            .add_field("Series", link.series, inline=True)
            .add_field("Price", format_price(link, store), inline=True)
            .add_field("Product Page", link.url)
            .add_field("Add to Cart", cart_url)
        )

        notify_text = list(self._settings.notify_group_list)
        notify_text += self._settings.notify_group_series_map.get(link.series, [])

        return await self.send_message(" ".join(notify_text), embed)

    # =========================================================================
    # MESSAGES PRIVES
    # =========================================================================

    async def _get_bot(self) -> Optional[DiscordBotClient]:
        """Retourne un client bot authentifié, None sans token."""
        token = self._settings.CAPTCHA_HANDLER_TOKEN
        if not token:
            return None
        bot = DiscordBotClient(token, await self._get_client())
        await bot.login()
        return bot

    async def _get_dm_channel(self, bot: Optional[DiscordBotClient]) -> Optional[str]:
        """Retourne l'id du salon privé avec l'utilisateur configuré."""
        user_id = self._settings.CAPTCHA_HANDLER_USER_ID
        if not (user_id and bot):
            return None
        user = await bot.fetch_user(user_id)
        return await bot.create_dm(str(user["id"]))

    async def send_dm(self, payload: DMPayload) -> Optional[DiscordMessage]:
        """
        Envoie un message privé à l'utilisateur configuré.

        Args:
            payload: Texte ou image à envoyer

        Returns:
            Le message envoyé, None si non configuré ou en cas d'erreur
        """
        if not self.is_dm_configured:
            logger.warning("Couldn't send Discord DM, missing configuration")
            return None

        logger.debug("Sending Discord DM")

        try:
            bot = await self._get_bot()
            channel_id = await self._get_dm_channel(bot)
            if not channel_id:
                logger.error("Unable to get Discord DM channel")
                return None

            if payload.is_image:
                result = await bot.send_file(channel_id, payload.content)
            else:
                result = await bot.send_message(channel_id, payload.content)

            logger.info("Discord DM sent")
            return result

        except NotificationError as e:
            logger.error(f"Couldn't send Discord DM: {e.message}")
        except OSError as e:
            logger.error(f"Couldn't send Discord DM, unreadable file: {e}")
        except Exception as e:
            logger.exception(f"Unexpected error sending Discord DM: {e}")
        return None

    async def get_dm_response(
        self,
        bot_message: Optional[DiscordMessage],
        timeout: float,
    ) -> str:
        """
        Attend la réponse de l'utilisateur à un message privé.

        Lit le salon toutes les CAPTCHA_HANDLER_POLL_INTERVAL secondes et
        retient la première réponse (au sens "répondre à") au message du bot.

        Args:
            bot_message: Message auquel l'utilisateur doit répondre
            timeout: Délai maximal en secondes

        Returns:
            Le texte de la réponse, "" si aucune réponse ou en cas d'erreur
        """
        if bot_message is None:
            return ""

        poll_interval = self._settings.CAPTCHA_HANDLER_POLL_INTERVAL
        iterations = max(int(timeout // poll_interval), 1)

        try:
            bot = await self._get_bot()
            channel_id = await self._get_dm_channel(bot)
        except NotificationError as e:
            logger.error(f"Couldn't get captcha response: {e.message}")
            return ""
        except Exception as e:
            logger.exception(f"Unexpected error getting Discord DM channel: {e}")
            return ""

        if not channel_id:
            logger.error("Unable to get Discord DM channel")
            return ""

        try:
            for _ in range(iterations):
                await asyncio.sleep(poll_interval)

                messages = await bot.fetch_messages(channel_id, after=bot_message.id)
                replies = [m for m in sort_by_id(messages) if m.is_reply_to(bot_message.id)]

                if replies:
                    reply = replies[0]
                    response = reply.clean_content
                    await bot.add_reaction(channel_id, reply.id, RESPONSE_ACK_EMOJI)
                    logger.info(f"Got captcha response: {response}")
                    return response

            await bot.send_message(channel_id, RESPONSE_TIMEOUT_TEXT)
            logger.error("No response from user")

        except NotificationError as e:
            logger.error(f"Couldn't get captcha response: {e.message}")
        except Exception as e:
            logger.exception(f"Unexpected error getting captcha response: {e}")
        return ""

    async def send_dm_and_get_response(
        self,
        payload: DMPayload,
        timeout: Optional[float] = None,
    ) -> str:
        """Envoie un message privé puis attend la réponse de l'utilisateur."""
        message = await self.send_dm(payload)
        return await self.get_dm_response(message, timeout or self.response_timeout)

    async def test_connection(self) -> bool:
        """
        Teste la connexion du bot Discord.

        Returns:
            True si le token est accepté par Discord
        """
        if not self._settings.CAPTCHA_HANDLER_TOKEN:
            return False

        try:
            bot = DiscordBotClient(self._settings.CAPTCHA_HANDLER_TOKEN, await self._get_client())
            user = await bot.login()
            logger.info(f"Discord bot connected: {user.get('username', 'Unknown')}")
            return True
        except NotificationError as e:
            logger.error(f"Discord connection test failed: {e.message}")
            return False


# Singleton
_discord_service: Optional[DiscordService] = None


def get_discord_service(settings: Optional[Settings] = None) -> DiscordService:
    """
    Retourne l'instance singleton du service Discord.

    L'instance est recréée quand d'autres settings sont fournis.

    Args:
        settings: Configuration du service (défaut: get_settings())

    Returns:
        DiscordService initialisé
    """
    global _discord_service
    if _discord_service is None or (
        settings is not None and _discord_service.settings is not settings
    ):
        _discord_service = DiscordService(settings=settings)
    return _discord_service


async def reset_discord_service() -> None:
    """Ferme et oublie l'instance singleton."""
    global _discord_service
    if _discord_service is not None:
        await _discord_service.close()
        _discord_service = None
