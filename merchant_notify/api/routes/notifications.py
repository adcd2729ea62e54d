"""
Routes API pour les notifications.

Permet de déclencher les notifications Discord depuis l'extérieur
(moteur de suivi, tests manuels).
"""

from typing import List, Optional, Union

from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field

from merchant_notify.api.dependencies import get_notifier
from merchant_notify.domain.entities.message import DMPayload
from merchant_notify.domain.entities.product import Link, Store
from merchant_notify.domain.exceptions import NotificationNotConfiguredError
from merchant_notify.infrastructure.notifications.discord_service import DiscordService

router = APIRouter(prefix="/notifications", tags=["Notifications"])


class HeartbeatRequest(BaseModel):
    """Requête de message générique."""
    message: str = Field(..., min_length=1)


class StockAlertRequest(BaseModel):
    """Requête d'alerte de disponibilité."""
    store: str
    currency: str = ""
    series: str
    url: str
    cart_url: Optional[str] = None
    price: Optional[Union[float, str]] = None


class DirectMessageRequest(BaseModel):
    """
    Requête de message privé.

    Texte uniquement: les images sont envoyées par CaptchaService
    depuis le serveur, jamais à partir d'un chemin fourni par le client.
    """
    content: str = Field(..., min_length=1)
    wait_for_response: bool = False
    timeout: Optional[float] = Field(default=None, gt=0)


class NotificationResponse(BaseModel):
    """Réponse d'envoi de notification."""
    success: bool
    channel: str = "discord"
    message_ids: List[str] = []
    error: Optional[str] = None


class DirectMessageResponse(BaseModel):
    """Réponse d'envoi de message privé."""
    success: bool
    message_id: Optional[str] = None
    response: Optional[str] = None


class NotificationStatusResponse(BaseModel):
    """Statut des services de notification."""
    webhook_configured: bool
    dm_configured: bool
    bot_connected: bool


def _require_webhook(discord: DiscordService) -> None:
    if not discord.is_webhook_configured:
        raise NotificationNotConfiguredError("discord", "DISCORD_WEB_HOOK")


def _require_dm(discord: DiscordService) -> None:
    if not discord.is_dm_configured:
        raise NotificationNotConfiguredError(
            "discord", "CAPTCHA_HANDLER_TOKEN / CAPTCHA_HANDLER_USER_ID"
        )


@router.get("/status", response_model=NotificationStatusResponse)
async def get_notification_status(discord: DiscordService = Depends(get_notifier)):
    """
    Retourne le statut des services de notification.
    """
    connected = False
    if discord.is_dm_configured:
        connected = await discord.test_connection()

    return NotificationStatusResponse(
        webhook_configured=discord.is_webhook_configured,
        dm_configured=discord.is_dm_configured,
        bot_connected=connected,
    )


@router.post("/test", response_model=NotificationResponse)
async def test_notification(discord: DiscordService = Depends(get_notifier)):
    """
    Envoie une notification de test sur le webhook de heartbeat.
    """
    _require_webhook(discord)
    sent = await discord.send_generic_message("Test notification from merchant-notify")
    return NotificationResponse(success=bool(sent), message_ids=sent)


@router.post("/heartbeat", response_model=NotificationResponse)
async def send_heartbeat(
    request: HeartbeatRequest,
    discord: DiscordService = Depends(get_notifier),
):
    """
    Envoie un message générique.
    """
    _require_webhook(discord)
    sent = await discord.send_generic_message(request.message)
    return NotificationResponse(success=bool(sent), message_ids=sent)


@router.post("/stock-alert", response_model=NotificationResponse)
async def send_stock_alert(
    request: StockAlertRequest,
    discord: DiscordService = Depends(get_notifier),
):
    """
    Envoie une alerte de disponibilité sur tous les webhooks.
    """
    _require_webhook(discord)

    store = Store(name=request.store, currency=request.currency)
    link = Link(
        series=request.series,
        url=request.url,
        cart_url=request.cart_url,
        price=request.price,
    )

    sent = await discord.send_stock_alert(link, store)
    return NotificationResponse(
        success=bool(sent),
        message_ids=sent,
        error=None if sent else "No webhook accepted the message",
    )


@router.post("/dm", response_model=DirectMessageResponse)
async def send_direct_message(
    request: DirectMessageRequest,
    discord: DiscordService = Depends(get_notifier),
):
    """
    Envoie un message privé, et attend éventuellement la réponse.
    """
    _require_dm(discord)

    message = await discord.send_dm(DMPayload.text(request.content))
    if message is None:
        return DirectMessageResponse(success=False)

    response = None
    if request.wait_for_response:
        response = await discord.get_dm_response(
            message,
            request.timeout or discord.response_timeout,
        )

    return DirectMessageResponse(success=True, message_id=message.id, response=response)
