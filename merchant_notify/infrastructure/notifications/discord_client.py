"""
Clients HTTP pour l'API REST Discord.

Encapsule les appels HTTP vers Discord:
- DiscordWebhookClient: exécution de webhooks (alertes, heartbeat)
- DiscordBotClient: messages privés via un bot (captcha)

ARCHITECTURE:
- Responsabilité unique : transport HTTP vers Discord
- Pas de logique métier, utilisé par DiscordService
- Le client httpx est fourni par l'appelant, qui en gère le cycle de vie

DOCUMENTATION:
https://discord.com/developers/docs/reference
"""

import json
import logging
import re
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple
from urllib.parse import quote

import httpx

from merchant_notify.config.constants import DISCORD_API_URL, MESSAGES_FETCH_LIMIT
from merchant_notify.domain.entities.message import DiscordMessage
from merchant_notify.domain.exceptions import DiscordApiError, WebhookUrlInvalidError

logger = logging.getLogger(__name__)

_WEBHOOK_URL = re.compile(r".*/webhooks/(\d+)/(.+)")


def parse_webhook_url(url: str) -> Tuple[str, str]:
    """
    Extrait l'identifiant et le token d'une URL de webhook.

    Args:
        url: https://discord.com/api/webhooks/<id>/<token>

    Returns:
        (id, token)

    Raises:
        WebhookUrlInvalidError: Si l'URL ne correspond pas au format
    """
    match = _WEBHOOK_URL.match(url or "")
    if not match:
        raise WebhookUrlInvalidError(url)
    return match.group(1), match.group(2)


async def _request(
    http: httpx.AsyncClient,
    method: str,
    path: str,
    headers: Optional[Dict[str, str]] = None,
    **kwargs: Any,
) -> Any:
    """
    Effectue une requête vers l'API et traite la réponse.

    Returns:
        Le JSON de la réponse, ou None pour une réponse vide (204)

    Raises:
        DiscordApiError: Erreur réseau ou réponse non 2xx
    """
    logger.debug(f"{method} {path}")

    try:
        response = await http.request(
            method, f"{DISCORD_API_URL}{path}", headers=headers, **kwargs
        )
    except httpx.TimeoutException:
        raise DiscordApiError(0, "request timeout", path)
    except httpx.RequestError as e:
        raise DiscordApiError(0, f"request error: {e}", path)

    if response.is_success:
        return response.json() if response.content else None

    raise DiscordApiError(response.status_code, _parse_error(response), path)


def _parse_error(response: httpx.Response) -> str:
    """Extrait le message d'erreur d'une réponse Discord."""
    try:
        data = response.json()
        return data.get("message", str(data))
    except ValueError:
        return response.text[:200]


class DiscordWebhookClient:
    """Exécute des webhooks Discord."""

    def __init__(self, http: httpx.AsyncClient):
        self._http = http

    async def execute(
        self,
        webhook_url: str,
        content: str = "",
        embeds: Optional[List[Dict[str, Any]]] = None,
        username: Optional[str] = None,
    ) -> DiscordMessage:
        """
        Poste un message via un webhook.

        wait=true fait retourner le message créé par Discord.

        Raises:
            WebhookUrlInvalidError: URL mal formée
            DiscordApiError: Erreur de l'API
        """
        webhook_id, token = parse_webhook_url(webhook_url)

        body: Dict[str, Any] = {"content": content, "embeds": embeds or []}
        if username:
            body["username"] = username

        data = await _request(
            self._http,
            "POST",
            f"/webhooks/{webhook_id}/{token}",
            params={"wait": "true"},
            json=body,
        )
        return DiscordMessage.from_api(data)


class DiscordBotClient:
    """
    Client REST authentifié par token de bot.

    Seuls les appels nécessaires aux messages privés sont exposés.
    """

    def __init__(self, token: str, http: httpx.AsyncClient):
        self._token = token
        self._http = http

    @property
    def _headers(self) -> Dict[str, str]:
        return {"Authorization": f"Bot {self._token}"}

    async def _call(self, method: str, path: str, **kwargs: Any) -> Any:
        return await _request(self._http, method, path, headers=self._headers, **kwargs)

    async def login(self) -> Dict[str, Any]:
        """Vérifie le token et retourne l'utilisateur du bot."""
        return await self._call("GET", "/users/@me")

    async def fetch_user(self, user_id: str) -> Dict[str, Any]:
        return await self._call("GET", f"/users/{user_id}")

    async def create_dm(self, user_id: str) -> str:
        """Ouvre (ou retrouve) le salon privé avec l'utilisateur et retourne son id."""
        data = await self._call(
            "POST", "/users/@me/channels", json={"recipient_id": user_id}
        )
        return str(data["id"])

    async def send_message(self, channel_id: str, content: str) -> DiscordMessage:
        data = await self._call(
            "POST", f"/channels/{channel_id}/messages", json={"content": content}
        )
        return DiscordMessage.from_api(data)

    async def send_file(self, channel_id: str, path: str) -> DiscordMessage:
        """Envoie un fichier local en pièce jointe, nommé d'après le fichier."""
        file_path = Path(path)
        payload = {"attachments": [{"id": 0, "filename": file_path.name}]}
        data = await self._call(
            "POST",
            f"/channels/{channel_id}/messages",
            data={"payload_json": json.dumps(payload)},
            files={"files[0]": (file_path.name, file_path.read_bytes())},
        )
        return DiscordMessage.from_api(data)

    async def fetch_messages(
        self,
        channel_id: str,
        after: Optional[str] = None,
        limit: int = MESSAGES_FETCH_LIMIT,
    ) -> List[DiscordMessage]:
        """Retourne les messages du salon postés après `after`."""
        params: Dict[str, Any] = {"limit": limit}
        if after:
            params["after"] = after
        data = await self._call(
            "GET", f"/channels/{channel_id}/messages", params=params
        )
        return [DiscordMessage.from_api(item) for item in data or []]

    async def add_reaction(self, channel_id: str, message_id: str, emoji: str) -> None:
        await self._call(
            "PUT",
            f"/channels/{channel_id}/messages/{message_id}"
            f"/reactions/{quote(emoji)}/@me",
        )
