"""
Fixtures pytest partagees pour les tests merchant-notify.

Ce fichier contient:
- Un faux serveur Discord (httpx.MockTransport) qui enregistre les requetes
- Des fabriques de Settings isolees du fichier .env
- Des donnees de test (magasin, lien produit)

UTILISATION:
    def test_something(discord_service, fake_discord):
        ...
        assert fake_discord.requests
"""

import json
import re
from typing import Any, Dict, List, Optional

import httpx
import pytest

from merchant_notify.config.settings import Settings
from merchant_notify.domain.entities.product import Link, Store
from merchant_notify.infrastructure.notifications.discord_service import DiscordService


WEBHOOK_A = "https://discord.com/api/webhooks/111/token-a"
WEBHOOK_B = "https://discord.com/api/webhooks/222/token-b"
HEARTBEAT_WEBHOOK = "https://discord.com/api/webhooks/333/token-heartbeat"

BOT_TOKEN = "bot-token"
USER_ID = "424242"
DM_CHANNEL_ID = "900"


# =============================================================================
# FAUX SERVEUR DISCORD
# =============================================================================

class FakeDiscord:
    """
    Imitation minimale de l'API REST Discord.

    Attributs:
        requests: Requetes recues, dans l'ordre
        failing_webhooks: Ids de webhooks qui repondent 404
        message_batches: Reponses successives de GET /channels/{id}/messages
        valid_token: Token de bot accepte
        fetch_status: Code HTTP force pour la lecture des messages
    """

    def __init__(self):
        self.requests: List[httpx.Request] = []
        self.failing_webhooks: set = set()
        self.message_batches: List[List[Dict[str, Any]]] = []
        self.valid_token = BOT_TOKEN
        self.fetch_status: Optional[int] = None
        self._next_id = 1000

    def next_id(self) -> str:
        self._next_id += 1
        return str(self._next_id)

    # -------------------------------------------------------------------------

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        path = request.url.path.replace("/api/v10", "", 1)

        webhook = re.fullmatch(r"/webhooks/(\d+)/([^/]+)", path)
        if webhook and request.method == "POST":
            if webhook.group(1) in self.failing_webhooks:
                return httpx.Response(404, json={"message": "Unknown Webhook", "code": 10015})
            body = json.loads(request.content)
            return httpx.Response(200, json=self._message(body.get("content", ""), "50"))

        if request.headers.get("Authorization") != f"Bot {self.valid_token}":
            return httpx.Response(401, json={"message": "401: Unauthorized", "code": 0})

        if path == "/users/@me" and request.method == "GET":
            return httpx.Response(200, json={"id": "1", "username": "merchant-bot"})

        user = re.fullmatch(r"/users/(\d+)", path)
        if user and request.method == "GET":
            return httpx.Response(200, json={"id": user.group(1), "username": "alice"})

        if path == "/users/@me/channels" and request.method == "POST":
            return httpx.Response(200, json={"id": DM_CHANNEL_ID, "type": 1})

        if path == f"/channels/{DM_CHANNEL_ID}/messages":
            if request.method == "POST":
                content = ""
                if request.headers.get("content-type", "").startswith("application/json"):
                    content = json.loads(request.content).get("content", "")
                return httpx.Response(200, json=self._message(content, DM_CHANNEL_ID))
            if request.method == "GET":
                if self.fetch_status:
                    return httpx.Response(self.fetch_status, json={"message": "Missing Access", "code": 50001})
                batch = self.message_batches.pop(0) if self.message_batches else []
                return httpx.Response(200, json=batch)

        if "/reactions/" in path and request.method == "PUT":
            return httpx.Response(204)

        return httpx.Response(404, json={"message": "404: Not Found", "code": 0})

    def _message(self, content: str, channel_id: str) -> Dict[str, Any]:
        return {
            "id": self.next_id(),
            "channel_id": channel_id,
            "content": content,
            "author": {"id": "1", "username": "merchant-bot"},
        }

    # -------------------------------------------------------------------------

    def calls(self, method: str, path_fragment: str) -> List[httpx.Request]:
        return [
            r for r in self.requests
            if r.method == method and path_fragment in r.url.path
        ]

    def json_bodies(self, method: str, path_fragment: str) -> List[Dict[str, Any]]:
        return [json.loads(r.content) for r in self.calls(method, path_fragment)]


def reply(message_id: str, to: str, content: str, mentions: Optional[list] = None) -> dict:
    """Construit un message utilisateur repondant au message `to`."""
    return {
        "id": message_id,
        "channel_id": DM_CHANNEL_ID,
        "content": content,
        "author": {"id": USER_ID, "username": "alice"},
        "message_reference": {"message_id": to, "channel_id": DM_CHANNEL_ID},
        "mentions": mentions or [],
    }


# =============================================================================
# FIXTURES
# =============================================================================

def make_settings(**overrides) -> Settings:
    """Settings de test, sans lecture du fichier .env."""
    values = {
        "DISCORD_WEB_HOOK": f"{WEBHOOK_A},{WEBHOOK_B}",
        "DISCORD_HEARTBEAT_WEB_HOOK": HEARTBEAT_WEBHOOK,
        "DISCORD_NOTIFY_GROUP": "@here",
        "DISCORD_NOTIFY_GROUP_SERIES": "3080:<@&1>,<@&2>;3090:<@&3>",
        "CAPTCHA_HANDLER_TOKEN": BOT_TOKEN,
        "CAPTCHA_HANDLER_USER_ID": USER_ID,
        "CAPTCHA_HANDLER_POLL_INTERVAL": 0.125,
        "CAPTCHA_HANDLER_RESPONSE_TIMEOUT": 0.375,
    }
    values.update(overrides)
    return Settings(_env_file=None, **values)


@pytest.fixture
def settings() -> Settings:
    return make_settings()


@pytest.fixture
def fake_discord() -> FakeDiscord:
    return FakeDiscord()


@pytest.fixture
def http_client(fake_discord) -> httpx.AsyncClient:
    return httpx.AsyncClient(transport=httpx.MockTransport(fake_discord.handler))


@pytest.fixture
def discord_service(settings, http_client) -> DiscordService:
    return DiscordService(settings=settings, http=http_client)


@pytest.fixture
def store() -> Store:
    return Store(name="bestbuy", currency="$")


@pytest.fixture
def link() -> Link:
    return Link(
        series="3080",
        url="https://www.bestbuy.com/site/rtx-3080",
        cart_url="https://api.bestbuy.com/click/-/6429440/cart",
        price=699.99,
    )
