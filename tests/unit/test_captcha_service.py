"""Tests unitaires pour le service de captcha."""

from unittest.mock import AsyncMock, MagicMock

import pytest

from merchant_notify.application.services.captcha_service import CaptchaService
from merchant_notify.config.constants import DMPayloadType
from merchant_notify.domain.entities.message import DiscordMessage
from merchant_notify.infrastructure.notifications.discord_service import DiscordService


@pytest.fixture
def mock_discord():
    """Service Discord mock configure pour les messages prives."""
    discord = MagicMock(spec=DiscordService)
    discord.is_dm_configured = True
    discord.send_dm = AsyncMock(return_value=DiscordMessage(id="1", channel_id="900"))
    discord.send_dm_and_get_response = AsyncMock(return_value="k7Xp2")
    return discord


class TestCaptchaService:
    """Tests pour CaptchaService.request_solution."""

    @pytest.mark.asyncio
    async def test_sends_image_then_prompt(self, mock_discord):
        service = CaptchaService(discord=mock_discord)

        solution = await service.request_solution("bestbuy", image_path="/tmp/captcha.png", timeout=30)

        assert solution == "k7Xp2"
        image_payload = mock_discord.send_dm.await_args.args[0]
        assert image_payload.type is DMPayloadType.IMAGE
        assert image_payload.content == "/tmp/captcha.png"

        prompt, timeout = mock_discord.send_dm_and_get_response.await_args.args
        assert prompt.type is DMPayloadType.TEXT
        assert "bestbuy" in prompt.content
        assert timeout == 30

    @pytest.mark.asyncio
    async def test_text_only(self, mock_discord):
        service = CaptchaService(discord=mock_discord)

        await service.request_solution("newegg")

        mock_discord.send_dm.assert_not_awaited()
        mock_discord.send_dm_and_get_response.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_not_configured(self, mock_discord):
        mock_discord.is_dm_configured = False
        service = CaptchaService(discord=mock_discord)

        assert await service.request_solution("bestbuy") == ""
        mock_discord.send_dm_and_get_response.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_timeout_returns_empty(self, mock_discord):
        mock_discord.send_dm_and_get_response.return_value = ""
        service = CaptchaService(discord=mock_discord)

        assert await service.request_solution("bestbuy") == ""

    @pytest.mark.asyncio
    async def test_end_to_end_with_fake_discord(self, discord_service, fake_discord, tmp_path):
        from tests.conftest import reply

        image = tmp_path / "captcha.png"
        image.write_bytes(b"png")
        # 1001 = capture, 1002 = message de demande
        fake_discord.message_batches = [[reply("1100", to="1002", content="abcd")]]

        solution = await CaptchaService(discord=discord_service).request_solution(
            "bestbuy", image_path=str(image)
        )

        assert solution == "abcd"
