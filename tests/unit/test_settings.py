"""
Tests unitaires pour la configuration.

Ces tests verifient:
- Le decoupage des listes saisies en chaines
- Le parsing des mentions par serie
- La validation des durees et du niveau de log
"""

import pytest
from pydantic import ValidationError

from tests.conftest import HEARTBEAT_WEBHOOK, WEBHOOK_A, WEBHOOK_B, make_settings


class TestComputedProperties:
    """Tests pour les proprietes calculees."""

    def test_webhooks_list_strips_blanks(self):
        settings = make_settings(DISCORD_WEB_HOOK=f" {WEBHOOK_A} , ,{WEBHOOK_B}")
        assert settings.discord_webhooks_list == [WEBHOOK_A, WEBHOOK_B]

    def test_empty_webhooks(self):
        settings = make_settings(DISCORD_WEB_HOOK="")
        assert settings.discord_webhooks_list == []

    def test_notify_group_series_map(self):
        settings = make_settings(
            DISCORD_NOTIFY_GROUP_SERIES="3080:<@&1>, <@&2>; 3090 :@here;broken;:<@&9>"
        )
        assert settings.notify_group_series_map == {
            "3080": ["<@&1>", "<@&2>"],
            "3090": ["@here"],
        }

    def test_webhook_configured_with_heartbeat_only(self):
        settings = make_settings(DISCORD_WEB_HOOK="", DISCORD_HEARTBEAT_WEB_HOOK=HEARTBEAT_WEBHOOK)
        assert settings.is_discord_webhook_configured is True

    def test_nothing_configured(self):
        settings = make_settings(DISCORD_WEB_HOOK="", DISCORD_HEARTBEAT_WEB_HOOK=None)
        assert settings.is_discord_webhook_configured is False

    def test_captcha_handler_requires_token_and_user(self):
        assert make_settings().is_captcha_handler_configured is True
        assert make_settings(CAPTCHA_HANDLER_TOKEN=None).is_captcha_handler_configured is False
        assert make_settings(CAPTCHA_HANDLER_USER_ID=None).is_captcha_handler_configured is False


class TestValidation:
    """Tests pour les validateurs."""

    def test_log_level_upper_cased(self):
        assert make_settings(LOG_LEVEL="debug").LOG_LEVEL == "DEBUG"

    def test_log_level_invalid(self):
        with pytest.raises(ValidationError):
            make_settings(LOG_LEVEL="verbose")

    @pytest.mark.parametrize("field", ["CAPTCHA_HANDLER_POLL_INTERVAL", "CAPTCHA_HANDLER_RESPONSE_TIMEOUT"])
    def test_durations_must_be_positive(self, field):
        with pytest.raises(ValidationError):
            make_settings(**{field: 0})

    def test_negative_heartbeat_interval_rejected(self):
        with pytest.raises(ValidationError):
            make_settings(DISCORD_HEARTBEAT_INTERVAL_MINUTES=-1)

    def test_defaults(self):
        settings = make_settings(
            CAPTCHA_HANDLER_POLL_INTERVAL=5,
            CAPTCHA_HANDLER_RESPONSE_TIMEOUT=120,
        )
        assert settings.DISCORD_USERNAME == "streetmerchant"
        assert settings.DISCORD_HEARTBEAT_INTERVAL_MINUTES == 0
