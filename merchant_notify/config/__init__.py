"""Configuration de merchant-notify."""

from merchant_notify.config.settings import Settings, get_settings

__all__ = ["Settings", "get_settings"]
