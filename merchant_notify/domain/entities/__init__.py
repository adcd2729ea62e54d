"""Entités du domaine."""

from merchant_notify.domain.entities.product import Link, Store
from merchant_notify.domain.entities.message import DMPayload, DiscordMessage

__all__ = ["Link", "Store", "DMPayload", "DiscordMessage"]
