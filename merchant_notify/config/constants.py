"""
Constantes de l'application.

Valeurs fixes partagées par les services de notification Discord.
"""

from enum import Enum


DISCORD_API_URL = "https://discord.com/api/v10"

# Couleur des embeds (#52b788)
EMBED_COLOR = 0x52B788

STOCK_ALERT_TITLE = "_**Stock alert!**_"
CART_URL_PLACEHOLDER = "Link Unavailable"
PRICE_PLACEHOLDER = "Unknown"

RESPONSE_ACK_EMOJI = "✅"
RESPONSE_TIMEOUT_TEXT = "Timed out waiting for response... 😿"

# Nombre maximum de messages retournés par l'API en une requête
MESSAGES_FETCH_LIMIT = 100


class DMPayloadType(str, Enum):
    """Type de contenu d'un message privé."""
    TEXT = "text"
    IMAGE = "image"
