"""
Construction des embeds Discord.

Un embed est le bloc enrichi (titre, couleur, champs) affiché sous le
contenu d'un message. Le builder produit le JSON attendu par l'API.

UTILISATION:
    embed = (
        DiscordEmbed()
        .set_title("Stock alert!")
        .set_color("#52b788")
        .set_timestamp()
        .add_field("Store", "bestbuy", inline=True)
    )
    payload = {"embeds": [embed.to_dict()]}
"""

from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Union


class DiscordEmbed:
    """Builder chaînable pour un embed Discord."""

    def __init__(self):
        self.title: Optional[str] = None
        self.description: Optional[str] = None
        self.color: Optional[int] = None
        self.timestamp: Optional[str] = None
        self.fields: List[Dict[str, Any]] = []

    def set_title(self, title: str) -> "DiscordEmbed":
        self.title = title
        return self

    def set_description(self, description: str) -> "DiscordEmbed":
        self.description = description
        return self

    def set_color(self, color: Union[str, int]) -> "DiscordEmbed":
        """
        Définit la couleur de la bordure.

        Args:
            color: "#rrggbb" ou entier RGB
        """
        if isinstance(color, str):
            color = int(color.lstrip("#"), 16)
        self.color = color
        return self

    def set_timestamp(self, when: Optional[datetime] = None) -> "DiscordEmbed":
        """Horodate l'embed (maintenant par défaut, en UTC)."""
        when = when or datetime.now(timezone.utc)
        if when.tzinfo is None:
            when = when.replace(tzinfo=timezone.utc)
        self.timestamp = when.isoformat()
        return self

    def add_field(self, name: str, value: str, inline: bool = False) -> "DiscordEmbed":
        self.fields.append({"name": name, "value": value, "inline": inline})
        return self

    def to_dict(self) -> Dict[str, Any]:
        """Retourne le JSON de l'embed (sans les clés vides)."""
        data: Dict[str, Any] = {}
        if self.title is not None:
            data["title"] = self.title
        if self.description is not None:
            data["description"] = self.description
        if self.color is not None:
            data["color"] = self.color
        if self.timestamp is not None:
            data["timestamp"] = self.timestamp
        if self.fields:
            data["fields"] = list(self.fields)
        return data
