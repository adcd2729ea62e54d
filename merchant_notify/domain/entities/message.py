"""
Entités message - Messages privés envoyés et reçus sur Discord.

DMPayload décrit ce que l'on envoie à l'utilisateur (texte ou image),
DiscordMessage représente un message retourné par l'API Discord.

UTILISATION:
    from merchant_notify.domain.entities.message import DMPayload, DiscordMessage

    payload = DMPayload.image("/tmp/captcha.png")
    message = DiscordMessage.from_api(response.json())
"""

import re
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from merchant_notify.config.constants import DMPayloadType


_USER_MENTION = re.compile(r"<@!?(\d+)>")


@dataclass(frozen=True)
class DMPayload:
    """
    Contenu d'un message privé.

    Pour le type TEXT, content est le texte du message.
    Pour le type IMAGE, content est le chemin d'un fichier local
    envoyé en pièce jointe sous son propre nom.
    """

    type: DMPayloadType
    content: str

    def __post_init__(self):
        # Accepte "text" / "image" depuis les couches API et config
        object.__setattr__(self, "type", DMPayloadType(self.type))

    @classmethod
    def text(cls, content: str) -> "DMPayload":
        return cls(type=DMPayloadType.TEXT, content=content)

    @classmethod
    def image(cls, path: str) -> "DMPayload":
        return cls(type=DMPayloadType.IMAGE, content=path)

    @property
    def is_image(self) -> bool:
        return self.type == DMPayloadType.IMAGE


@dataclass
class DiscordMessage:
    """
    Message Discord tel que retourné par l'API REST.

    Attributs:
        id: Snowflake du message
        channel_id: Snowflake du salon
        content: Contenu brut (mentions sous forme <@id>)
        author_id: Auteur du message
        referenced_message_id: Message auquel celui-ci répond
        mentions: Utilisateurs mentionnés {id: username}
    """

    id: str
    channel_id: str
    content: str = ""
    author_id: Optional[str] = None
    referenced_message_id: Optional[str] = None
    mentions: Dict[str, str] = field(default_factory=dict)

    @classmethod
    def from_api(cls, data: Dict[str, Any]) -> "DiscordMessage":
        """Construit un message depuis le JSON de l'API."""
        reference = data.get("message_reference") or {}
        author = data.get("author") or {}
        mentions = {
            str(user["id"]): user.get("global_name") or user.get("username", "")
            for user in data.get("mentions") or []
            if "id" in user
        }
        return cls(
            id=str(data["id"]),
            channel_id=str(data.get("channel_id", "")),
            content=data.get("content") or "",
            author_id=str(author["id"]) if "id" in author else None,
            referenced_message_id=(
                str(reference["message_id"]) if reference.get("message_id") else None
            ),
            mentions=mentions,
        )

    @property
    def clean_content(self) -> str:
        """Contenu avec les mentions d'utilisateurs remplacées par @nom."""
        def _replace(match: "re.Match[str]") -> str:
            name = self.mentions.get(match.group(1))
            return f"@{name}" if name else match.group(0)

        return _USER_MENTION.sub(_replace, self.content).strip()

    def is_reply_to(self, message_id: str) -> bool:
        return self.referenced_message_id == message_id


def sort_by_id(messages: List[DiscordMessage]) -> List[DiscordMessage]:
    """Trie des messages du plus ancien au plus récent (snowflakes croissants)."""
    return sorted(messages, key=lambda message: int(message.id))
