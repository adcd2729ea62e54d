"""
Configuration centralisée de merchant-notify.

Ce module utilise Pydantic Settings pour :
- Charger les variables d'environnement depuis .env
- Valider les types et formats
- Fournir des valeurs par défaut sûres

UTILISATION:
    from merchant_notify.config.settings import get_settings
    settings = get_settings()
    print(settings.discord_webhooks_list)

MODIFICATION:
    - Pour ajouter une nouvelle variable : ajouter un attribut à la classe Settings
    - Les listes sont saisies comme chaînes séparées par des virgules et
      exposées via des propriétés calculées
"""

from pydantic_settings import BaseSettings
from pydantic import Field, field_validator
from typing import Dict, List, Optional
from functools import lru_cache


def _split_csv(value: Optional[str]) -> List[str]:
    """Découpe une chaîne séparée par des virgules en liste nettoyée."""
    if not value:
        return []
    return [item.strip() for item in value.split(",") if item.strip()]


class Settings(BaseSettings):
    """
    Configuration chargée depuis les variables d'environnement.

    Les variables sont automatiquement chargées depuis :
    1. Variables d'environnement système
    2. Fichier .env (si présent)

    Attributs:
        DISCORD_WEB_HOOK: Webhooks Discord pour les alertes de stock
        DISCORD_HEARTBEAT_WEB_HOOK: Webhook dédié aux messages génériques
        DISCORD_NOTIFY_GROUP: Mentions ajoutées à chaque alerte
        DISCORD_NOTIFY_GROUP_SERIES: Mentions par série de produit

        CAPTCHA_HANDLER_TOKEN: Token du bot utilisé pour les messages privés
        CAPTCHA_HANDLER_USER_ID: Utilisateur qui reçoit les messages privés
        CAPTCHA_HANDLER_POLL_INTERVAL: Secondes entre deux lectures des réponses
        CAPTCHA_HANDLER_RESPONSE_TIMEOUT: Secondes d'attente d'une réponse
    """

    # ==========================================================================
    # APPLICATION
    # ==========================================================================
    APP_NAME: str = "merchant-notify"
    DEBUG: bool = Field(default=False, description="Active le mode debug")
    LOG_LEVEL: str = Field(default="INFO", description="Niveau de log")

    # ==========================================================================
    # SERVEUR
    # ==========================================================================
    HOST: str = Field(default="0.0.0.0", description="Adresse d'écoute")
    PORT: int = Field(default=8000, description="Port d'écoute")

    # ==========================================================================
    # DISCORD (webhooks)
    # ==========================================================================
    DISCORD_WEB_HOOK: str = Field(
        default="",
        description="URLs de webhooks Discord (séparées par des virgules)"
    )
    DISCORD_HEARTBEAT_WEB_HOOK: Optional[str] = Field(
        default=None,
        description="Webhook pour les messages génériques (heartbeat)"
    )
    DISCORD_NOTIFY_GROUP: str = Field(
        default="",
        description="Mentions ajoutées à chaque alerte (séparées par des virgules)"
    )
    DISCORD_NOTIFY_GROUP_SERIES: str = Field(
        default="",
        description="Mentions par série, format 'serie:mention,mention;serie:mention'"
    )
    DISCORD_USERNAME: str = Field(
        default="streetmerchant",
        description="Nom affiché par le webhook"
    )
    DISCORD_EMBED_DESCRIPTION: str = Field(
        default="> provided by streetmerchant with :heart:",
        description="Description de l'embed des alertes de stock"
    )
    DISCORD_HEARTBEAT_INTERVAL_MINUTES: int = Field(
        default=0,
        description="Période du job heartbeat en minutes (0 = désactivé)"
    )

    # ==========================================================================
    # CAPTCHA HANDLER (messages privés via bot)
    # ==========================================================================
    CAPTCHA_HANDLER_TOKEN: Optional[str] = Field(
        default=None,
        description="Token du bot Discord (obtenu sur le portail développeur)"
    )
    CAPTCHA_HANDLER_USER_ID: Optional[str] = Field(
        default=None,
        description="ID de l'utilisateur Discord destinataire des messages privés"
    )
    CAPTCHA_HANDLER_POLL_INTERVAL: float = Field(
        default=5,
        description="Intervalle de lecture des réponses en secondes"
    )
    CAPTCHA_HANDLER_RESPONSE_TIMEOUT: float = Field(
        default=120,
        description="Délai d'attente d'une réponse en secondes"
    )

    # ==========================================================================
    # VALIDATION
    # ==========================================================================

    @field_validator("LOG_LEVEL")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Valide le niveau de log."""
        allowed = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")
        if v.upper() not in allowed:
            raise ValueError(f"LOG_LEVEL doit être parmi {allowed}")
        return v.upper()

    @field_validator("CAPTCHA_HANDLER_POLL_INTERVAL", "CAPTCHA_HANDLER_RESPONSE_TIMEOUT")
    @classmethod
    def validate_positive_seconds(cls, v: float) -> float:
        """Les durées du captcha handler doivent être strictement positives."""
        if v <= 0:
            raise ValueError("la durée doit être strictement positive")
        return v

    @field_validator("DISCORD_HEARTBEAT_INTERVAL_MINUTES")
    @classmethod
    def validate_heartbeat_interval(cls, v: int) -> int:
        """Valide l'intervalle du heartbeat (0 désactive le job)."""
        if v < 0:
            raise ValueError("DISCORD_HEARTBEAT_INTERVAL_MINUTES doit être >= 0")
        return v

    # ==========================================================================
    # PROPRIÉTÉS CALCULÉES
    # ==========================================================================

    @property
    def discord_webhooks_list(self) -> List[str]:
        """Retourne la liste des webhooks Discord configurés."""
        return _split_csv(self.DISCORD_WEB_HOOK)

    @property
    def notify_group_list(self) -> List[str]:
        """Retourne les mentions ajoutées à toutes les alertes."""
        return _split_csv(self.DISCORD_NOTIFY_GROUP)

    @property
    def notify_group_series_map(self) -> Dict[str, List[str]]:
        """
        Retourne les mentions par série de produit.

        Exemple: "3080:<@&1>,<@&2>;3090:@here"
            -> {"3080": ["<@&1>", "<@&2>"], "3090": ["@here"]}
        """
        mapping: Dict[str, List[str]] = {}
        for entry in self.DISCORD_NOTIFY_GROUP_SERIES.split(";"):
            series, sep, mentions = entry.partition(":")
            if not sep or not series.strip():
                continue
            mapping[series.strip()] = _split_csv(mentions)
        return mapping

    @property
    def is_discord_webhook_configured(self) -> bool:
        """Vérifie si au moins un webhook est configuré."""
        return bool(self.discord_webhooks_list or self.DISCORD_HEARTBEAT_WEB_HOOK)

    @property
    def is_captcha_handler_configured(self) -> bool:
        """Vérifie si les messages privés sont configurés."""
        return bool(self.CAPTCHA_HANDLER_TOKEN and self.CAPTCHA_HANDLER_USER_ID)

    # ==========================================================================
    # CONFIGURATION PYDANTIC
    # ==========================================================================

    class Config:
        """Configuration Pydantic Settings."""
        env_file = ".env"
        env_file_encoding = "utf-8"
        case_sensitive = True
        extra = "ignore"


@lru_cache()
def get_settings() -> Settings:
    """
    Retourne l'instance unique des settings (singleton avec cache).

    Returns:
        Settings: Instance des paramètres de l'application
    """
    return Settings()
