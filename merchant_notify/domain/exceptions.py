"""
Exceptions métier de merchant-notify.

Ce module définit les exceptions liées à l'envoi des notifications.
Les services d'infrastructure les journalisent; la couche API les traduit
en réponses HTTP.

UTILISATION:
    from merchant_notify.domain.exceptions import WebhookUrlInvalidError

    raise WebhookUrlInvalidError(url)

MODIFICATION:
    - Pour ajouter une exception : créer une classe héritant de DomainError
    - Pour ajouter des attributs : les définir dans __init__ et appeler super()
"""

from typing import Optional


class DomainError(Exception):
    """
    Exception de base pour toutes les erreurs du domaine.

    Attributs:
        message: Message d'erreur humainement lisible
        code: Code unique de l'erreur (pour logging/debugging)
        details: Détails supplémentaires optionnels
    """

    def __init__(
        self,
        message: str,
        code: str = "DOMAIN_ERROR",
        details: Optional[dict] = None
    ):
        self.message = message
        self.code = code
        self.details = details or {}
        super().__init__(self.message)

    def to_dict(self) -> dict:
        """Convertit l'exception en dictionnaire pour la sérialisation."""
        return {
            "error": self.code,
            "message": self.message,
            "details": self.details,
        }


# =============================================================================
# EXCEPTIONS NOTIFICATIONS
# =============================================================================

class NotificationError(DomainError):
    """Exception de base pour les erreurs d'envoi de notification."""

    def __init__(
        self,
        message: str,
        code: str = "NOTIFICATION_ERROR",
        details: Optional[dict] = None
    ):
        super().__init__(message=message, code=code, details=details)


class NotificationNotConfiguredError(NotificationError):
    """
    Le canal de notification n'est pas configuré.

    Lancée quand une action explicite (route API, captcha) exige un
    webhook ou un bot absent de la configuration.
    """

    def __init__(self, channel: str, missing: str):
        super().__init__(
            message=f"Le canal '{channel}' n'est pas configuré: {missing} manquant",
            code="NOTIFICATION_NOT_CONFIGURED",
            details={"channel": channel, "missing": missing},
        )
        self.channel = channel
        self.missing = missing


class WebhookUrlInvalidError(NotificationError):
    """
    L'URL du webhook ne contient pas d'identifiant et de token.

    Format attendu: https://discord.com/api/webhooks/<id>/<token>
    """

    def __init__(self, url: str):
        super().__init__(
            message="could not get discord webhook",
            code="WEBHOOK_URL_INVALID",
            details={"url": url},
        )
        self.url = url


class DiscordApiError(NotificationError):
    """
    L'API Discord a répondu avec une erreur.

    Attributs:
        status_code: Code HTTP de la réponse
        reason: Message d'erreur retourné par l'API
    """

    def __init__(self, status_code: int, reason: str, path: str = ""):
        super().__init__(
            message=f"Discord API error {status_code}: {reason}",
            code="DISCORD_API_ERROR",
            details={"status_code": status_code, "reason": reason, "path": path},
        )
        self.status_code = status_code
        self.reason = reason
        self.path = path
