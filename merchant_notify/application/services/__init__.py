"""
Services d'application de merchant-notify.

- CaptchaService: résolution de captcha par l'utilisateur via message privé
"""

from merchant_notify.application.services.captcha_service import CaptchaService

__all__ = ["CaptchaService"]
