"""
Factory de l'application FastAPI.

Crée et configure l'application avec:
- Routes
- Handlers d'erreurs
- Cycle de vie (scheduler, client HTTP Discord)

UTILISATION:
    from merchant_notify.api.app import create_app

    app = create_app()
    # ou pour tests
    app = create_app(settings=test_settings)
"""

import logging
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from merchant_notify import __version__
from merchant_notify.config.settings import Settings
from merchant_notify.api.dependencies import get_app_settings
from merchant_notify.api.routes import health_router, notifications_router
from merchant_notify.domain.exceptions import (
    DiscordApiError,
    DomainError,
    NotificationNotConfiguredError,
    WebhookUrlInvalidError,
)

logger = logging.getLogger(__name__)


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """
    Crée et configure l'application FastAPI.

    Args:
        settings: Settings optionnels (pour les tests)

    Returns:
        Application FastAPI configurée
    """
    app = FastAPI(
        title="merchant-notify API",
        description="Notifications Discord pour le suivi de disponibilité des produits.",
        version=__version__,
        docs_url="/api/docs",
        redoc_url="/api/redoc",
        openapi_url="/api/openapi.json",
    )

    if settings is not None:
        app.dependency_overrides[get_app_settings] = lambda: settings

    configure_error_handlers(app)
    register_routes(app)
    configure_lifecycle(app, settings)

    logger.info("Application created and configured")
    return app


def configure_error_handlers(app: FastAPI) -> None:
    """
    Configure les handlers d'erreurs globaux.

    Args:
        app: Application FastAPI
    """

    @app.exception_handler(DomainError)
    async def domain_error_handler(request: Request, exc: DomainError):
        """Handler pour les erreurs du domaine."""
        status_code = get_status_code_for_error(exc)

        logger.warning(f"Domain error: {exc.code} - {exc.message}")

        return JSONResponse(status_code=status_code, content=exc.to_dict())

    @app.exception_handler(Exception)
    async def general_error_handler(request: Request, exc: Exception):
        """Handler pour les erreurs non gérées."""
        logger.exception(f"Unhandled error: {exc}")

        return JSONResponse(
            status_code=500,
            content={
                "error": "INTERNAL_ERROR",
                "message": "Une erreur inattendue s'est produite",
                "details": {},
            },
        )

    logger.debug("Error handlers configured")


def get_status_code_for_error(exc: DomainError) -> int:
    """
    Détermine le code HTTP pour une erreur du domaine.

    Args:
        exc: Exception du domaine

    Returns:
        Code HTTP approprié
    """
    if isinstance(exc, (NotificationNotConfiguredError, WebhookUrlInvalidError)):
        return 400
    if isinstance(exc, DiscordApiError):
        return 502
    return 400


def register_routes(app: FastAPI) -> None:
    """
    Enregistre tous les routeurs sous le préfixe /api.

    Args:
        app: Application FastAPI
    """
    app.include_router(health_router, prefix="/api")
    app.include_router(notifications_router, prefix="/api")

    logger.debug("Routes registered")


def configure_lifecycle(app: FastAPI, settings: Optional[Settings] = None) -> None:
    """
    Configure les evenements du cycle de vie.

    Args:
        app: Application FastAPI
        settings: Settings optionnels transmis au scheduler
    """
    from merchant_notify.jobs.scheduler import create_scheduler, start_scheduler, stop_scheduler
    from merchant_notify.infrastructure.notifications.discord_service import reset_discord_service

    @app.on_event("startup")
    async def startup():
        """Evenement de demarrage."""
        logger.info("Application starting up...")

        current = settings or get_app_settings()

        if current.is_discord_webhook_configured:
            logger.info("Discord webhooks configured")
        else:
            logger.warning("Discord webhooks NOT configured")

        if current.is_captcha_handler_configured:
            logger.info("Discord DM (captcha handler) configured")
        else:
            logger.warning("Discord DM (captcha handler) NOT configured")

        try:
            scheduler = create_scheduler(current)
            start_scheduler(scheduler)
            logger.info("Background job scheduler started")
        except Exception as e:
            logger.error(f"Failed to start scheduler: {e}")

        logger.info("Application startup complete")

    @app.on_event("shutdown")
    async def shutdown():
        """Evenement d'arret."""
        logger.info("Application shutting down...")

        try:
            stop_scheduler()
            logger.info("Background job scheduler stopped")
        except Exception as e:
            logger.error(f"Error stopping scheduler: {e}")

        await reset_discord_service()

        logger.info("Application shutdown complete")
