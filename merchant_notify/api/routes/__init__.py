"""
Routes API.

Expose tous les routeurs pour inclusion dans l'application FastAPI.
"""

from merchant_notify.api.routes.health import router as health_router
from merchant_notify.api.routes.notifications import router as notifications_router

__all__ = [
    "health_router",
    "notifications_router",
]
