"""Point d'entrée: configure les logs et lance le serveur API."""

import logging

import uvicorn

from merchant_notify.api.app import create_app
from merchant_notify.config.settings import get_settings

settings = get_settings()

logging.basicConfig(
    level=getattr(logging, settings.LOG_LEVEL),
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
)

app = create_app()


def main() -> None:
    uvicorn.run(
        "merchant_notify.main:app",
        host=settings.HOST,
        port=settings.PORT,
        reload=settings.DEBUG,
    )


if __name__ == "__main__":
    main()
