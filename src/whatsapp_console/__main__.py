"""Entrypoint: python -m whatsapp_console"""
from __future__ import annotations

import uvicorn

from whatsapp_console.api.middleware.correlation_id import configure_logging
from whatsapp_console.config import settings


def main() -> None:
    configure_logging(settings.LOG_LEVEL)
    uvicorn.run(
        "whatsapp_console.app:create_app",
        factory=True,
        host=settings.APP_HOST,
        port=settings.APP_PORT,
        log_level=settings.LOG_LEVEL.lower(),
        # Keep the handler installed above instead of uvicorn's default config.
        log_config=None,
    )


if __name__ == "__main__":
    main()
