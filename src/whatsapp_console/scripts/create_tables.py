"""One-time script: create the console tables in Postgres."""
from __future__ import annotations

import asyncio
import logging

from whatsapp_console.api.middleware.correlation_id import configure_logging
from whatsapp_console.infrastructure.db.base import Base
from whatsapp_console.infrastructure.db import models  # noqa: F401
from whatsapp_console.infrastructure.db.session import engine

logger = logging.getLogger(__name__)


async def create_tables() -> None:
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    await engine.dispose()
    logger.info("Created tables: %s", ", ".join(sorted(Base.metadata.tables)))


def main() -> None:
    configure_logging()
    asyncio.run(create_tables())


if __name__ == "__main__":
    main()
