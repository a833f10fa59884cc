"""Seed development data: creates a sample customer with a short history."""
from __future__ import annotations

import asyncio
import logging

from whatsapp_console.api.middleware.correlation_id import configure_logging
from whatsapp_console.domain.value_objects.enums import MessageStatus
from whatsapp_console.infrastructure.db.session import AsyncSessionLocal
from whatsapp_console.infrastructure.db.uow import SqlAlchemyUoW

logger = logging.getLogger(__name__)


async def seed() -> None:
    async with SqlAlchemyUoW.scoped(AsyncSessionLocal) as uow:
        conv = await uow.conversations.get_by_phone("5511999990000")
        if conv is None:
            conv = await uow.conversations_w.create("Maria Souza", "5511999990000")

        messages_data = [
            (False, "Oi! Meu pedido ainda não chegou."),
            (True, "Olá Maria! Pode me passar o número do pedido?"),
            (False, "É o 12345."),
            (True, "Obrigado, vou verificar agora."),
        ]
        for from_me, body in messages_data:
            status = MessageStatus.SENT if from_me else MessageStatus.DELIVERED
            await uow.messages_w.create(conv.id, body, from_me, status)

        await uow.commit()
        logger.info("Seeded conversation %s with %d messages", conv.id, len(messages_data))


def main() -> None:
    configure_logging()
    asyncio.run(seed())


if __name__ == "__main__":
    main()
