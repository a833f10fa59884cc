"""Record customer messages reported by the gateway webhook."""
from __future__ import annotations

import logging

from whatsapp_console.application.dto.events import InboundTextDTO
from whatsapp_console.application.ports.store import MessageStore
from whatsapp_console.application.uow import UnitOfWork
from whatsapp_console.domain.entities.message import Message
from whatsapp_console.services.directory_service import normalize_phone

logger = logging.getLogger(__name__)


async def record_inbound_text(
    inbound: InboundTextDTO,
    uow: UnitOfWork,
    store: MessageStore,
) -> Message | None:
    """Append a received text to its customer's conversation.

    The store's live feed carries the new row to an open chat view. Returns
    None when the event is skipped.
    """
    if inbound.from_me:
        # Echo of a message sent from this session; it is already stored.
        logger.debug("Skipping own echo %s", inbound.gateway_message_id)
        return None

    conversation = await uow.conversations.get_by_phone(normalize_phone(inbound.phone))
    if conversation is None:
        logger.info("Ignoring message from unknown number %s", inbound.phone)
        return None

    if await uow.messages.get_by_gateway_id(inbound.gateway_message_id) is not None:
        logger.debug("Gateway message %s already recorded", inbound.gateway_message_id)
        return None

    # A concurrent redelivery can pass the check above; the store insert is keyed too.
    message = await store.record_received(
        conversation.id, inbound.body, inbound.gateway_message_id,
    )
    if message is None:
        return None
    logger.info(
        "Recorded inbound message %s in conversation %s", message.id, conversation.id,
    )
    return message
