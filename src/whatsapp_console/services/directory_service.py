from __future__ import annotations

import re
import uuid

from whatsapp_console.application.dto.conversation import ConversationFilterDTO
from whatsapp_console.application.exceptions import ConflictError, NotFoundError, ValidationError
from whatsapp_console.application.uow import UnitOfWork
from whatsapp_console.domain.entities.conversation import Conversation

_NON_DIGITS = re.compile(r"\D+")


def normalize_phone(phone: str) -> str:
    """Reduce a phone number to the digits the gateway expects."""
    return _NON_DIGITS.sub("", phone)


def _validated(name: str, phone: str) -> tuple[str, str]:
    name = name.strip()
    digits = normalize_phone(phone)
    if not name:
        raise ValidationError("Name is required")
    if not digits:
        raise ValidationError("Phone number is required")
    return name, digits


async def list_conversations(
    filters: ConversationFilterDTO,
    uow: UnitOfWork,
) -> list[Conversation]:
    return await uow.conversations.list_conversations(filters)


async def get_conversation(
    conversation_id: uuid.UUID,
    uow: UnitOfWork,
) -> Conversation:
    conversation = await uow.conversations.get_by_id(conversation_id)
    if conversation is None:
        raise NotFoundError("Conversation not found")
    return conversation


async def create_conversation(
    name: str,
    phone: str,
    uow: UnitOfWork,
) -> Conversation:
    name, phone = _validated(name, phone)
    if await uow.conversations.get_by_phone(phone) is not None:
        raise ConflictError("A customer with this phone number already exists")

    conversation = await uow.conversations_w.create(name, phone)
    await uow.commit()
    return conversation


async def update_conversation(
    conversation_id: uuid.UUID,
    name: str,
    phone: str,
    uow: UnitOfWork,
) -> Conversation:
    """Edit a customer. Message history stays attached to the same id."""
    name, phone = _validated(name, phone)
    existing = await uow.conversations.get_by_phone(phone)
    if existing is not None and existing.id != conversation_id:
        raise ConflictError("A customer with this phone number already exists")

    conversation = await uow.conversations_w.update(conversation_id, name, phone)
    if conversation is None:
        raise NotFoundError("Conversation not found")
    await uow.commit()
    return conversation
