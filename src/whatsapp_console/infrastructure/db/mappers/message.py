from __future__ import annotations

from whatsapp_console.domain.entities.message import Message
from whatsapp_console.infrastructure.db.models.message import MessageModel


def model_to_entity(model: MessageModel) -> Message:
    return Message(
        id=model.id,
        conversation_id=model.conversation_id,
        body=model.body,
        from_me=model.from_me,
        status=model.status,
        gateway_message_id=model.gateway_message_id,
        created_at=model.created_at,
    )
