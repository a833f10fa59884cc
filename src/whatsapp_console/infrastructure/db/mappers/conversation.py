from __future__ import annotations

from whatsapp_console.domain.entities.conversation import Conversation
from whatsapp_console.infrastructure.db.models.conversation import ConversationModel


def model_to_entity(model: ConversationModel) -> Conversation:
    return Conversation(
        id=model.id,
        name=model.name,
        phone=model.phone,
        created_at=model.created_at,
    )
