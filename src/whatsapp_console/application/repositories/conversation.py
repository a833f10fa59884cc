from __future__ import annotations

from typing import Protocol
from uuid import UUID

from whatsapp_console.application.dto.conversation import ConversationFilterDTO
from whatsapp_console.domain.entities.conversation import Conversation


class ConversationReader(Protocol):
    async def get_by_id(self, conversation_id: UUID) -> Conversation | None: ...

    async def get_by_phone(self, phone: str) -> Conversation | None: ...

    async def list_conversations(
        self, filters: ConversationFilterDTO
    ) -> list[Conversation]:
        """Ordered by name; ``filters.query`` matches name or phone."""
        ...


class ConversationWriter(Protocol):
    async def create(self, name: str, phone: str) -> Conversation: ...

    async def update(
        self, conversation_id: UUID, name: str, phone: str
    ) -> Conversation | None: ...
