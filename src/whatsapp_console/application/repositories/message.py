from __future__ import annotations

from typing import Protocol
from uuid import UUID

from whatsapp_console.domain.entities.message import Message


class MessageReader(Protocol):
    async def list_messages(self, conversation_id: UUID) -> list[Message]: ...

    async def get_by_gateway_id(self, gateway_message_id: str) -> Message | None: ...


class MessageWriter(Protocol):
    async def create(
        self,
        conversation_id: UUID,
        body: str,
        from_me: bool,
        status: str,
        gateway_message_id: str | None = None,
    ) -> Message:
        """Insert a row; id and created_at are assigned by the database."""
        ...

    async def create_once(
        self,
        conversation_id: UUID,
        body: str,
        from_me: bool,
        status: str,
        gateway_message_id: str,
    ) -> tuple[Message, bool]: ...
