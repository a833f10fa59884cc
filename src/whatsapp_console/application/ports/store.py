from __future__ import annotations

from typing import Any, Callable, Coroutine, Protocol
from uuid import UUID

from whatsapp_console.domain.entities.message import Message

OnInsertCallback = Callable[[Message], Coroutine[Any, Any, None]]


class LiveSubscription(Protocol):
    async def close(self) -> None:
        """Stop the feed. No callback runs after this returns."""
        ...


class MessageStore(Protocol):
    async def list_messages(self, conversation_id: UUID) -> list[Message]: ...

    async def append_message(
        self,
        conversation_id: UUID,
        body: str,
        from_me: bool,
        status: str,
        *,
        gateway_message_id: str | None = None,
    ) -> Message: ...

    async def record_received(
        self, conversation_id: UUID, body: str, gateway_message_id: str,
    ) -> Message | None:
        """Store a customer message once per gateway id; None if already stored."""
        ...

    async def subscribe_to_conversation(
        self, conversation_id: UUID, on_insert: OnInsertCallback,
    ) -> LiveSubscription: ...
