from __future__ import annotations

from typing import Protocol

from whatsapp_console.application.repositories.conversation import (
    ConversationReader,
    ConversationWriter,
)
from whatsapp_console.application.repositories.message import MessageReader, MessageWriter
from whatsapp_console.application.repositories.settings import (
    CredentialReader,
    CredentialWriter,
)


class UnitOfWork(Protocol):
    conversations: ConversationReader
    conversations_w: ConversationWriter
    messages: MessageReader
    messages_w: MessageWriter
    credentials: CredentialReader
    credentials_w: CredentialWriter

    async def commit(self) -> None: ...
    async def rollback(self) -> None: ...
    async def flush(self) -> None: ...
