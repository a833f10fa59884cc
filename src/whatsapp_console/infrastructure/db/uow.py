from __future__ import annotations

from contextlib import asynccontextmanager
from types import TracebackType
from typing import AsyncIterator, Self

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from whatsapp_console.infrastructure.db.repositories.conversation import (
    ConversationReaderRepo,
    ConversationWriterRepo,
)
from whatsapp_console.infrastructure.db.repositories.message import (
    MessageReaderRepo,
    MessageWriterRepo,
)
from whatsapp_console.infrastructure.db.repositories.settings import (
    CredentialReaderRepo,
    CredentialWriterRepo,
)


class SqlAlchemyUoW:
    """Customers, messages and gateway credentials over one AsyncSession.

    Nothing is committed implicitly; callers commit, and leaving the
    ``async with`` block on an exception rolls back.
    """

    def __init__(self, session: AsyncSession) -> None:
        self._session = session
        self.conversations = ConversationReaderRepo(session)
        self.conversations_w = ConversationWriterRepo(session)
        self.messages = MessageReaderRepo(session)
        self.messages_w = MessageWriterRepo(session)
        self.credentials = CredentialReaderRepo(session)
        self.credentials_w = CredentialWriterRepo(session)

    @classmethod
    @asynccontextmanager
    async def scoped(
        cls,
        session_factory: async_sessionmaker[AsyncSession],
    ) -> AsyncIterator[SqlAlchemyUoW]:
        """Open a session, wrap it, and close it when the block ends."""
        async with session_factory() as session:
            async with cls(session) as uow:
                yield uow

    async def flush(self) -> None:
        await self._session.flush()

    async def commit(self) -> None:
        await self._session.commit()

    async def rollback(self) -> None:
        await self._session.rollback()

    async def __aenter__(self) -> Self:
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        if exc_type is not None:
            await self.rollback()
