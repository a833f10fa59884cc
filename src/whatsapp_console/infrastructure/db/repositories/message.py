from __future__ import annotations

from uuid import UUID

from sqlalchemy import insert, select
from sqlalchemy.dialects.postgresql import insert as pg_insert
from sqlalchemy.ext.asyncio import AsyncSession

from whatsapp_console.domain.entities.message import Message
from whatsapp_console.infrastructure.db.mappers import message as mapper
from whatsapp_console.infrastructure.db.models.message import MessageModel


class MessageReaderRepo:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def list_messages(self, conversation_id: UUID) -> list[Message]:
        stmt = (
            select(MessageModel)
            .where(MessageModel.conversation_id == conversation_id)
            .order_by(MessageModel.created_at.asc(), MessageModel.id.asc())
        )
        result = await self._session.execute(stmt)
        return [mapper.model_to_entity(m) for m in result.scalars().all()]

    async def get_by_gateway_id(self, gateway_message_id: str) -> Message | None:
        stmt = select(MessageModel).where(
            MessageModel.gateway_message_id == gateway_message_id,
        )
        result = await self._session.execute(stmt)
        model = result.scalar_one_or_none()
        return mapper.model_to_entity(model) if model else None


class MessageWriterRepo:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def create(
        self,
        conversation_id: UUID,
        body: str,
        from_me: bool,
        status: str,
        gateway_message_id: str | None = None,
    ) -> Message:
        """Insert a message and return the row as the database stored it."""
        stmt = (
            insert(MessageModel)
            .values(
                conversation_id=conversation_id,
                body=body,
                from_me=from_me,
                status=status,
                gateway_message_id=gateway_message_id,
            )
            .returning(MessageModel)
        )
        result = await self._session.execute(stmt)
        return mapper.model_to_entity(result.scalar_one())

    async def create_once(
        self,
        conversation_id: UUID,
        body: str,
        from_me: bool,
        status: str,
        gateway_message_id: str,
    ) -> tuple[Message, bool]:
        """Insert keyed by ``gateway_message_id``.

        Returns ``(message, created)``. When another transaction already
        stored the id, the existing row comes back with ``created=False``.
        """
        stmt = (
            pg_insert(MessageModel)
            .values(
                conversation_id=conversation_id,
                body=body,
                from_me=from_me,
                status=status,
                gateway_message_id=gateway_message_id,
            )
            .on_conflict_do_nothing(index_elements=[MessageModel.gateway_message_id])
            .returning(MessageModel)
        )
        result = await self._session.execute(stmt)
        row = result.scalar_one_or_none()
        if row is not None:
            return mapper.model_to_entity(row), True

        existing = await MessageReaderRepo(self._session).get_by_gateway_id(gateway_message_id)
        assert existing is not None
        return existing, False
