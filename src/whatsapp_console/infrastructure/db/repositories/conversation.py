from __future__ import annotations

from uuid import UUID

from sqlalchemy import insert, or_, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from whatsapp_console.application.dto.conversation import ConversationFilterDTO
from whatsapp_console.domain.entities.conversation import Conversation
from whatsapp_console.infrastructure.db.mappers import conversation as mapper
from whatsapp_console.infrastructure.db.models.conversation import ConversationModel


class ConversationReaderRepo:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def get_by_id(self, conversation_id: UUID) -> Conversation | None:
        result = await self._session.get(ConversationModel, conversation_id)
        return mapper.model_to_entity(result) if result else None

    async def get_by_phone(self, phone: str) -> Conversation | None:
        stmt = select(ConversationModel).where(ConversationModel.phone == phone)
        result = await self._session.execute(stmt)
        model = result.scalar_one_or_none()
        return mapper.model_to_entity(model) if model else None

    async def list_conversations(
        self,
        filters: ConversationFilterDTO,
    ) -> list[Conversation]:
        stmt = select(ConversationModel)
        if filters.query:
            stmt = stmt.where(
                or_(
                    ConversationModel.name.ilike(f"%{filters.query}%"),
                    ConversationModel.phone.contains(filters.query),
                )
            )
        stmt = stmt.order_by(ConversationModel.name.asc(), ConversationModel.id).limit(
            filters.limit
        )
        result = await self._session.execute(stmt)
        return [mapper.model_to_entity(m) for m in result.scalars().all()]


class ConversationWriterRepo:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def create(self, name: str, phone: str) -> Conversation:
        stmt = (
            insert(ConversationModel)
            .values(name=name, phone=phone)
            .returning(ConversationModel)
        )
        result = await self._session.execute(stmt)
        return mapper.model_to_entity(result.scalar_one())

    async def update(
        self,
        conversation_id: UUID,
        name: str,
        phone: str,
    ) -> Conversation | None:
        stmt = (
            update(ConversationModel)
            .where(ConversationModel.id == conversation_id)
            .values(name=name, phone=phone)
            .returning(ConversationModel)
        )
        result = await self._session.execute(stmt)
        model = result.scalar_one_or_none()
        return mapper.model_to_entity(model) if model else None
