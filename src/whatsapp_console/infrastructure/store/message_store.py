"""Conversation store adapter: Postgres for durable rows, Redis for the live feed."""
from __future__ import annotations

import logging
from typing import Any
from uuid import UUID

import redis.asyncio as aioredis
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from whatsapp_console.application.exceptions import StoreError
from whatsapp_console.application.ports.bus import EventPublisher
from whatsapp_console.application.ports.store import OnInsertCallback
from whatsapp_console.domain.entities.message import Message
from whatsapp_console.domain.value_objects.enums import MessageStatus
from whatsapp_console.infrastructure.bus.redis_pubsub import RedisPubSubSubscriber
from whatsapp_console.infrastructure.bus.serializer import (
    message_to_payload,
    payload_to_message,
)
from whatsapp_console.infrastructure.db.uow import SqlAlchemyUoW

logger = logging.getLogger(__name__)

MESSAGE_INSERTED = "message.inserted"


class SqlMessageStore:
    """Implements application.ports.store.MessageStore."""

    def __init__(
        self,
        session_factory: async_sessionmaker[AsyncSession],
        publisher: EventPublisher,
        redis: aioredis.Redis,
        channel_prefix: str,
    ) -> None:
        self._session_factory = session_factory
        self._publisher = publisher
        self._redis = redis
        self._channel_prefix = channel_prefix

    def channel_for(self, conversation_id: UUID) -> str:
        return f"{self._channel_prefix}:{conversation_id}"

    async def list_messages(self, conversation_id: UUID) -> list[Message]:
        try:
            async with SqlAlchemyUoW.scoped(self._session_factory) as uow:
                return await uow.messages.list_messages(conversation_id)
        except SQLAlchemyError as exc:
            raise StoreError(f"Could not load messages: {exc}") from exc

    async def append_message(
        self,
        conversation_id: UUID,
        body: str,
        from_me: bool,
        status: str,
        *,
        gateway_message_id: str | None = None,
    ) -> Message:
        try:
            async with SqlAlchemyUoW.scoped(self._session_factory) as uow:
                message = await uow.messages_w.create(
                    conversation_id, body, from_me, status, gateway_message_id,
                )
                await uow.commit()
        except SQLAlchemyError as exc:
            raise StoreError(f"Could not store message: {exc}") from exc

        await self._announce(message)
        return message

    async def record_received(
        self, conversation_id: UUID, body: str, gateway_message_id: str,
    ) -> Message | None:
        try:
            async with SqlAlchemyUoW.scoped(self._session_factory) as uow:
                message, created = await uow.messages_w.create_once(
                    conversation_id, body, False, MessageStatus.DELIVERED, gateway_message_id,
                )
                await uow.commit()
        except SQLAlchemyError as exc:
            raise StoreError(f"Could not store message: {exc}") from exc

        if not created:
            logger.debug("Gateway message %s already stored as %s", gateway_message_id, message.id)
            return None
        await self._announce(message)
        return message

    async def _announce(self, message: Message) -> None:
        # Called after commit; a failed feed publish is logged and the row kept.
        try:
            await self._publisher.publish(
                self.channel_for(message.conversation_id),
                {"event_type": MESSAGE_INSERTED, **message_to_payload(message)},
            )
        except aioredis.RedisError:
            logger.exception("Live feed publish failed for message %s", message.id)

    async def subscribe_to_conversation(
        self,
        conversation_id: UUID,
        on_insert: OnInsertCallback,
    ) -> RedisPubSubSubscriber:
        async def _dispatch(event_type: str, data: dict[str, Any]) -> None:
            if event_type != MESSAGE_INSERTED:
                return
            message = payload_to_message(data)
            if message.conversation_id != conversation_id:
                logger.warning(
                    "Dropping message %s for %s on feed of %s",
                    message.id, message.conversation_id, conversation_id,
                )
                return
            await on_insert(message)

        subscriber = RedisPubSubSubscriber(
            self._redis, self.channel_for(conversation_id), _dispatch,
        )
        try:
            await subscriber.start()
        except aioredis.RedisError as exc:
            try:
                await subscriber.stop()
            except aioredis.RedisError:
                logger.warning(
                    "Cleanup of failed subscription on %s also failed", subscriber.channel,
                )
            raise StoreError(f"Could not open live feed: {exc}") from exc
        return subscriber
