"""Live feed transport: one Redis Pub/Sub channel per conversation."""
from __future__ import annotations

import asyncio
import logging
from typing import Any, Callable, Coroutine

import redis.asyncio as aioredis

from whatsapp_console.infrastructure.bus.serializer import deserialize_event, serialize_event

logger = logging.getLogger(__name__)


class RedisPubSubPublisher:
    """Implements application.ports.bus.EventPublisher."""

    def __init__(self, redis: aioredis.Redis) -> None:
        self._redis = redis

    async def publish(self, channel: str, payload: dict[str, Any]) -> int:
        """Publish ``payload`` and return how many subscribers received it."""
        event_type = payload.get("event_type", "unknown")
        receivers = await self._redis.publish(channel, serialize_event(event_type, payload))
        if not receivers:
            logger.debug("No live viewer on %s for %s", channel, event_type)
        return receivers


OnEventCallback = Callable[[str, dict[str, Any]], Coroutine[Any, Any, None]]


class RedisPubSubSubscriber:
    """Background task that listens to one Redis channel and dispatches events.

    ``start`` returns only once the channel subscription is registered with
    Redis, and ``stop`` returns only once the listener task has finished, so
    the callback never runs outside the start/stop window.
    """

    def __init__(
        self,
        redis: aioredis.Redis,
        channel: str,
        callback: OnEventCallback,
    ) -> None:
        self._redis = redis
        self._channel = channel
        self._callback = callback
        self._pubsub: Any = None
        self._task: asyncio.Task[None] | None = None

    @property
    def channel(self) -> str:
        return self._channel

    async def start(self) -> None:
        self._pubsub = self._redis.pubsub()
        await self._pubsub.subscribe(self._channel)
        self._task = asyncio.create_task(
            self._listen(), name=f"redis-pubsub:{self._channel}",
        )
        logger.debug("Subscribed to channel=%s", self._channel)

    async def stop(self) -> None:
        if self._task:
            self._task.cancel()
            try:
                await self._task
            except asyncio.CancelledError:
                pass
            self._task = None
        if self._pubsub is not None:
            try:
                await self._pubsub.unsubscribe(self._channel)
            finally:
                await self._pubsub.aclose()
                self._pubsub = None
            logger.debug("Unsubscribed from channel=%s", self._channel)

    async def close(self) -> None:
        await self.stop()

    async def _listen(self) -> None:
        async for message in self._pubsub.listen():
            if message["type"] != "message":
                continue
            try:
                event_type, data = deserialize_event(message["data"])
                await self._callback(event_type, data)
            except Exception:
                logger.exception("Error processing pubsub message on %s", self._channel)
