"""In-memory message list for the open conversation.

Three paths can report the same stored message: the result of our own
durable write, the store's live feed echoing that write, and later feed
events for messages written elsewhere. Every path goes through ``_merge``,
which keeps the list unique by store id and sorted by ``created_at``.
"""
from __future__ import annotations

import asyncio
import bisect
import logging
from typing import Any, Callable, Coroutine, Protocol
from uuid import UUID

from whatsapp_console.application.dto.gateway import GatewayConfig
from whatsapp_console.application.dto.message import SendOutcome
from whatsapp_console.application.exceptions import GatewayError, StoreError, ValidationError
from whatsapp_console.application.ports.gateway import GatewayClient
from whatsapp_console.application.ports.store import LiveSubscription, MessageStore
from whatsapp_console.domain.entities.conversation import Conversation
from whatsapp_console.domain.entities.message import Message
from whatsapp_console.domain.value_objects.enums import ConnectionState, MessageStatus
from whatsapp_console.infrastructure.bus.serializer import message_to_payload

logger = logging.getLogger(__name__)

ChangeListener = Callable[[str, dict[str, Any]], Coroutine[Any, Any, None]]


class ConnectionStateSource(Protocol):
    @property
    def state(self) -> ConnectionState: ...


def _sort_key(message: Message) -> Any:
    return message.created_at


class ConversationSynchronizer:
    def __init__(
        self,
        store: MessageStore,
        gateway: GatewayClient,
        connection: ConnectionStateSource,
        config: GatewayConfig,
    ) -> None:
        self._store = store
        self._gateway = gateway
        self._connection = connection
        self._config = config
        self._conversation: Conversation | None = None
        self._messages: list[Message] = []
        self._known_ids: set[UUID] = set()
        self._subscription: LiveSubscription | None = None
        # Live rows received while history is loading; None once it is merged.
        self._backlog: list[Message] | None = None
        # Bumped on every switch; results tagged with an older value are stale.
        self._generation = 0
        self._switch_lock = asyncio.Lock()
        self._listeners: list[ChangeListener] = []

    @property
    def conversation(self) -> Conversation | None:
        return self._conversation

    @property
    def messages(self) -> list[Message]:
        return list(self._messages)

    def add_listener(self, listener: ChangeListener) -> None:
        self._listeners.append(listener)

    def apply_config(self, config: GatewayConfig) -> None:
        self._config = config

    # ------------------------------------------------------------------
    # Conversation switching
    # ------------------------------------------------------------------

    async def select(self, conversation: Conversation) -> list[Message]:
        """Make ``conversation`` the live one and load its history."""
        async with self._switch_lock:
            await self._close_subscription()
            self._generation += 1
            self._conversation = conversation
            self._messages = []
            self._known_ids = set()

            generation = self._generation

            async def _on_insert(message: Message) -> None:
                await self._on_live_insert(generation, message)

            # Subscribe first so rows written while history loads are not
            # missed; they wait in the backlog until history is merged.
            self._backlog = []
            try:
                self._subscription = await self._store.subscribe_to_conversation(
                    conversation.id, _on_insert,
                )
                try:
                    history = await self._store.list_messages(conversation.id)
                except StoreError as exc:
                    logger.warning(
                        "History for conversation %s unavailable, showing empty state: %s",
                        conversation.id, exc.detail,
                    )
                    history = []
                for message in history:
                    self._merge(message)
            finally:
                backlog, self._backlog = self._backlog, None
            for message in backlog:
                self._merge(message)
            logger.info(
                "Conversation %s selected (%d messages)",
                conversation.id, len(self._messages),
            )

        await self._publish(
            "conversation.selected",
            {
                "conversation_id": str(conversation.id),
                "messages": [message_to_payload(m) for m in self._messages],
            },
        )
        return self.messages

    def refresh_conversation(self, conversation: Conversation) -> None:
        """Pick up a name or address edit without reloading history."""
        if self._conversation is not None and self._conversation.id == conversation.id:
            self._conversation = conversation

    async def close(self) -> None:
        async with self._switch_lock:
            await self._close_subscription()
            self._generation += 1
            self._conversation = None
            self._messages = []
            self._known_ids = set()

    async def _close_subscription(self) -> None:
        subscription, self._subscription = self._subscription, None
        if subscription is not None:
            await subscription.close()

    # ------------------------------------------------------------------
    # Incoming rows
    # ------------------------------------------------------------------

    async def _on_live_insert(self, generation: int, message: Message) -> None:
        if generation != self._generation or not self._is_current(message):
            logger.debug("Dropping stale live event for message %s", message.id)
            return
        if self._backlog is not None:
            self._backlog.append(message)
            return
        if self._merge(message):
            await self._publish("message.created", message_to_payload(message))

    def _is_current(self, message: Message) -> bool:
        return (
            self._conversation is not None
            and message.conversation_id == self._conversation.id
        )

    def _merge(self, message: Message) -> bool:
        """Insert ``message`` in timestamp order unless its id is already listed."""
        if message.id in self._known_ids:
            return False
        bisect.insort_right(self._messages, message, key=_sort_key)
        self._known_ids.add(message.id)
        return True

    # ------------------------------------------------------------------
    # Outbound
    # ------------------------------------------------------------------

    async def send(self, body: str) -> SendOutcome:
        """Store ``body`` durably, then try to deliver it through the gateway.

        Raises ValidationError before any I/O, StoreError when the message
        could not be recorded. A delivery failure is not raised: the stored
        message is returned with ``delivered=False``.
        """
        conversation = self._conversation
        if conversation is None:
            raise ValidationError("No conversation selected")
        if self._connection.state != ConnectionState.CONNECTED:
            raise ValidationError("WhatsApp is not connected")
        if not body.strip():
            raise ValidationError("Message body is empty")

        config = self._config
        generation = self._generation

        message = await self._store.append_message(
            conversation.id, body, True, MessageStatus.SENT,
        )
        if generation == self._generation and self._merge(message):
            await self._publish("message.created", message_to_payload(message))

        try:
            receipt = await self._gateway.send_text(config, conversation.phone, body)
        except GatewayError as exc:
            logger.warning(
                "Message %s stored but not delivered: %s", message.id, exc.detail,
            )
            return SendOutcome(message=message, delivered=False, warning=exc.detail)

        return SendOutcome(
            message=message,
            delivered=True,
            gateway_message_id=receipt.gateway_message_id,
        )

    async def _publish(self, event_type: str, data: dict[str, Any]) -> None:
        for listener in list(self._listeners):
            try:
                await listener(event_type, data)
            except Exception:
                logger.exception("Conversation listener failed for %s", event_type)
