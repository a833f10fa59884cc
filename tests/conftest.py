"""Shared test fixtures."""
from __future__ import annotations

import asyncio
import uuid
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from typing import Any
from uuid import UUID

import pytest

from whatsapp_console.application.dto.conversation import ConversationFilterDTO
from whatsapp_console.application.dto.gateway import (
    DeliveryReceipt,
    GatewayConfig,
    StateReport,
)
from whatsapp_console.application.exceptions import GatewayError, StoreError
from whatsapp_console.application.ports.store import OnInsertCallback
from whatsapp_console.domain.entities.conversation import Conversation
from whatsapp_console.domain.entities.message import Message
from whatsapp_console.domain.value_objects.enums import MessageStatus, PairingFormat
from whatsapp_console.domain.value_objects.pairing import PairingArtifact

BASE_TIME = datetime(2026, 1, 1, 12, 0, tzinfo=timezone.utc)

OPEN = StateReport(connected=True, provider_state="open")
UNREACHABLE = StateReport(connected=False, provider_state="disconnected")


@pytest.fixture
def gateway_config() -> GatewayConfig:
    return GatewayConfig(
        base_url="https://gw.example.com/",
        api_key="secret-key",
        session_id="console",
    )


def make_conversation(
    *,
    conversation_id: UUID | None = None,
    name: str = "Maria Souza",
    phone: str = "5511999990000",
) -> Conversation:
    return Conversation(
        id=conversation_id or uuid.uuid4(),
        name=name,
        phone=phone,
        created_at=BASE_TIME,
    )


def make_message(
    *,
    conversation_id: UUID | None = None,
    message_id: UUID | None = None,
    body: str = "hello",
    from_me: bool = False,
    status: str = MessageStatus.DELIVERED,
    gateway_message_id: str | None = None,
    seconds: int = 0,
) -> Message:
    return Message(
        id=message_id or uuid.uuid4(),
        conversation_id=conversation_id or uuid.uuid4(),
        body=body,
        from_me=from_me,
        status=status,
        gateway_message_id=gateway_message_id,
        created_at=BASE_TIME + timedelta(seconds=seconds),
    )


def image_artifact(value: str = "data:image/png;base64,AAAA") -> PairingArtifact:
    return PairingArtifact(format=PairingFormat.IMAGE, value=value)


# ----------------------------------------------------------------------
# Gateway
# ----------------------------------------------------------------------


@dataclass
class FakeGateway:
    """Scripted gateway. Each list is consumed front to back."""

    states: list[StateReport] = field(default_factory=list)
    artifacts: list[PairingArtifact | Exception] = field(default_factory=list)
    create_error: Exception | None = None
    terminate_error: Exception | None = None
    send_error: Exception | None = None
    state_gate: asyncio.Event | None = None
    calls: list[tuple[str, Any]] = field(default_factory=list)

    def count(self, name: str) -> int:
        return sum(1 for call, _ in self.calls if call == name)

    async def create_session(self, config: GatewayConfig) -> dict[str, Any]:
        self.calls.append(("create_session", config.session_id))
        if self.create_error:
            raise self.create_error
        return {"instance": {"instanceName": config.session_id}}

    async def fetch_pairing_artifact(self, config: GatewayConfig) -> PairingArtifact:
        self.calls.append(("fetch_pairing_artifact", config.session_id))
        result = self.artifacts.pop(0) if self.artifacts else image_artifact()
        if isinstance(result, Exception):
            raise result
        return result

    async def query_state(self, config: GatewayConfig) -> StateReport:
        self.calls.append(("query_state", config.session_id))
        if self.state_gate is not None:
            await self.state_gate.wait()
        return self.states.pop(0) if self.states else UNREACHABLE

    async def terminate_session(self, config: GatewayConfig) -> dict[str, Any]:
        self.calls.append(("terminate_session", config.session_id))
        if self.terminate_error:
            raise self.terminate_error
        return {"status": "SUCCESS"}

    async def send_text(
        self, config: GatewayConfig, address: str, body: str,
    ) -> DeliveryReceipt:
        self.calls.append(("send_text", (address, body)))
        if self.send_error:
            raise self.send_error
        return DeliveryReceipt(gateway_message_id="3EB0ABC")


# ----------------------------------------------------------------------
# Message store
# ----------------------------------------------------------------------


@dataclass
class FakeSubscription:
    conversation_id: UUID
    callback: OnInsertCallback
    store: FakeMessageStore
    closed: bool = False

    async def close(self) -> None:
        self.closed = True
        self.store.calls.append(("close", self.conversation_id))


@dataclass
class FakeMessageStore:
    """In-memory store with a controllable live feed.

    ``echo_before_return`` makes the live feed deliver a fresh row before
    ``append_message`` returns, the way a fast realtime channel can beat
    the write acknowledgement.
    """

    rows: list[Message] = field(default_factory=list)
    subscriptions: list[FakeSubscription] = field(default_factory=list)
    calls: list[tuple[str, Any]] = field(default_factory=list)
    fail_list: bool = False
    fail_append: bool = False
    echo_before_return: bool = False
    append_gate: asyncio.Event | None = None
    list_gate: asyncio.Event | None = None
    _clock: int = 1000

    def active_subscriptions(self) -> list[FakeSubscription]:
        return [s for s in self.subscriptions if not s.closed]

    async def emit(self, message: Message) -> None:
        for sub in self.active_subscriptions():
            if sub.conversation_id == message.conversation_id:
                await sub.callback(message)

    async def list_messages(self, conversation_id: UUID) -> list[Message]:
        self.calls.append(("list", conversation_id))
        if self.list_gate is not None:
            await self.list_gate.wait()
        if self.fail_list:
            raise StoreError("read timeout")
        rows = [m for m in self.rows if m.conversation_id == conversation_id]
        return sorted(rows, key=lambda m: (m.created_at, m.id))

    async def append_message(
        self,
        conversation_id: UUID,
        body: str,
        from_me: bool,
        status: str,
        *,
        gateway_message_id: str | None = None,
    ) -> Message:
        self.calls.append(("append", conversation_id))
        if self.append_gate is not None:
            await self.append_gate.wait()
        if self.fail_append:
            raise StoreError("write rejected")
        self._clock += 1
        message = Message(
            id=uuid.uuid4(),
            conversation_id=conversation_id,
            body=body,
            from_me=from_me,
            status=status,
            gateway_message_id=gateway_message_id,
            created_at=BASE_TIME + timedelta(seconds=self._clock),
        )
        self.rows.append(message)
        if self.echo_before_return:
            await self.emit(message)
        return message

    async def record_received(
        self, conversation_id: UUID, body: str, gateway_message_id: str,
    ) -> Message | None:
        self.calls.append(("record", conversation_id))
        if self.fail_append:
            raise StoreError("write rejected")
        if any(m.gateway_message_id == gateway_message_id for m in self.rows):
            return None
        self._clock += 1
        message = Message(
            id=uuid.uuid4(),
            conversation_id=conversation_id,
            body=body,
            from_me=False,
            status=MessageStatus.DELIVERED,
            gateway_message_id=gateway_message_id,
            created_at=BASE_TIME + timedelta(seconds=self._clock),
        )
        self.rows.append(message)
        await self.emit(message)
        return message

    async def subscribe_to_conversation(
        self, conversation_id: UUID, on_insert: OnInsertCallback,
    ) -> FakeSubscription:
        self.calls.append(("subscribe", conversation_id))
        sub = FakeSubscription(conversation_id, on_insert, self)
        self.subscriptions.append(sub)
        return sub


@dataclass
class FakeConnection:
    state: Any


# ----------------------------------------------------------------------
# Unit of work
# ----------------------------------------------------------------------


@dataclass
class FakeConversationReader:
    _store: dict[UUID, Conversation] = field(default_factory=dict)

    async def get_by_id(self, conversation_id: UUID) -> Conversation | None:
        return self._store.get(conversation_id)

    async def get_by_phone(self, phone: str) -> Conversation | None:
        for c in self._store.values():
            if c.phone == phone:
                return c
        return None

    async def list_conversations(self, filters: ConversationFilterDTO) -> list[Conversation]:
        convs = sorted(self._store.values(), key=lambda c: c.name)
        if filters.query:
            q = filters.query.lower()
            convs = [c for c in convs if q in c.name.lower() or filters.query in c.phone]
        return convs[: filters.limit]


@dataclass
class FakeConversationWriter:
    _reader: FakeConversationReader

    async def create(self, name: str, phone: str) -> Conversation:
        conversation = make_conversation(name=name, phone=phone)
        self._reader._store[conversation.id] = conversation
        return conversation

    async def update(self, conversation_id: UUID, name: str, phone: str) -> Conversation | None:
        existing = self._reader._store.get(conversation_id)
        if existing is None:
            return None
        updated = Conversation(
            id=existing.id, name=name, phone=phone, created_at=existing.created_at,
        )
        self._reader._store[conversation_id] = updated
        return updated


@dataclass
class FakeMessageReader:
    _messages: list[Message] = field(default_factory=list)

    async def list_messages(self, conversation_id: UUID) -> list[Message]:
        return [m for m in self._messages if m.conversation_id == conversation_id]

    async def get_by_gateway_id(self, gateway_message_id: str) -> Message | None:
        for m in self._messages:
            if m.gateway_message_id == gateway_message_id:
                return m
        return None


@dataclass
class FakeMessageWriter:
    _reader: FakeMessageReader

    async def create(
        self,
        conversation_id: UUID,
        body: str,
        from_me: bool,
        status: str,
        gateway_message_id: str | None = None,
    ) -> Message:
        message = make_message(
            conversation_id=conversation_id,
            body=body,
            from_me=from_me,
            status=status,
            gateway_message_id=gateway_message_id,
        )
        self._reader._messages.append(message)
        return message

    async def create_once(
        self,
        conversation_id: UUID,
        body: str,
        from_me: bool,
        status: str,
        gateway_message_id: str,
    ) -> tuple[Message, bool]:
        existing = await self._reader.get_by_gateway_id(gateway_message_id)
        if existing is not None:
            return existing, False
        message = await self.create(conversation_id, body, from_me, status, gateway_message_id)
        return message, True


@dataclass
class FakeCredentialStore:
    saved: GatewayConfig | None = None

    async def get(self) -> GatewayConfig | None:
        return self.saved

    async def save(self, config: GatewayConfig) -> None:
        self.saved = config


@dataclass
class FakeUoW:
    """In-memory UoW for unit tests."""
    conversations: FakeConversationReader = field(default_factory=FakeConversationReader)
    conversations_w: FakeConversationWriter | None = None
    messages: FakeMessageReader = field(default_factory=FakeMessageReader)
    messages_w: FakeMessageWriter | None = None
    credentials: FakeCredentialStore = field(default_factory=FakeCredentialStore)
    credentials_w: FakeCredentialStore | None = None
    _committed: bool = False

    def __post_init__(self) -> None:
        if self.conversations_w is None:
            self.conversations_w = FakeConversationWriter(self.conversations)
        if self.messages_w is None:
            self.messages_w = FakeMessageWriter(self.messages)
        if self.credentials_w is None:
            self.credentials_w = self.credentials

    async def flush(self) -> None:
        pass

    async def commit(self) -> None:
        self._committed = True

    async def rollback(self) -> None:
        pass

    async def __aenter__(self) -> FakeUoW:
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        return None


def gateway_error(detail: str = "Connection Closed", status_code: int | None = 400) -> GatewayError:
    return GatewayError(detail, status_code)
