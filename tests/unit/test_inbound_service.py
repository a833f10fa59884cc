from __future__ import annotations

import asyncio

import pytest

from whatsapp_console.domain.value_objects.enums import MessageStatus
from whatsapp_console.infrastructure.gateway.parsing import parse_inbound_text
from whatsapp_console.services import inbound_service
from tests.conftest import FakeMessageStore, FakeUoW, make_conversation, make_message


def _upsert(text="Oi, tudo bem?", *, jid="5511999990000@s.whatsapp.net", from_me=False, msg_id="3EB0C1"):
    return {
        "event": "messages.upsert",
        "instance": "console",
        "data": {
            "key": {"remoteJid": jid, "fromMe": from_me, "id": msg_id},
            "pushName": "Maria",
            "message": {"conversation": text},
            "messageType": "conversation",
        },
    }


def test_parse_plain_text():
    inbound = parse_inbound_text(_upsert())

    assert inbound.phone == "5511999990000"
    assert inbound.body == "Oi, tudo bem?"
    assert inbound.gateway_message_id == "3EB0C1"
    assert inbound.from_me is False


def test_parse_extended_text_and_upper_case_event():
    payload = _upsert()
    payload["event"] = "MESSAGES_UPSERT"
    payload["data"]["message"] = {"extendedTextMessage": {"text": "veja https://example.com"}}

    inbound = parse_inbound_text(payload)

    assert inbound.body == "veja https://example.com"


@pytest.mark.parametrize(
    "payload",
    [
        {"event": "connection.update", "data": {"state": "open"}},
        _upsert(jid="120363025@g.us"),
        {**_upsert(), "data": {**_upsert()["data"], "message": {"imageMessage": {}}}},
        _upsert(text="   "),
        "not a dict",
    ],
)
def test_parse_ignores_non_text_events(payload):
    assert parse_inbound_text(payload) is None


def _uow_with_customer(phone="5511999990000"):
    uow = FakeUoW()
    conv = make_conversation(phone=phone)
    uow.conversations._store[conv.id] = conv
    return uow, conv


@pytest.mark.asyncio
async def test_record_appends_received_message():
    uow, conv = _uow_with_customer()
    store = FakeMessageStore()

    message = await inbound_service.record_inbound_text(parse_inbound_text(_upsert()), uow, store)

    assert message.conversation_id == conv.id
    assert message.from_me is False
    assert message.status == MessageStatus.DELIVERED
    assert message.gateway_message_id == "3EB0C1"
    assert store.calls == [("record", conv.id)]


@pytest.mark.asyncio
async def test_record_skips_own_echo():
    uow, _ = _uow_with_customer()
    store = FakeMessageStore()

    result = await inbound_service.record_inbound_text(
        parse_inbound_text(_upsert(from_me=True)), uow, store,
    )

    assert result is None
    assert store.calls == []


@pytest.mark.asyncio
async def test_record_skips_unknown_number():
    uow, _ = _uow_with_customer(phone="5521000000000")
    store = FakeMessageStore()

    result = await inbound_service.record_inbound_text(parse_inbound_text(_upsert()), uow, store)

    assert result is None
    assert store.calls == []


@pytest.mark.asyncio
async def test_record_skips_redelivered_event():
    uow, conv = _uow_with_customer()
    uow.messages._messages.append(
        make_message(conversation_id=conv.id, gateway_message_id="3EB0C1"),
    )
    store = FakeMessageStore()

    result = await inbound_service.record_inbound_text(parse_inbound_text(_upsert()), uow, store)

    assert result is None
    assert store.calls == []


@pytest.mark.asyncio
async def test_redelivery_racing_past_lookup_is_ignored():
    uow, conv = _uow_with_customer()
    store = FakeMessageStore()
    # Stored by a concurrent request after this one checked the UoW.
    store.rows.append(make_message(conversation_id=conv.id, gateway_message_id="3EB0C1"))

    result = await inbound_service.record_inbound_text(parse_inbound_text(_upsert()), uow, store)

    assert result is None
    assert len(store.rows) == 1


@pytest.mark.asyncio
async def test_concurrent_redeliveries_store_one_row():
    uow, conv = _uow_with_customer()
    store = FakeMessageStore()
    inbound = parse_inbound_text(_upsert())

    results = await asyncio.gather(
        inbound_service.record_inbound_text(inbound, uow, store),
        inbound_service.record_inbound_text(inbound, uow, store),
    )

    assert sum(r is not None for r in results) == 1
    assert [m.gateway_message_id for m in store.rows] == ["3EB0C1"]
    assert store.calls == [("record", conv.id), ("record", conv.id)]
