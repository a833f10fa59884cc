from __future__ import annotations

import uuid

import pytest

from whatsapp_console.application.dto.conversation import ConversationFilterDTO
from whatsapp_console.application.exceptions import ConflictError, NotFoundError, ValidationError
from whatsapp_console.services import directory_service
from tests.conftest import FakeUoW, make_conversation


def test_normalize_phone_keeps_digits_only():
    assert directory_service.normalize_phone("+55 (11) 99999-0000") == "5511999990000"


@pytest.mark.asyncio
async def test_create_conversation_normalizes_and_commits():
    uow = FakeUoW()

    conv = await directory_service.create_conversation("  Maria Souza ", "+55 11 99999-0000", uow)

    assert conv.name == "Maria Souza"
    assert conv.phone == "5511999990000"
    assert uow._committed is True
    assert uow.conversations._store[conv.id] == conv


@pytest.mark.asyncio
async def test_create_duplicate_phone_conflicts():
    uow = FakeUoW()
    existing = make_conversation(phone="5511999990000")
    uow.conversations._store[existing.id] = existing

    with pytest.raises(ConflictError):
        await directory_service.create_conversation("Other", "55 11 99999 0000", uow)

    assert uow._committed is False


@pytest.mark.asyncio
@pytest.mark.parametrize("name, phone", [("", "5511"), ("   ", "5511"), ("Ana", "no digits")])
async def test_create_rejects_missing_fields(name, phone):
    uow = FakeUoW()

    with pytest.raises(ValidationError):
        await directory_service.create_conversation(name, phone, uow)


@pytest.mark.asyncio
async def test_get_conversation_missing():
    with pytest.raises(NotFoundError):
        await directory_service.get_conversation(uuid.uuid4(), FakeUoW())


@pytest.mark.asyncio
async def test_list_conversations_filters_by_query():
    uow = FakeUoW()
    for name, phone in [("Maria Souza", "551100"), ("João Lima", "551101"), ("Mariana", "551102")]:
        conv = make_conversation(name=name, phone=phone)
        uow.conversations._store[conv.id] = conv

    result = await directory_service.list_conversations(ConversationFilterDTO(query="mari"), uow)

    assert [c.name for c in result] == ["Maria Souza", "Mariana"]


@pytest.mark.asyncio
async def test_update_keeps_id_and_changes_phone():
    uow = FakeUoW()
    conv = make_conversation(phone="551100")
    uow.conversations._store[conv.id] = conv

    updated = await directory_service.update_conversation(conv.id, "Maria S.", "551199", uow)

    assert updated.id == conv.id
    assert updated.phone == "551199"
    assert uow._committed is True


@pytest.mark.asyncio
async def test_update_to_own_phone_is_allowed():
    uow = FakeUoW()
    conv = make_conversation(phone="551100")
    uow.conversations._store[conv.id] = conv

    updated = await directory_service.update_conversation(conv.id, "Renamed", "551100", uow)

    assert updated.name == "Renamed"


@pytest.mark.asyncio
async def test_update_to_taken_phone_conflicts():
    uow = FakeUoW()
    first = make_conversation(phone="551100")
    second = make_conversation(phone="551199")
    uow.conversations._store[first.id] = first
    uow.conversations._store[second.id] = second

    with pytest.raises(ConflictError):
        await directory_service.update_conversation(first.id, "Maria", "551199", uow)


@pytest.mark.asyncio
async def test_update_missing_conversation():
    with pytest.raises(NotFoundError):
        await directory_service.update_conversation(uuid.uuid4(), "Maria", "551100", FakeUoW())
