from __future__ import annotations

from uuid import UUID

from fastapi import APIRouter, Query

from whatsapp_console.api.deps import EngineDep, UoWDep
from whatsapp_console.api.v1.schemas.conversation import (
    ConversationRequest,
    ConversationResponse,
)
from whatsapp_console.application.dto.conversation import ConversationFilterDTO
from whatsapp_console.services import directory_service

router = APIRouter(prefix="/api/v1/conversations", tags=["conversations"])


@router.get("", response_model=list[ConversationResponse])
async def list_conversations(
    uow: UoWDep,
    q: str | None = Query(None, max_length=100),
    limit: int = Query(200, ge=1, le=500),
) -> list[ConversationResponse]:
    convs = await directory_service.list_conversations(
        ConversationFilterDTO(query=q, limit=limit), uow,
    )
    return [ConversationResponse.model_validate(c, from_attributes=True) for c in convs]


@router.post("", response_model=ConversationResponse, status_code=201)
async def create_conversation(
    body: ConversationRequest,
    uow: UoWDep,
) -> ConversationResponse:
    conv = await directory_service.create_conversation(body.name, body.phone, uow)
    return ConversationResponse.model_validate(conv, from_attributes=True)


@router.get("/{conversation_id}", response_model=ConversationResponse)
async def get_conversation(
    conversation_id: UUID,
    uow: UoWDep,
) -> ConversationResponse:
    conv = await directory_service.get_conversation(conversation_id, uow)
    return ConversationResponse.model_validate(conv, from_attributes=True)


@router.patch("/{conversation_id}", response_model=ConversationResponse)
async def update_conversation(
    conversation_id: UUID,
    body: ConversationRequest,
    uow: UoWDep,
    engine: EngineDep,
) -> ConversationResponse:
    conv = await directory_service.update_conversation(
        conversation_id, body.name, body.phone, uow,
    )
    engine.synchronizer.refresh_conversation(conv)
    return ConversationResponse.model_validate(conv, from_attributes=True)
