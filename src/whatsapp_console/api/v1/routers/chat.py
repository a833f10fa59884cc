from __future__ import annotations

from fastapi import APIRouter

from whatsapp_console.api.deps import EngineDep, UoWDep
from whatsapp_console.api.v1.schemas.message import (
    ChatResponse,
    MessageResponse,
    SelectConversationRequest,
    SendMessageRequest,
    SendMessageResponse,
)
from whatsapp_console.services import directory_service

router = APIRouter(prefix="/api/v1/chat", tags=["chat"])


@router.post("/select", response_model=ChatResponse)
async def select_conversation(
    body: SelectConversationRequest,
    uow: UoWDep,
    engine: EngineDep,
) -> ChatResponse:
    conv = await directory_service.get_conversation(body.conversation_id, uow)
    messages = await engine.synchronizer.select(conv)
    return ChatResponse(
        conversation_id=conv.id,
        messages=[MessageResponse.model_validate(m, from_attributes=True) for m in messages],
    )


@router.get("/messages", response_model=ChatResponse)
async def list_messages(engine: EngineDep) -> ChatResponse:
    sync = engine.synchronizer
    return ChatResponse(
        conversation_id=sync.conversation.id if sync.conversation else None,
        messages=[MessageResponse.model_validate(m, from_attributes=True) for m in sync.messages],
    )


@router.post("/messages", response_model=SendMessageResponse, status_code=201)
async def send_message(
    body: SendMessageRequest,
    engine: EngineDep,
) -> SendMessageResponse:
    outcome = await engine.synchronizer.send(body.body)
    return SendMessageResponse(
        message=MessageResponse.model_validate(outcome.message, from_attributes=True),
        delivered=outcome.delivered,
        warning=outcome.warning,
    )
