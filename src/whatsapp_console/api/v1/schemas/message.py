from __future__ import annotations

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel


class SelectConversationRequest(BaseModel):
    conversation_id: UUID


class SendMessageRequest(BaseModel):
    body: str


class MessageResponse(BaseModel):
    id: UUID
    conversation_id: UUID
    body: str
    from_me: bool
    status: str
    gateway_message_id: str | None
    created_at: datetime

    model_config = {"from_attributes": True}


class ChatResponse(BaseModel):
    conversation_id: UUID | None
    messages: list[MessageResponse]


class SendMessageResponse(BaseModel):
    message: MessageResponse
    delivered: bool
    warning: str | None = None
