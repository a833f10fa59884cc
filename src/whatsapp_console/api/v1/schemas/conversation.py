from __future__ import annotations

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, Field


class ConversationRequest(BaseModel):
    name: str = Field(..., max_length=200)
    phone: str = Field(..., max_length=32)


class ConversationResponse(BaseModel):
    id: UUID
    name: str
    phone: str
    created_at: datetime

    model_config = {"from_attributes": True}
