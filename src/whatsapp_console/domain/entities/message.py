from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from uuid import UUID


@dataclass(frozen=True, slots=True)
class Message:
    id: UUID
    conversation_id: UUID
    body: str
    from_me: bool
    status: str
    gateway_message_id: str | None
    created_at: datetime
