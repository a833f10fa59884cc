"""WebSocket envelopes for the console UI."""
from __future__ import annotations

from typing import Any, Literal

from pydantic import BaseModel

OutboundType = Literal[
    "connection.updated",
    "conversation.selected",
    "message.created",
    "error",
    "pong",
]


class WsInbound(BaseModel):
    type: str
    data: dict[str, Any] = {}


class WsOutbound(BaseModel):
    type: OutboundType
    data: dict[str, Any] = {}
