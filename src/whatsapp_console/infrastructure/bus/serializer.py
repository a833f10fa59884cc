"""JSON envelopes for the live feed and the Message <-> payload mapping."""
from __future__ import annotations

import json
from datetime import datetime
from typing import Any
from uuid import UUID

from whatsapp_console.domain.entities.message import Message

ENVELOPE_VERSION = 1


def serialize_event(event_type: str, payload: dict[str, Any]) -> str:
    return json.dumps({"v": ENVELOPE_VERSION, "event": event_type, "data": payload})


def deserialize_event(raw: str | bytes) -> tuple[str, dict[str, Any]]:
    envelope = json.loads(raw)
    if not isinstance(envelope, dict) or envelope.get("v") != ENVELOPE_VERSION:
        raise ValueError(f"Unsupported feed envelope: {str(raw)[:80]}")
    return envelope["event"], envelope["data"]


def message_to_payload(message: Message) -> dict[str, Any]:
    """JSON-safe view of a stored message, shared by the feed and the UI socket."""
    return {
        "id": str(message.id),
        "conversation_id": str(message.conversation_id),
        "body": message.body,
        "from_me": message.from_me,
        "status": str(message.status),
        "gateway_message_id": message.gateway_message_id,
        "created_at": message.created_at.isoformat(),
    }


def payload_to_message(data: dict[str, Any]) -> Message:
    return Message(
        id=UUID(data["id"]),
        conversation_id=UUID(data["conversation_id"]),
        body=data["body"],
        from_me=bool(data["from_me"]),
        status=data["status"],
        gateway_message_id=data.get("gateway_message_id"),
        created_at=datetime.fromisoformat(data["created_at"]),
    )
