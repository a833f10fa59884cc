"""Normalize provider responses into internal types.

The provider's payloads vary between versions (optional fields, nested
``instance`` objects, inconsistent casing of state names); nothing past
this module looks at raw JSON.
"""
from __future__ import annotations

from typing import Any

from whatsapp_console.application.dto.events import InboundTextDTO
from whatsapp_console.application.dto.gateway import DeliveryReceipt, StateReport
from whatsapp_console.domain.value_objects.enums import PairingFormat
from whatsapp_console.domain.value_objects.pairing import PairingArtifact

CONNECTED_STATES = frozenset({"open", "connected"})
DISCONNECTED = StateReport(connected=False, provider_state="disconnected")


def parse_state(data: Any) -> StateReport:
    if not isinstance(data, dict):
        return DISCONNECTED
    instance = data.get("instance")
    raw = instance.get("state") if isinstance(instance, dict) else data.get("state")
    if not isinstance(raw, str) or not raw:
        return DISCONNECTED
    state = raw.strip().lower()
    return StateReport(connected=state in CONNECTED_STATES, provider_state=state)


def parse_pairing_artifact(data: Any) -> PairingArtifact | None:
    """Return the pairing token, preferring the scannable image."""
    if not isinstance(data, dict):
        return None
    image = data.get("base64")
    if isinstance(image, str) and image:
        return PairingArtifact(format=PairingFormat.IMAGE, value=image)
    for key in ("code", "pairingCode"):
        code = data.get(key)
        if isinstance(code, str) and code:
            return PairingArtifact(format=PairingFormat.CODE, value=code)
    return None


def parse_error_reason(data: Any) -> str | None:
    """Dig a human-readable reason out of an error body."""
    if isinstance(data, str):
        return data.strip() or None
    if not isinstance(data, dict):
        return None
    candidates = [data.get("message")]
    response = data.get("response")
    if isinstance(response, dict):
        candidates.append(response.get("message"))
    candidates.append(data.get("error"))
    for value in candidates:
        if isinstance(value, list):
            value = "; ".join(str(v) for v in value if v)
        if isinstance(value, str) and value.strip():
            return value.strip()
    return None


def parse_delivery(data: Any) -> DeliveryReceipt:
    if isinstance(data, dict):
        key = data.get("key")
        if isinstance(key, dict) and isinstance(key.get("id"), str):
            return DeliveryReceipt(gateway_message_id=key["id"])
    return DeliveryReceipt()


def parse_inbound_text(payload: Any) -> InboundTextDTO | None:
    """Extract a one-to-one text message from a ``messages.upsert`` webhook event.

    Returns None for other events, group chats and non-text content.
    """
    if not isinstance(payload, dict):
        return None
    event = str(payload.get("event", "")).lower().replace("_", ".")
    if event != "messages.upsert":
        return None
    data = payload.get("data")
    if isinstance(data, list):
        data = data[0] if data else None
    if not isinstance(data, dict):
        return None
    key = data.get("key")
    if not isinstance(key, dict):
        return None
    jid = key.get("remoteJid")
    message_id = key.get("id")
    if not isinstance(jid, str) or not isinstance(message_id, str):
        return None
    address, _, domain = jid.partition("@")
    if domain and domain != "s.whatsapp.net":
        return None

    content = data.get("message")
    if not isinstance(content, dict):
        return None
    text = content.get("conversation")
    if not text:
        extended = content.get("extendedTextMessage")
        text = extended.get("text") if isinstance(extended, dict) else None
    if not isinstance(text, str) or not text.strip():
        return None

    return InboundTextDTO(
        gateway_message_id=message_id,
        phone=address,
        body=text,
        from_me=bool(key.get("fromMe")),
    )
