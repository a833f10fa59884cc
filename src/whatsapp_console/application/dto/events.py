from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class InboundTextDTO:
    """Text message reported by the gateway webhook, already normalized."""

    gateway_message_id: str
    phone: str
    body: str
    from_me: bool
