from __future__ import annotations

from dataclasses import dataclass

from whatsapp_console.domain.entities.message import Message


@dataclass(frozen=True, slots=True)
class SendOutcome:
    """Result of an outbound send whose durable write succeeded.

    ``delivered`` is False when the gateway rejected or never received the
    text; ``warning`` then carries the gateway's reason. The message itself
    is stored either way.
    """

    message: Message
    delivered: bool
    warning: str | None = None
    gateway_message_id: str | None = None
