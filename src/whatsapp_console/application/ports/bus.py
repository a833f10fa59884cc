from __future__ import annotations

from typing import Any, Protocol


class EventPublisher(Protocol):
    """Fan-out of store events to live viewers."""

    async def publish(self, channel: str, payload: dict[str, Any]) -> int:
        """Return the number of subscribers that received ``payload``."""
        ...
