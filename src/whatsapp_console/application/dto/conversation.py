from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class ConversationFilterDTO:
    query: str | None = None
    limit: int = 200
