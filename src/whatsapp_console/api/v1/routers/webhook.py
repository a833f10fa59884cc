from __future__ import annotations

import logging
from typing import Any

from fastapi import APIRouter

from whatsapp_console.api.deps import StoreDep, UoWDep
from whatsapp_console.infrastructure.gateway.parsing import parse_inbound_text
from whatsapp_console.services import inbound_service

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/v1/gateway", tags=["gateway"])


@router.post("/webhook")
async def gateway_webhook(
    payload: dict[str, Any],
    uow: UoWDep,
    store: StoreDep,
) -> dict[str, str]:
    inbound = parse_inbound_text(payload)
    if inbound is None:
        logger.debug("Ignoring gateway event %s", payload.get("event"))
        return {"status": "ignored"}

    message = await inbound_service.record_inbound_text(inbound, uow, store)
    if message is None:
        return {"status": "ignored"}
    return {"status": "recorded", "message_id": str(message.id)}
