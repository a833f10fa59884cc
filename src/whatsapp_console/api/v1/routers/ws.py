from __future__ import annotations

import asyncio
import logging

from fastapi import APIRouter, WebSocket, WebSocketDisconnect
from pydantic import ValidationError as PydanticValidationError

from whatsapp_console.api.v1.schemas.connection import ConnectionResponse
from whatsapp_console.config import settings
from whatsapp_console.infrastructure.ws.manager import ConnectionManager
from whatsapp_console.infrastructure.ws.protocol import WsInbound, WsOutbound

logger = logging.getLogger(__name__)
router = APIRouter(tags=["websocket"])


@router.websocket("/ws/console")
async def ws_console(websocket: WebSocket) -> None:
    manager: ConnectionManager = websocket.app.state.ws_manager
    engine = websocket.app.state.engine

    await manager.connect(websocket)
    snapshot = ConnectionResponse.from_snapshot(engine.monitor.snapshot)
    await websocket.send_text(
        WsOutbound(type="connection.updated", data=snapshot.model_dump(mode="json")).model_dump_json()
    )

    heartbeat_task = asyncio.create_task(_heartbeat(websocket), name="ws-heartbeat")
    try:
        await _read_loop(websocket)
    except WebSocketDisconnect:
        pass
    except Exception:
        logger.exception("WS error")
    finally:
        heartbeat_task.cancel()
        manager.disconnect(websocket)


async def _heartbeat(ws: WebSocket) -> None:
    interval = settings.WS_HEARTBEAT_SECONDS
    try:
        while True:
            await asyncio.sleep(interval)
            await ws.send_text(WsOutbound(type="pong", data={}).model_dump_json())
    except asyncio.CancelledError:
        pass
    except Exception:
        logger.debug("WS heartbeat stopped", exc_info=True)


async def _read_loop(ws: WebSocket) -> None:
    while True:
        raw = await ws.receive_text()
        try:
            msg = WsInbound.model_validate_json(raw)
        except PydanticValidationError:
            await ws.send_text(
                WsOutbound(type="error", data={"code": "invalid_payload"}).model_dump_json()
            )
            continue

        if msg.type == "ping":
            await ws.send_text(WsOutbound(type="pong", data={}).model_dump_json())
        else:
            await ws.send_text(
                WsOutbound(type="error", data={"code": "unknown_type", "type": msg.type}).model_dump_json()
            )
