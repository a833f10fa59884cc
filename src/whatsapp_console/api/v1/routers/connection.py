from __future__ import annotations

from fastapi import APIRouter

from whatsapp_console.api.deps import EngineDep
from whatsapp_console.api.v1.schemas.connection import ConnectionResponse

router = APIRouter(prefix="/api/v1/connection", tags=["connection"])


@router.get("", response_model=ConnectionResponse)
async def get_connection(engine: EngineDep) -> ConnectionResponse:
    return ConnectionResponse.from_snapshot(engine.monitor.snapshot)


@router.post("/pair", response_model=ConnectionResponse)
async def pair(engine: EngineDep) -> ConnectionResponse:
    await engine.monitor.request_pairing()
    return ConnectionResponse.from_snapshot(engine.monitor.snapshot)


@router.post("/disconnect", response_model=ConnectionResponse)
async def disconnect(engine: EngineDep) -> ConnectionResponse:
    await engine.monitor.disconnect()
    return ConnectionResponse.from_snapshot(engine.monitor.snapshot)
