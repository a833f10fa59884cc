from __future__ import annotations

from fastapi import APIRouter

from whatsapp_console.api.deps import EngineDep, UoWDep
from whatsapp_console.api.v1.schemas.settings import (
    GatewaySettingsRequest,
    GatewaySettingsResponse,
)
from whatsapp_console.application.dto.gateway import GatewayConfig
from whatsapp_console.services import settings_service

router = APIRouter(prefix="/api/v1/settings", tags=["settings"])


def _to_response(config: GatewayConfig) -> GatewaySettingsResponse:
    return GatewaySettingsResponse(
        base_url=config.base_url,
        api_key=config.api_key,
        session_id=config.session_id,
        is_complete=config.is_complete,
    )


@router.get("/gateway", response_model=GatewaySettingsResponse)
async def get_gateway_settings(engine: EngineDep) -> GatewaySettingsResponse:
    return _to_response(engine.config)


@router.put("/gateway", response_model=GatewaySettingsResponse)
async def save_gateway_settings(
    body: GatewaySettingsRequest,
    uow: UoWDep,
    engine: EngineDep,
) -> GatewaySettingsResponse:
    config = await settings_service.save_gateway_config(
        GatewayConfig(
            base_url=body.base_url,
            api_key=body.api_key,
            session_id=body.session_id,
        ),
        uow,
    )
    await engine.apply_config(config)
    return _to_response(config)
