from __future__ import annotations

from whatsapp_console.application.dto.gateway import GatewayConfig
from whatsapp_console.infrastructure.db.models.settings import GatewaySettingsModel


def model_to_config(model: GatewaySettingsModel) -> GatewayConfig:
    return GatewayConfig(
        base_url=model.base_url,
        api_key=model.api_key,
        session_id=model.session_id,
    )
