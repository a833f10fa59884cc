from __future__ import annotations

from whatsapp_console.application.dto.gateway import GatewayConfig
from whatsapp_console.application.uow import UnitOfWork


async def load_gateway_config(
    uow: UnitOfWork,
    fallback: GatewayConfig,
) -> GatewayConfig:
    """Return the saved credentials, or ``fallback`` when none were saved yet."""
    saved = await uow.credentials.get()
    return saved if saved is not None else fallback


async def save_gateway_config(
    config: GatewayConfig,
    uow: UnitOfWork,
) -> GatewayConfig:
    config = GatewayConfig(
        base_url=config.base_url.strip(),
        api_key=config.api_key.strip(),
        session_id=config.session_id.strip(),
    )
    await uow.credentials_w.save(config)
    await uow.commit()
    return config
