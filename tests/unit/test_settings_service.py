from __future__ import annotations

import pytest

from whatsapp_console.application.dto.gateway import GatewayConfig
from whatsapp_console.services import settings_service
from tests.conftest import FakeCredentialStore, FakeUoW


@pytest.mark.asyncio
async def test_load_falls_back_when_nothing_saved():
    fallback = GatewayConfig(base_url="https://env.example.com", api_key="k", session_id="s")

    config = await settings_service.load_gateway_config(FakeUoW(), fallback)

    assert config == fallback


@pytest.mark.asyncio
async def test_load_prefers_saved_credentials(gateway_config):
    uow = FakeUoW(credentials=FakeCredentialStore(saved=gateway_config))

    config = await settings_service.load_gateway_config(uow, GatewayConfig())

    assert config == gateway_config


@pytest.mark.asyncio
async def test_save_strips_and_commits():
    uow = FakeUoW()

    saved = await settings_service.save_gateway_config(
        GatewayConfig(base_url=" https://gw.example.com/ ", api_key=" key ", session_id=" console"),
        uow,
    )

    assert saved == GatewayConfig(base_url="https://gw.example.com/", api_key="key", session_id="console")
    assert uow.credentials.saved == saved
    assert uow._committed is True
    assert saved.endpoint == "https://gw.example.com"
    assert saved.is_complete is True
