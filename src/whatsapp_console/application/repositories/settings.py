from __future__ import annotations

from typing import Protocol

from whatsapp_console.application.dto.gateway import GatewayConfig


class CredentialReader(Protocol):
    async def get(self) -> GatewayConfig | None: ...


class CredentialWriter(Protocol):
    async def save(self, config: GatewayConfig) -> None: ...
