from __future__ import annotations

from typing import Any, Protocol

from whatsapp_console.application.dto.gateway import (
    DeliveryReceipt,
    GatewayConfig,
    StateReport,
)
from whatsapp_console.domain.value_objects.pairing import PairingArtifact


class GatewayClient(Protocol):
    async def create_session(self, config: GatewayConfig) -> dict[str, Any]: ...

    async def fetch_pairing_artifact(self, config: GatewayConfig) -> PairingArtifact: ...

    async def query_state(self, config: GatewayConfig) -> StateReport:
        """Never raises: transport failure is reported as disconnected."""
        ...

    async def terminate_session(self, config: GatewayConfig) -> dict[str, Any]: ...

    async def send_text(
        self, config: GatewayConfig, address: str, body: str,
    ) -> DeliveryReceipt: ...
