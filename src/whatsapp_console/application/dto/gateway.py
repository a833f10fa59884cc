from __future__ import annotations

from dataclasses import dataclass

from whatsapp_console.domain.value_objects.enums import ConnectionState
from whatsapp_console.domain.value_objects.pairing import PairingArtifact


@dataclass(frozen=True, slots=True)
class GatewayConfig:
    """Credentials and addressing for one gateway session."""

    base_url: str = ""
    api_key: str = ""
    session_id: str = ""

    @property
    def is_complete(self) -> bool:
        return all(v.strip() for v in (self.base_url, self.api_key, self.session_id))

    @property
    def endpoint(self) -> str:
        return self.base_url.strip().rstrip("/")


@dataclass(frozen=True, slots=True)
class StateReport:
    """Normalized answer of the connection-state query."""

    connected: bool
    provider_state: str


@dataclass(frozen=True, slots=True)
class DeliveryReceipt:
    gateway_message_id: str | None = None


@dataclass(frozen=True, slots=True)
class ConnectionSnapshot:
    state: ConnectionState
    artifact: PairingArtifact | None = None
