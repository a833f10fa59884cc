from __future__ import annotations

from pydantic import BaseModel

from whatsapp_console.application.dto.gateway import ConnectionSnapshot
from whatsapp_console.domain.value_objects.enums import ConnectionState, PairingFormat


class PairingArtifactResponse(BaseModel):
    format: PairingFormat
    value: str


class ConnectionResponse(BaseModel):
    state: ConnectionState
    pairing: PairingArtifactResponse | None = None

    @classmethod
    def from_snapshot(cls, snapshot: ConnectionSnapshot) -> ConnectionResponse:
        artifact = snapshot.artifact
        return cls(
            state=snapshot.state,
            pairing=(
                PairingArtifactResponse(format=artifact.format, value=artifact.value)
                if artifact is not None
                else None
            ),
        )
