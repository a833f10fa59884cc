from __future__ import annotations

from dataclasses import dataclass

from whatsapp_console.domain.value_objects.enums import PairingFormat


@dataclass(frozen=True, slots=True)
class PairingArtifact:
    """Short-lived token the operator scans to link the gateway session."""

    format: PairingFormat
    value: str
