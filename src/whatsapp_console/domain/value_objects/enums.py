from __future__ import annotations

from enum import StrEnum


class MessageStatus(StrEnum):
    SENT = "sent"
    DELIVERED = "delivered"
    READ = "read"


class ConnectionState(StrEnum):
    UNKNOWN = "unknown"
    DISCONNECTED = "disconnected"
    PAIRING = "pairing"
    CONNECTED = "connected"


class PairingFormat(StrEnum):
    IMAGE = "image"
    CODE = "code"
