"""HTTP client for an Evolution-API compatible WhatsApp gateway."""
from __future__ import annotations

import logging
from typing import Any

import httpx

from whatsapp_console.application.dto.gateway import (
    DeliveryReceipt,
    GatewayConfig,
    StateReport,
)
from whatsapp_console.application.exceptions import GatewayError
from whatsapp_console.domain.value_objects.pairing import PairingArtifact
from whatsapp_console.infrastructure.gateway import parsing

logger = logging.getLogger(__name__)

# Delivery-timing hints forwarded with every text.
SEND_DELAY_MS = 100
LINK_PREVIEW = False


class EvolutionGatewayClient:
    """Implements application.ports.gateway.GatewayClient.

    Holds no session state of its own: every call is addressed by the
    ``GatewayConfig`` it is given.
    """

    def __init__(
        self,
        *,
        timeout: float = 15.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._http = httpx.AsyncClient(timeout=timeout, transport=transport)

    async def aclose(self) -> None:
        await self._http.aclose()

    async def create_session(self, config: GatewayConfig) -> dict[str, Any]:
        payload = {
            "instanceName": config.session_id,
            "token": config.api_key,
            "number": "",
            "qrcode": True,
        }
        response = await self._request(config, "POST", "/instance/create", json=payload)
        return _json_or_empty(response)

    async def fetch_pairing_artifact(self, config: GatewayConfig) -> PairingArtifact:
        response = await self._request(
            config, "GET", f"/instance/connect/{config.session_id}",
        )
        artifact = parsing.parse_pairing_artifact(_json_or_empty(response))
        if artifact is None:
            raise GatewayError("Gateway returned no pairing code", response.status_code)
        return artifact

    async def query_state(self, config: GatewayConfig) -> StateReport:
        try:
            response = await self._http.get(
                f"{config.endpoint}/instance/connectionStatus/{config.session_id}",
                headers=_headers(config),
            )
        except httpx.HTTPError as exc:
            logger.debug("State query transport failure: %s", exc)
            return parsing.DISCONNECTED
        if response.is_error:
            logger.debug("State query returned HTTP %d", response.status_code)
            return parsing.DISCONNECTED
        return parsing.parse_state(_json_or_empty(response))

    async def terminate_session(self, config: GatewayConfig) -> dict[str, Any]:
        response = await self._request(
            config, "DELETE", f"/instance/logout/{config.session_id}",
        )
        return _json_or_empty(response)

    async def send_text(
        self,
        config: GatewayConfig,
        address: str,
        body: str,
    ) -> DeliveryReceipt:
        payload = {
            "number": address,
            "text": body,
            "delay": SEND_DELAY_MS,
            "linkPreview": LINK_PREVIEW,
        }
        response = await self._request(
            config, "POST", f"/message/sendText/{config.session_id}", json=payload,
        )
        return parsing.parse_delivery(_json_or_empty(response))

    async def _request(
        self,
        config: GatewayConfig,
        method: str,
        path: str,
        *,
        json: dict[str, Any] | None = None,
    ) -> httpx.Response:
        url = f"{config.endpoint}{path}"
        try:
            response = await self._http.request(
                method, url, json=json, headers=_headers(config),
            )
        except httpx.HTTPError as exc:
            logger.warning("Gateway %s %s failed: %s", method, path, exc)
            raise GatewayError(f"Gateway unreachable: {exc.__class__.__name__}") from exc

        if response.is_error:
            reason = parsing.parse_error_reason(_json_or_text(response))
            logger.warning(
                "Gateway %s %s returned HTTP %d: %s",
                method, path, response.status_code, reason,
            )
            raise GatewayError(
                reason or f"Gateway returned HTTP {response.status_code}",
                response.status_code,
            )
        return response


def _headers(config: GatewayConfig) -> dict[str, str]:
    return {"apikey": config.api_key}


def _json_or_empty(response: httpx.Response) -> Any:
    try:
        return response.json()
    except ValueError:
        return {}


def _json_or_text(response: httpx.Response) -> Any:
    try:
        return response.json()
    except ValueError:
        return response.text
