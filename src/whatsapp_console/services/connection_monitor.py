"""Gateway pairing/connection state machine driven by periodic polling."""
from __future__ import annotations

import asyncio
import logging
from typing import Any, Callable, Coroutine

from whatsapp_console.application.dto.gateway import ConnectionSnapshot, GatewayConfig
from whatsapp_console.application.exceptions import ValidationError
from whatsapp_console.application.ports.gateway import GatewayClient
from whatsapp_console.domain.value_objects.enums import ConnectionState
from whatsapp_console.domain.value_objects.pairing import PairingArtifact

logger = logging.getLogger(__name__)

DEFAULT_POLL_INTERVAL = 10.0

StateListener = Callable[[ConnectionSnapshot], Coroutine[Any, Any, None]]


class ConnectionMonitor:
    """Owns the process-wide ConnectionState and the held pairing artifact.

    Polls, pairing and disconnect run one at a time behind a single lock, so
    a user action issued mid-poll waits for the poll to finish and two
    pairing requests apply in call order.
    """

    def __init__(
        self,
        gateway: GatewayClient,
        config: GatewayConfig,
        *,
        interval: float = DEFAULT_POLL_INTERVAL,
    ) -> None:
        self._gateway = gateway
        self._config = config
        self._interval = interval
        self._state = ConnectionState.UNKNOWN
        self._artifact: PairingArtifact | None = None
        self._pairing = False
        self._lock = asyncio.Lock()
        self._poll_in_flight = False
        self._task: asyncio.Task[None] | None = None
        self._listeners: list[StateListener] = []
        # Snapshots taken under the lock, delivered after it is released.
        self._pending: list[ConnectionSnapshot] = []

    @property
    def state(self) -> ConnectionState:
        return self._state

    @property
    def artifact(self) -> PairingArtifact | None:
        return self._artifact

    @property
    def snapshot(self) -> ConnectionSnapshot:
        return ConnectionSnapshot(state=self._state, artifact=self._artifact)

    @property
    def is_running(self) -> bool:
        return self._task is not None and not self._task.done()

    def add_listener(self, listener: StateListener) -> None:
        self._listeners.append(listener)

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    async def start(self) -> None:
        if self.is_running:
            return
        self._task = asyncio.create_task(self._run(), name="connection-monitor")
        logger.info("Connection monitor started (interval=%.1fs)", self._interval)

    async def stop(self) -> None:
        if self._task:
            self._task.cancel()
            try:
                await self._task
            except asyncio.CancelledError:
                pass
            self._task = None
            logger.info("Connection monitor stopped")

    async def _run(self) -> None:
        # Sleeping only after a poll returns keeps ticks from overlapping.
        while True:
            await self.poll_once()
            await asyncio.sleep(self._interval)

    async def apply_config(self, config: GatewayConfig) -> None:
        """Swap in saved credentials and re-check the connection right away.

        A different session drops the old state and pairing artifact first,
        so nothing carries over from a session that was never verified.
        """
        try:
            async with self._lock:
                changed = config != self._config
                self._config = config
                if changed or not config.is_complete:
                    self._transition(ConnectionState.UNKNOWN, clear_artifact=True)
                if config.is_complete:
                    await self._poll_guarded()
        finally:
            await self._flush()

    # ------------------------------------------------------------------
    # Polling
    # ------------------------------------------------------------------

    async def poll_once(self) -> ConnectionState:
        """Run one poll tick. A tick requested while another is in flight is skipped."""
        if self._poll_in_flight:
            return self._state
        self._poll_in_flight = True
        try:
            async with self._lock:
                await self._poll_guarded()
        finally:
            self._poll_in_flight = False
            await self._flush()
        return self._state

    async def _poll_guarded(self) -> None:
        try:
            await self._poll_locked()
        except Exception:
            logger.exception("Connection poll failed")
            if self._state != ConnectionState.UNKNOWN:
                self._transition(self._not_connected_state())

    async def _poll_locked(self) -> None:
        config = self._config
        if not config.is_complete:
            self._transition(ConnectionState.UNKNOWN, clear_artifact=True)
            return

        report = await self._gateway.query_state(config)
        if report.connected:
            self._transition(ConnectionState.CONNECTED, clear_artifact=True)
        else:
            self._transition(self._not_connected_state())

    def _not_connected_state(self) -> ConnectionState:
        return ConnectionState.PAIRING if self._pairing else ConnectionState.DISCONNECTED

    # ------------------------------------------------------------------
    # User-triggered actions
    # ------------------------------------------------------------------

    async def request_pairing(self) -> PairingArtifact:
        """Create the gateway session and fetch a fresh pairing artifact.

        Raises GatewayError without touching the current state when either
        call fails; the operator has to trigger pairing again.
        """
        try:
            async with self._lock:
                config = self._require_config()
                await self._gateway.create_session(config)
                artifact = await self._gateway.fetch_pairing_artifact(config)
                self._pairing = True
                self._artifact = artifact
                self._transition(ConnectionState.PAIRING, force_notify=True)
                logger.info(
                    "Pairing started for session %s (%s)", config.session_id, artifact.format,
                )
                return artifact
        finally:
            await self._flush()

    async def disconnect(self) -> None:
        """Revoke the gateway session. State is left untouched on failure."""
        try:
            async with self._lock:
                config = self._require_config()
                await self._gateway.terminate_session(config)
                self._transition(ConnectionState.DISCONNECTED, clear_artifact=True)
                logger.info("Session %s disconnected", config.session_id)
        finally:
            await self._flush()

    def _require_config(self) -> GatewayConfig:
        if not self._config.is_complete:
            raise ValidationError("Gateway URL, API key and session must be configured")
        return self._config

    def _transition(
        self,
        state: ConnectionState,
        *,
        clear_artifact: bool = False,
        force_notify: bool = False,
    ) -> None:
        changed = state != self._state
        if clear_artifact:
            changed = changed or self._artifact is not None
            self._artifact = None
            self._pairing = False
        self._state = state
        if changed:
            logger.info("Connection state -> %s", state)
        if changed or force_notify:
            self._pending.append(self.snapshot)

    async def _flush(self) -> None:
        """Deliver queued snapshots; runs outside the lock so slow listeners never block polls."""
        pending, self._pending = self._pending, []
        for snapshot in pending:
            await self._notify(snapshot)

    async def _notify(self, snapshot: ConnectionSnapshot) -> None:
        for listener in list(self._listeners):
            try:
                await listener(snapshot)
            except Exception:
                logger.exception("Connection state listener failed")
