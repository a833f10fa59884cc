from __future__ import annotations

import logging

from whatsapp_console.application.dto.gateway import GatewayConfig
from whatsapp_console.application.ports.gateway import GatewayClient
from whatsapp_console.application.ports.store import MessageStore
from whatsapp_console.services.connection_monitor import DEFAULT_POLL_INTERVAL, ConnectionMonitor
from whatsapp_console.services.conversation_sync import ConversationSynchronizer

logger = logging.getLogger(__name__)


class ConsoleEngine:
    """Owns the connection monitor and the conversation synchronizer.

    Gateway credentials are handed in explicitly, at construction and on
    every save; neither component reads them from anywhere else.
    """

    def __init__(
        self,
        gateway: GatewayClient,
        store: MessageStore,
        config: GatewayConfig,
        *,
        poll_interval: float = DEFAULT_POLL_INTERVAL,
    ) -> None:
        self._config = config
        self.store = store
        self.monitor = ConnectionMonitor(gateway, config, interval=poll_interval)
        self.synchronizer = ConversationSynchronizer(store, gateway, self.monitor, config)

    @property
    def config(self) -> GatewayConfig:
        return self._config

    async def start(self) -> None:
        await self.monitor.start()

    async def stop(self) -> None:
        await self.monitor.stop()
        await self.synchronizer.close()
        logger.info("Console engine stopped")

    async def apply_config(self, config: GatewayConfig) -> None:
        self._config = config
        self.synchronizer.apply_config(config)
        await self.monitor.apply_config(config)
        logger.info("Gateway configuration applied (session=%s)", config.session_id)
