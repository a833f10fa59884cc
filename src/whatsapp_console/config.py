from __future__ import annotations

from pydantic import ConfigDict
from pydantic_settings import BaseSettings

from whatsapp_console.application.dto.gateway import GatewayConfig


class Settings(BaseSettings):
    APP_HOST: str = "0.0.0.0"
    APP_PORT: int = 8000
    LOG_LEVEL: str = "INFO"

    POSTGRES_USER: str
    POSTGRES_PASSWORD: str
    POSTGRES_DB: str
    DB_HOST: str = "localhost"
    DB_PORT: int = 5432

    DB_POOL_SIZE: int = 10
    DB_MAX_OVERFLOW: int = 20
    DB_POOL_RECYCLE: int = 300

    REDIS_URL: str = "redis://localhost:6379/0"
    LIVE_FEED_CHANNEL_PREFIX: str = "console.messages"

    CORS_ORIGINS: list[str] = ["*"]

    CONNECTION_POLL_INTERVAL: float = 10.0
    GATEWAY_TIMEOUT: float = 15.0

    # Bootstrap credentials, used only until the operator saves their own.
    GATEWAY_URL: str = ""
    GATEWAY_API_KEY: str = ""
    GATEWAY_SESSION: str = ""

    WS_HEARTBEAT_SECONDS: int = 30

    @property
    def database_url(self) -> str:
        return (
            f"postgresql+asyncpg://{self.POSTGRES_USER}:{self.POSTGRES_PASSWORD}"
            f"@{self.DB_HOST}:{self.DB_PORT}/{self.POSTGRES_DB}"
        )

    @property
    def default_gateway_config(self) -> GatewayConfig:
        return GatewayConfig(
            base_url=self.GATEWAY_URL,
            api_key=self.GATEWAY_API_KEY,
            session_id=self.GATEWAY_SESSION,
        )

    model_config = ConfigDict(
        env_file=".env",
        extra="ignore",
    )


settings = Settings()  # type: ignore[call-arg]
