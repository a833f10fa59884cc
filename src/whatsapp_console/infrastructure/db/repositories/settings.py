from __future__ import annotations

from sqlalchemy import func
from sqlalchemy.dialects.postgresql import insert as pg_insert
from sqlalchemy.ext.asyncio import AsyncSession

from whatsapp_console.application.dto.gateway import GatewayConfig
from whatsapp_console.infrastructure.db.mappers import settings as mapper
from whatsapp_console.infrastructure.db.models.settings import (
    SINGLETON_ID,
    GatewaySettingsModel,
)


class CredentialReaderRepo:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def get(self) -> GatewayConfig | None:
        model = await self._session.get(GatewaySettingsModel, SINGLETON_ID)
        return mapper.model_to_config(model) if model else None


class CredentialWriterRepo:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def save(self, config: GatewayConfig) -> None:
        values = {
            "base_url": config.base_url,
            "api_key": config.api_key,
            "session_id": config.session_id,
        }
        stmt = (
            pg_insert(GatewaySettingsModel)
            .values(id=SINGLETON_ID, **values)
            .on_conflict_do_update(
                index_elements=["id"],
                set_={**values, "updated_at": func.now()},
            )
        )
        await self._session.execute(stmt)
