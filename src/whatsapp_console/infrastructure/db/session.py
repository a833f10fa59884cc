from __future__ import annotations

from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine

from whatsapp_console.config import settings

APPLICATION_NAME = "whatsapp-console"


def build_engine(url: str) -> AsyncEngine:
    return create_async_engine(
        url,
        pool_size=settings.DB_POOL_SIZE,
        max_overflow=settings.DB_MAX_OVERFLOW,
        pool_pre_ping=True,
        pool_recycle=settings.DB_POOL_RECYCLE,
        # Identifies console connections in pg_stat_activity.
        connect_args={"server_settings": {"application_name": APPLICATION_NAME}},
    )


engine = build_engine(settings.database_url)

# Mappers read model attributes after commit.
AsyncSessionLocal: async_sessionmaker[AsyncSession] = async_sessionmaker(
    bind=engine,
    autoflush=False,
    expire_on_commit=False,
)
