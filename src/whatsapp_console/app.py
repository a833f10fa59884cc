from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

import redis.asyncio as aioredis
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from whatsapp_console.api.middleware.correlation_id import CorrelationIdMiddleware
from whatsapp_console.api.v1.routers import (
    chat,
    connection,
    conversations,
    health,
    settings as settings_router,
    webhook,
    ws,
)
from whatsapp_console.api.v1.schemas.connection import ConnectionResponse
from whatsapp_console.application.dto.gateway import ConnectionSnapshot
from whatsapp_console.application.exceptions import (
    ConflictError,
    GatewayError,
    NotFoundError,
    StoreError,
    ValidationError,
)
from whatsapp_console.config import settings
from whatsapp_console.infrastructure.bus.redis_pubsub import RedisPubSubPublisher
from whatsapp_console.infrastructure.db.session import AsyncSessionLocal
from whatsapp_console.infrastructure.db.uow import SqlAlchemyUoW
from whatsapp_console.infrastructure.gateway.evolution import EvolutionGatewayClient
from whatsapp_console.infrastructure.store.message_store import SqlMessageStore
from whatsapp_console.infrastructure.ws.manager import ConnectionManager
from whatsapp_console.services import settings_service
from whatsapp_console.services.engine import ConsoleEngine

logger = logging.getLogger(__name__)


def wire_ui_events(engine: ConsoleEngine, manager: ConnectionManager) -> None:
    """Forward engine state changes to every connected console tab."""

    async def _on_connection(snapshot: ConnectionSnapshot) -> None:
        data = ConnectionResponse.from_snapshot(snapshot).model_dump(mode="json")
        await manager.broadcast("connection.updated", data)

    engine.monitor.add_listener(_on_connection)
    engine.synchronizer.add_listener(manager.broadcast)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Startup / shutdown lifecycle."""
    app.state.redis = aioredis.from_url(
        settings.REDIS_URL,
        decode_responses=True,
    )
    logger.info("Redis connection pool created")

    async with SqlAlchemyUoW.scoped(AsyncSessionLocal) as uow:
        config = await settings_service.load_gateway_config(
            uow, settings.default_gateway_config,
        )

    gateway = EvolutionGatewayClient(timeout=settings.GATEWAY_TIMEOUT)
    store = SqlMessageStore(
        AsyncSessionLocal,
        RedisPubSubPublisher(app.state.redis),
        app.state.redis,
        settings.LIVE_FEED_CHANNEL_PREFIX,
    )
    engine = ConsoleEngine(
        gateway, store, config, poll_interval=settings.CONNECTION_POLL_INTERVAL,
    )
    app.state.ws_manager = ConnectionManager()
    wire_ui_events(engine, app.state.ws_manager)
    await engine.start()
    app.state.engine = engine

    yield

    await engine.stop()
    await gateway.aclose()
    await app.state.redis.aclose()
    logger.info("Redis connection pool closed")


def create_app() -> FastAPI:
    app = FastAPI(
        title="WhatsApp Console",
        version="0.1.0",
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_middleware(CorrelationIdMiddleware)

    _register_exception_handlers(app)

    app.include_router(health.router)
    app.include_router(conversations.router)
    app.include_router(chat.router)
    app.include_router(connection.router)
    app.include_router(settings_router.router)
    app.include_router(webhook.router)
    app.include_router(ws.router)

    return app


def _register_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(NotFoundError)
    async def _not_found(_req: Request, exc: NotFoundError) -> JSONResponse:
        return JSONResponse(status_code=404, content={"detail": exc.detail})

    @app.exception_handler(ConflictError)
    async def _conflict(_req: Request, exc: ConflictError) -> JSONResponse:
        return JSONResponse(status_code=409, content={"detail": exc.detail})

    @app.exception_handler(ValidationError)
    async def _validation(_req: Request, exc: ValidationError) -> JSONResponse:
        return JSONResponse(status_code=422, content={"detail": exc.detail})

    @app.exception_handler(StoreError)
    async def _store(_req: Request, exc: StoreError) -> JSONResponse:
        return JSONResponse(status_code=503, content={"detail": exc.detail})

    @app.exception_handler(GatewayError)
    async def _gateway(_req: Request, exc: GatewayError) -> JSONResponse:
        return JSONResponse(
            status_code=502,
            content={"detail": exc.detail, "gateway_status": exc.status_code},
        )
