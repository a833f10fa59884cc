"""FastAPI dependency injection helpers."""
from __future__ import annotations

from typing import Annotated, AsyncIterator

from fastapi import Depends, Request

from whatsapp_console.application.ports.store import MessageStore
from whatsapp_console.infrastructure.db.session import AsyncSessionLocal
from whatsapp_console.infrastructure.db.uow import SqlAlchemyUoW
from whatsapp_console.services.engine import ConsoleEngine


async def get_uow() -> AsyncIterator[SqlAlchemyUoW]:
    async with SqlAlchemyUoW.scoped(AsyncSessionLocal) as uow:
        yield uow


UoWDep = Annotated[SqlAlchemyUoW, Depends(get_uow)]


def get_engine(request: Request) -> ConsoleEngine:
    """The process-wide engine built in the app lifespan."""
    return request.app.state.engine


EngineDep = Annotated[ConsoleEngine, Depends(get_engine)]


def get_store(engine: EngineDep) -> MessageStore:
    return engine.store


StoreDep = Annotated[MessageStore, Depends(get_store)]
