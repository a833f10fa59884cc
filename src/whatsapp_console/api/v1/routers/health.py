from __future__ import annotations

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse
from redis.exceptions import RedisError
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from whatsapp_console.infrastructure.db.session import AsyncSessionLocal

router = APIRouter(tags=["health"])


@router.get("/healthz")
async def healthz() -> dict[str, str]:
    return {"status": "ok"}


@router.get("/readyz")
async def readyz(request: Request) -> JSONResponse:
    """Ready once Postgres and Redis answer and the connection monitor runs.

    The WhatsApp state is reported but does not gate readiness: an unpaired
    console is still able to serve the pairing screen.
    """
    errors: list[str] = []

    try:
        async with AsyncSessionLocal() as session:
            await session.execute(text("SELECT 1"))
    except (SQLAlchemyError, OSError) as exc:
        errors.append(f"postgres: {exc}")

    try:
        await request.app.state.redis.ping()
    except (RedisError, OSError) as exc:
        errors.append(f"redis: {exc}")

    monitor = request.app.state.engine.monitor
    if not monitor.is_running:
        errors.append("connection monitor: not running")

    content = {"whatsapp": str(monitor.state)}
    if errors:
        return JSONResponse(
            status_code=503,
            content={"status": "unavailable", "errors": errors, **content},
        )
    return JSONResponse(content={"status": "ready", **content})
