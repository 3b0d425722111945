import logging
import time
from datetime import datetime, timezone
from fastapi import APIRouter, Depends, Response
from fastapi.responses import JSONResponse
from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession
from app.core.config import settings
from app.core.db import get_session
from app.modules.animals.router import router as animals_router
from app.modules.health_events.router import router as health_events_router
from app.modules.measurements.router import router as measurements_router
from app.modules.media.router import router as media_router, ingest_router as media_ingest_router
from app.modules.notifications.router import router as notifications_router

log = logging.getLogger("api.health")
STARTED_AT = time.monotonic()

api_router = APIRouter()
api_router.include_router(animals_router, prefix="/animals", tags=["animals"])
api_router.include_router(media_router, prefix="/animals/{animal_id}/media", tags=["media"])
api_router.include_router(measurements_router, prefix="/animals/{animal_id}/measurements", tags=["measurements"])
api_router.include_router(health_events_router, prefix="/animals/{animal_id}/health", tags=["health-events"])
api_router.include_router(media_ingest_router, prefix="/media", tags=["media"])
api_router.include_router(notifications_router, prefix="/notifications", tags=["notifications"])

async def _database_status(session: AsyncSession) -> str:
    try:
        await session.execute(text("SELECT 1"))
    except Exception:
        log.exception("Database health check failed")
        return "unhealthy"
    return "healthy"

@api_router.get("/health", tags=["health"])
async def health(session: AsyncSession = Depends(get_session)):
    started = time.monotonic()
    database = await _database_status(session)
    body = {
        "status": database,
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "uptime": round(time.monotonic() - STARTED_AT, 3),
        "environment": settings.ENV,
        "version": settings.APP_VERSION,
        "checks": {
            "database": database,
            "response_time_ms": round((time.monotonic() - started) * 1000, 2),
        },
    }
    return JSONResponse(body, status_code=503 if database == "unhealthy" else 200)

@api_router.head("/health", tags=["health"])
async def ping(session: AsyncSession = Depends(get_session)):
    database = await _database_status(session)
    return Response(status_code=503 if database == "unhealthy" else 200)
