"""Health check endpoints — used by load balancers and uptime monitoring."""

from __future__ import annotations

import logging
import time
from datetime import datetime, timezone

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from sqlalchemy import func, select, text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from afritable.config import settings
from afritable.database import get_db
from afritable.models import Restaurant

logger = logging.getLogger(__name__)

router = APIRouter(tags=["health"])

_STARTED_AT = time.monotonic()
VERSION = "1.0.0"


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


def _uptime() -> float:
    return round(time.monotonic() - _STARTED_AT, 1)


@router.get("/health")
async def health(db: AsyncSession = Depends(get_db)) -> JSONResponse:
    """
    Full health check — DB connectivity plus restaurant count.
    Returns 503 with status "unhealthy" when the database is unreachable.
    """
    try:
        await db.execute(text("SELECT 1"))
        restaurants = await db.scalar(select(func.count(Restaurant.id))) or 0
    except SQLAlchemyError as exc:
        logger.error("Health check failed: %s", exc)
        return JSONResponse(
            status_code=503,
            content={
                "status": "unhealthy",
                "timestamp": _now(),
                "error": "Database connection failed",
                "uptime": _uptime(),
            },
        )

    return JSONResponse(
        status_code=200,
        content={
            "status": "healthy",
            "timestamp": _now(),
            "uptime": _uptime(),
            "database": "connected",
            "restaurants": restaurants,
            "version": VERSION,
            "environment": settings.app_env,
        },
    )


@router.get("/ready")
async def ready(db: AsyncSession = Depends(get_db)) -> JSONResponse:
    """Readiness probe — 200 once the database answers, 503 otherwise."""
    try:
        await db.execute(text("SELECT 1"))
    except SQLAlchemyError as exc:
        logger.warning("Readiness check failed: %s", exc)
        return JSONResponse(
            status_code=503,
            content={"status": "not ready", "timestamp": _now(), "error": "Application not ready"},
        )
    return JSONResponse(status_code=200, content={"status": "ready", "timestamp": _now()})


@router.get("/live")
async def live() -> dict:
    """Liveness probe — returns 200 if the process is running."""
    return {"status": "alive", "timestamp": _now(), "uptime": _uptime()}
