"""
orderdesk.api.routers.health

Health and readiness endpoints.

Responsibilities:
- Liveness (`/healthz`) and readiness (`/readyz`) checks.
- `/health` status document consumed by the mini-app (reports DB state
  instead of failing).
"""

from __future__ import annotations

from datetime import UTC, datetime

from fastapi import APIRouter, Depends
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from orderdesk.api.deps import db_session
from orderdesk.observability.logging import get_logger

log = get_logger(__name__)

router = APIRouter()


@router.get("/healthz")
async def healthz() -> dict[str, str]:
    return {"status": "ok"}


@router.get("/readyz")
async def readyz(session: AsyncSession = Depends(db_session)) -> dict[str, str]:
    # Readiness: a DB failure propagates and becomes a 500.
    await session.execute(text("SELECT 1"))
    return {"status": "ready"}


@router.get("/health")
async def health(session: AsyncSession = Depends(db_session)) -> dict[str, str]:
    timestamp = datetime.now(tz=UTC).isoformat()
    try:
        await session.execute(text("SELECT 1"))
    except SQLAlchemyError as e:
        log.error("health.database_unreachable", error=str(e))
        return {"status": "error", "timestamp": timestamp, "database": "disconnected"}
    return {"status": "ok", "timestamp": timestamp, "database": "connected"}


# --- Module Notes -----------------------------------------------------------
# Kubernetes typically uses /healthz for liveness and /readyz for readiness gating.
