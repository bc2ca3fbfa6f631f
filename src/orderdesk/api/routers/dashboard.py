from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from orderdesk.api.deps import db_session
from orderdesk.auth.deps import get_current_user
from orderdesk.db.models import User
from orderdesk.services.dashboard import build_summary

router = APIRouter(prefix="/dashboard", tags=["dashboard"])


@router.get("/summary")
async def dashboard_summary(
    user: User = Depends(get_current_user),
    session: AsyncSession = Depends(db_session),
) -> dict[str, Any]:
    return await build_summary(session, user.id)
