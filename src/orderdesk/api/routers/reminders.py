from __future__ import annotations

import uuid

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from orderdesk.api.deps import db_session
from orderdesk.api.schemas import Deleted, Item, Items, ReminderIn, ReminderOut, ReminderPatch
from orderdesk.auth.deps import get_current_user
from orderdesk.db.models import User
from orderdesk.db.repositories.reminders import ReminderRepo
from orderdesk.errors import NotFound
from orderdesk.services.access import OwnershipGuard

router = APIRouter(prefix="/reminders", tags=["reminders"])


@router.get("", response_model=Items[ReminderOut])
async def list_reminders(
    user: User = Depends(get_current_user),
    session: AsyncSession = Depends(db_session),
) -> dict:
    reminders = await ReminderRepo(session).list_for_user(user.id)
    return {"items": [ReminderOut.model_validate(r) for r in reminders]}


@router.post("", response_model=Item[ReminderOut])
async def create_reminder(
    body: ReminderIn,
    user: User = Depends(get_current_user),
    session: AsyncSession = Depends(db_session),
) -> dict:
    await OwnershipGuard(session).ensure_order(body.order_id, user.id)
    repo = ReminderRepo(session)
    reminder = await repo.create(
        order_id=body.order_id,
        remind_at=body.remind_at,
        sent=body.sent or False,
        channel=body.channel or "TELEGRAM",
    )
    await session.commit()

    loaded = await repo.get_with_order(reminder.id)
    if loaded is None:
        raise NotFound("Reminder not found")
    return {"item": ReminderOut.model_validate(loaded)}


@router.patch("/{reminder_id}", response_model=Item[ReminderOut])
async def patch_reminder(
    reminder_id: uuid.UUID,
    body: ReminderPatch,
    user: User = Depends(get_current_user),
    session: AsyncSession = Depends(db_session),
) -> dict:
    reminder = await OwnershipGuard(session).ensure_reminder(reminder_id, user.id)
    reminder = await ReminderRepo(session).update(reminder, body.changes())
    await session.commit()
    return {"item": ReminderOut.model_validate(reminder)}


@router.delete("/{reminder_id}", response_model=Deleted)
async def delete_reminder(
    reminder_id: uuid.UUID,
    user: User = Depends(get_current_user),
    session: AsyncSession = Depends(db_session),
) -> Deleted:
    reminder = await OwnershipGuard(session).ensure_reminder(reminder_id, user.id)
    await ReminderRepo(session).delete(reminder)
    await session.commit()
    return Deleted()
