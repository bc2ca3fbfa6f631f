from __future__ import annotations

import uuid
from datetime import datetime
from typing import Any

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from orderdesk.db.models import Order, Reminder


class ReminderRepo:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def list_for_order(self, order_id: uuid.UUID) -> list[Reminder]:
        stmt = (
            select(Reminder)
            .options(selectinload(Reminder.order))
            .where(Reminder.order_id == order_id)
            .order_by(Reminder.remind_at)
        )
        return list((await self._session.execute(stmt)).scalars().all())

    async def list_for_user(self, user_id: uuid.UUID) -> list[Reminder]:
        # Reminders have no owner column; ownership is the parent order's.
        stmt = (
            select(Reminder)
            .join(Reminder.order)
            .options(selectinload(Reminder.order))
            .where(Order.user_id == user_id)
            .order_by(Reminder.remind_at)
        )
        return list((await self._session.execute(stmt)).scalars().all())

    async def get_with_order(self, reminder_id: uuid.UUID) -> Reminder | None:
        stmt = (
            select(Reminder)
            .options(selectinload(Reminder.order))
            .where(Reminder.id == reminder_id)
            .execution_options(populate_existing=True)
        )
        return (await self._session.execute(stmt)).scalar_one_or_none()

    async def create(
        self,
        *,
        order_id: uuid.UUID,
        remind_at: datetime,
        sent: bool,
        channel: str,
    ) -> Reminder:
        reminder = Reminder(order_id=order_id, remind_at=remind_at, sent=sent, channel=channel)
        self._session.add(reminder)
        await self._session.flush()
        return reminder

    async def update(self, reminder: Reminder, changes: dict[str, Any]) -> Reminder:
        for field, value in changes.items():
            setattr(reminder, field, value)
        await self._session.flush()
        return reminder

    async def delete(self, reminder: Reminder) -> None:
        await self._session.delete(reminder)
        await self._session.flush()
