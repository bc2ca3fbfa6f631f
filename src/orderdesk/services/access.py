"""
orderdesk.services.access

Ownership guard for every owned resource.

Responsibilities:
- Confirm the requesting user owns a resource before it is read or mutated.
- Resolve two-hop ownership (task/note/reminder -> order -> user) in full.
- Answer "not found" for both missing and foreign resources so ids of other
  users cannot be discovered.
"""

from __future__ import annotations

import uuid
from typing import TypeVar

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from orderdesk.db.models import Client, MessageTemplate, Order, OrderNote, Reminder, Task
from orderdesk.errors import NotFound

DirectT = TypeVar("DirectT", Client, MessageTemplate, Order)
ChainT = TypeVar("ChainT", Task, OrderNote, Reminder)


class OwnershipGuard:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def _direct(
        self, model: type[DirectT], resource_id: uuid.UUID, user_id: uuid.UUID, label: str
    ) -> DirectT:
        # One query filtered by id and owner: a foreign id looks exactly like a missing one.
        stmt = select(model).where(model.id == resource_id, model.user_id == user_id)
        found = (await self._session.execute(stmt)).scalar_one_or_none()
        if found is None:
            raise NotFound(f"{label} not found")
        return found

    async def _via_order(
        self, model: type[ChainT], resource_id: uuid.UUID, user_id: uuid.UUID, label: str
    ) -> ChainT:
        stmt = select(model).options(selectinload(model.order)).where(model.id == resource_id)
        found = (await self._session.execute(stmt)).scalar_one_or_none()
        if found is None or found.order.user_id != user_id:
            raise NotFound(f"{label} not found")
        return found

    async def ensure_client(self, client_id: uuid.UUID, user_id: uuid.UUID) -> Client:
        return await self._direct(Client, client_id, user_id, "Client")

    async def ensure_template(self, template_id: uuid.UUID, user_id: uuid.UUID) -> MessageTemplate:
        return await self._direct(MessageTemplate, template_id, user_id, "Template")

    async def ensure_order(self, order_id: uuid.UUID, user_id: uuid.UUID) -> Order:
        return await self._direct(Order, order_id, user_id, "Order")

    async def ensure_task(self, task_id: uuid.UUID, user_id: uuid.UUID) -> Task:
        return await self._via_order(Task, task_id, user_id, "Task")

    async def ensure_note(self, note_id: uuid.UUID, user_id: uuid.UUID) -> OrderNote:
        return await self._via_order(OrderNote, note_id, user_id, "Note")

    async def ensure_reminder(self, reminder_id: uuid.UUID, user_id: uuid.UUID) -> Reminder:
        return await self._via_order(Reminder, reminder_id, user_id, "Reminder")


# --- Module Notes -----------------------------------------------------------
# Guards only read. A write that changes an ownership link (order -> client,
# reminder -> order) must guard the new target too, before committing.
