"""
orderdesk.db.repositories.order_children

Repositories for the resources that hang off an order: tasks and notes.

Responsibilities:
- List/create/patch/delete tasks of an order (ordered by position).
- List/create/delete notes of an order (newest first).
"""

from __future__ import annotations

import uuid
from typing import Any

from sqlalchemy import desc, select
from sqlalchemy.ext.asyncio import AsyncSession

from orderdesk.db.models import OrderNote, Task


class TaskRepo:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def list_for_order(self, order_id: uuid.UUID) -> list[Task]:
        stmt = select(Task).where(Task.order_id == order_id).order_by(Task.position, Task.id)
        return list((await self._session.execute(stmt)).scalars().all())

    async def create(self, *, order_id: uuid.UUID, title: str, position: int) -> Task:
        task = Task(order_id=order_id, title=title, position=position, done=False)
        self._session.add(task)
        await self._session.flush()
        return task

    async def update(self, task: Task, changes: dict[str, Any]) -> Task:
        for field, value in changes.items():
            setattr(task, field, value)
        await self._session.flush()
        return task

    async def delete(self, task: Task) -> None:
        await self._session.delete(task)
        await self._session.flush()


class NoteRepo:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def list_for_order(self, order_id: uuid.UUID) -> list[OrderNote]:
        stmt = (
            select(OrderNote)
            .where(OrderNote.order_id == order_id)
            .order_by(desc(OrderNote.created_at))
        )
        return list((await self._session.execute(stmt)).scalars().all())

    async def create(self, *, order_id: uuid.UUID, text: str) -> OrderNote:
        note = OrderNote(order_id=order_id, text=text)
        self._session.add(note)
        await self._session.flush()
        return note

    async def delete(self, note: OrderNote) -> None:
        await self._session.delete(note)
        await self._session.flush()
