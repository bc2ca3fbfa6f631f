"""
orderdesk.api.routers.order_details

Tasks and notes of an order.

Responsibilities:
- Order-scoped listing/creation (`/orders/{id}/tasks`, `/orders/{id}/notes`),
  guarded on the order.
- Item-scoped mutation (`/tasks/{id}`, `/notes/{id}`), guarded through the
  item's order.
"""

from __future__ import annotations

import uuid

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from orderdesk.api.deps import db_session
from orderdesk.api.schemas import Deleted, Item, Items, NoteIn, NoteOut, TaskIn, TaskOut, TaskPatch
from orderdesk.auth.deps import get_current_user
from orderdesk.db.models import User
from orderdesk.db.repositories.order_children import NoteRepo, TaskRepo
from orderdesk.services.access import OwnershipGuard

router = APIRouter(tags=["order-details"])


@router.get("/orders/{order_id}/tasks", response_model=Items[TaskOut])
async def list_tasks(
    order_id: uuid.UUID,
    user: User = Depends(get_current_user),
    session: AsyncSession = Depends(db_session),
) -> dict:
    await OwnershipGuard(session).ensure_order(order_id, user.id)
    tasks = await TaskRepo(session).list_for_order(order_id)
    return {"items": [TaskOut.model_validate(t) for t in tasks]}


@router.post("/orders/{order_id}/tasks", response_model=Item[TaskOut])
async def create_task(
    order_id: uuid.UUID,
    body: TaskIn,
    user: User = Depends(get_current_user),
    session: AsyncSession = Depends(db_session),
) -> dict:
    await OwnershipGuard(session).ensure_order(order_id, user.id)
    task = await TaskRepo(session).create(
        order_id=order_id, title=body.title, position=body.position or 0
    )
    await session.commit()
    return {"item": TaskOut.model_validate(task)}


@router.patch("/tasks/{task_id}", response_model=Item[TaskOut])
async def patch_task(
    task_id: uuid.UUID,
    body: TaskPatch,
    user: User = Depends(get_current_user),
    session: AsyncSession = Depends(db_session),
) -> dict:
    task = await OwnershipGuard(session).ensure_task(task_id, user.id)
    task = await TaskRepo(session).update(task, body.changes())
    await session.commit()
    return {"item": TaskOut.model_validate(task)}


@router.delete("/tasks/{task_id}", response_model=Deleted)
async def delete_task(
    task_id: uuid.UUID,
    user: User = Depends(get_current_user),
    session: AsyncSession = Depends(db_session),
) -> Deleted:
    task = await OwnershipGuard(session).ensure_task(task_id, user.id)
    await TaskRepo(session).delete(task)
    await session.commit()
    return Deleted()


@router.get("/orders/{order_id}/notes", response_model=Items[NoteOut])
async def list_notes(
    order_id: uuid.UUID,
    user: User = Depends(get_current_user),
    session: AsyncSession = Depends(db_session),
) -> dict:
    await OwnershipGuard(session).ensure_order(order_id, user.id)
    notes = await NoteRepo(session).list_for_order(order_id)
    return {"items": [NoteOut.model_validate(n) for n in notes]}


@router.post("/orders/{order_id}/notes", response_model=Item[NoteOut])
async def create_note(
    order_id: uuid.UUID,
    body: NoteIn,
    user: User = Depends(get_current_user),
    session: AsyncSession = Depends(db_session),
) -> dict:
    await OwnershipGuard(session).ensure_order(order_id, user.id)
    note = await NoteRepo(session).create(order_id=order_id, text=body.text)
    await session.commit()
    return {"item": NoteOut.model_validate(note)}


@router.delete("/notes/{note_id}", response_model=Deleted)
async def delete_note(
    note_id: uuid.UUID,
    user: User = Depends(get_current_user),
    session: AsyncSession = Depends(db_session),
) -> Deleted:
    note = await OwnershipGuard(session).ensure_note(note_id, user.id)
    await NoteRepo(session).delete(note)
    await session.commit()
    return Deleted()
