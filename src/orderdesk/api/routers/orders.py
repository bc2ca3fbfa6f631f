"""
orderdesk.api.routers.orders

Order endpoints.

Responsibilities:
- List/filter, create, read (with tasks, notes, reminders), patch, delete.
- Guard the order and, where the body names one, the client it points at.
"""

from __future__ import annotations

import uuid

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from orderdesk.api.deps import db_session
from orderdesk.api.schemas import (
    Deleted,
    Item,
    Items,
    NoteOut,
    OrderDetailOut,
    OrderIn,
    OrderOut,
    OrderPatch,
    OrderStatusIn,
    ReminderOut,
    TaskOut,
)
from orderdesk.auth.deps import get_current_user
from orderdesk.db.models import OrderStatus, User
from orderdesk.db.repositories.order_children import NoteRepo, TaskRepo
from orderdesk.db.repositories.orders import DeadlineFilter, OrderRepo
from orderdesk.db.repositories.reminders import ReminderRepo
from orderdesk.errors import BadRequest, NotFound
from orderdesk.services.access import OwnershipGuard

router = APIRouter(prefix="/orders", tags=["orders"])

_DEADLINE_FILTERS: tuple[DeadlineFilter, ...] = ("overdue", "today", "upcoming")


def _parse_status(raw: str | None) -> OrderStatus | None:
    if not raw:
        return None
    try:
        return OrderStatus(raw)
    except ValueError:
        raise BadRequest("Query parameter 'status' has invalid value") from None


def _parse_deadline(raw: str | None) -> DeadlineFilter | None:
    if not raw:
        return None
    for candidate in _DEADLINE_FILTERS:
        if raw == candidate:
            return candidate
    raise BadRequest("Query parameter 'deadline' has invalid value")


async def _order_out(session: AsyncSession, order_id: uuid.UUID) -> OrderOut:
    order = await OrderRepo(session).get_with_client(order_id)
    if order is None:
        raise NotFound("Order not found")
    return OrderOut.model_validate(order)


@router.get("", response_model=Items[OrderOut])
async def list_orders(
    status: str | None = None,
    search: str | None = None,
    deadline: str | None = None,
    user: User = Depends(get_current_user),
    session: AsyncSession = Depends(db_session),
) -> dict:
    orders = await OrderRepo(session).list_for_user(
        user.id,
        status=_parse_status(status),
        search=search.strip() if search and search.strip() else None,
        deadline=_parse_deadline(deadline),
    )
    return {"items": [OrderOut.model_validate(o) for o in orders]}


@router.post("", response_model=Item[OrderOut])
async def create_order(
    body: OrderIn,
    user: User = Depends(get_current_user),
    session: AsyncSession = Depends(db_session),
) -> dict:
    await OwnershipGuard(session).ensure_client(body.client_id, user.id)
    order = await OrderRepo(session).create(
        user_id=user.id,
        client_id=body.client_id,
        title=body.title,
        budget=body.budget or 0.0,
        status=body.status,
        deadline=body.deadline,
    )
    await session.commit()
    return {"item": await _order_out(session, order.id)}


@router.get("/{order_id}", response_model=Item[OrderDetailOut])
async def get_order(
    order_id: uuid.UUID,
    user: User = Depends(get_current_user),
    session: AsyncSession = Depends(db_session),
) -> dict:
    await OwnershipGuard(session).ensure_order(order_id, user.id)
    base = await _order_out(session, order_id)

    tasks = await TaskRepo(session).list_for_order(order_id)
    notes = await NoteRepo(session).list_for_order(order_id)
    reminders = await ReminderRepo(session).list_for_order(order_id)
    detail = OrderDetailOut(
        **base.model_dump(),
        tasks=[TaskOut.model_validate(t) for t in tasks],
        notes=[NoteOut.model_validate(n) for n in notes],
        reminders=[ReminderOut.model_validate(r) for r in reminders],
    )
    return {"item": detail}


@router.patch("/{order_id}", response_model=Item[OrderOut])
async def patch_order(
    order_id: uuid.UUID,
    body: OrderPatch,
    user: User = Depends(get_current_user),
    session: AsyncSession = Depends(db_session),
) -> dict:
    changes = body.changes()
    guard = OwnershipGuard(session)
    order = await guard.ensure_order(order_id, user.id)
    # Moving the order to another client needs that client to be ours as well.
    if "client_id" in changes:
        await guard.ensure_client(changes["client_id"], user.id)

    await OrderRepo(session).update(order, changes)
    await session.commit()
    return {"item": await _order_out(session, order_id)}


@router.delete("/{order_id}", response_model=Deleted)
async def delete_order(
    order_id: uuid.UUID,
    user: User = Depends(get_current_user),
    session: AsyncSession = Depends(db_session),
) -> Deleted:
    order = await OwnershipGuard(session).ensure_order(order_id, user.id)
    await OrderRepo(session).delete(order)
    await session.commit()
    return Deleted()


@router.post("/{order_id}/status", response_model=Item[OrderOut])
async def set_order_status(
    order_id: uuid.UUID,
    body: OrderStatusIn,
    user: User = Depends(get_current_user),
    session: AsyncSession = Depends(db_session),
) -> dict:
    order = await OwnershipGuard(session).ensure_order(order_id, user.id)
    await OrderRepo(session).update(order, {"status": body.status})
    await session.commit()
    return {"item": await _order_out(session, order_id)}
