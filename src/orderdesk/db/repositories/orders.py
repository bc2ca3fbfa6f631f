"""
orderdesk.db.repositories.orders

Repository for `Order` entities.

Responsibilities:
- List a user's orders with status/search/deadline filters.
- Create, patch and delete orders (client relation loaded for responses).
- Aggregate figures for the dashboard summary.
"""

from __future__ import annotations

import uuid
from datetime import datetime, timedelta
from typing import Any, Literal

from sqlalchemy import desc, func, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from orderdesk.db.models import ACTIVE_ORDER_STATUSES, Order, OrderStatus, utcnow

DeadlineFilter = Literal["overdue", "today", "upcoming"]


class OrderRepo:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def get_with_client(self, order_id: uuid.UUID) -> Order | None:
        # populate_existing refreshes `client` after a client reassignment.
        stmt = (
            select(Order)
            .options(selectinload(Order.client))
            .where(Order.id == order_id)
            .execution_options(populate_existing=True)
        )
        return (await self._session.execute(stmt)).scalar_one_or_none()

    async def list_for_user(
        self,
        user_id: uuid.UUID,
        *,
        status: OrderStatus | None = None,
        search: str | None = None,
        deadline: DeadlineFilter | None = None,
    ) -> list[Order]:
        stmt = select(Order).options(selectinload(Order.client)).where(Order.user_id == user_id)
        if status is not None:
            stmt = stmt.where(Order.status == status)
        if search:
            stmt = stmt.where(Order.title.contains(search, autoescape=True))

        now = utcnow()
        if deadline == "overdue":
            stmt = stmt.where(Order.deadline < now, Order.status.in_(ACTIVE_ORDER_STATUSES))
        elif deadline == "upcoming":
            stmt = stmt.where(Order.deadline >= now)
        elif deadline == "today":
            start = now.replace(hour=0, minute=0, second=0, microsecond=0)
            stmt = stmt.where(Order.deadline >= start, Order.deadline < start + timedelta(days=1))

        stmt = stmt.order_by(desc(Order.created_at))
        return list((await self._session.execute(stmt)).scalars().all())

    async def create(
        self,
        *,
        user_id: uuid.UUID,
        client_id: uuid.UUID,
        title: str,
        budget: float,
        status: OrderStatus,
        deadline: datetime | None,
    ) -> Order:
        order = Order(
            user_id=user_id,
            client_id=client_id,
            title=title,
            budget=budget,
            status=status,
            deadline=deadline,
        )
        self._session.add(order)
        await self._session.flush()
        return order

    async def update(self, order: Order, changes: dict[str, Any]) -> Order:
        for field, value in changes.items():
            setattr(order, field, value)
        order.updated_at = utcnow()
        await self._session.flush()
        return order

    async def delete(self, order: Order) -> None:
        await self._session.delete(order)
        await self._session.flush()

    # --- dashboard ----------------------------------------------------------

    async def count_active(self, user_id: uuid.UUID, *, overdue_before: datetime | None = None) -> int:
        stmt = (
            select(func.count())
            .select_from(Order)
            .where(Order.user_id == user_id, Order.status.in_(ACTIVE_ORDER_STATUSES))
        )
        if overdue_before is not None:
            stmt = stmt.where(Order.deadline < overdue_before)
        return int((await self._session.execute(stmt)).scalar_one())

    async def income_between(self, user_id: uuid.UUID, start: datetime, end: datetime) -> float:
        # Orders count toward the month in which they were last updated while DONE.
        stmt = select(func.coalesce(func.sum(Order.budget), 0)).where(
            Order.user_id == user_id,
            Order.status == OrderStatus.done,
            Order.updated_at >= start,
            Order.updated_at < end,
        )
        return float((await self._session.execute(stmt)).scalar_one())

    async def upcoming_deadlines(
        self, user_id: uuid.UUID, *, after: datetime, limit: int = 5
    ) -> list[Order]:
        stmt = (
            select(Order)
            .options(selectinload(Order.client))
            .where(
                Order.user_id == user_id,
                Order.status.in_(ACTIVE_ORDER_STATUSES),
                Order.deadline.is_not(None),
                Order.deadline >= after,
            )
            .order_by(Order.deadline)
            .limit(limit)
        )
        return list((await self._session.execute(stmt)).scalars().all())
