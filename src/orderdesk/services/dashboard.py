"""
orderdesk.services.dashboard

Per-user dashboard aggregation.
"""

from __future__ import annotations

import uuid
from datetime import UTC, datetime
from typing import Any

from sqlalchemy.ext.asyncio import AsyncSession

from orderdesk.db.models import utcnow
from orderdesk.db.repositories.orders import OrderRepo


def month_range(moment: datetime) -> tuple[datetime, datetime]:
    start = moment.replace(day=1, hour=0, minute=0, second=0, microsecond=0)
    if start.month == 12:
        end = start.replace(year=start.year + 1, month=1)
    else:
        end = start.replace(month=start.month + 1)
    return start, end


async def build_summary(
    session: AsyncSession, user_id: uuid.UUID, *, now: datetime | None = None
) -> dict[str, Any]:
    moment = now or utcnow()
    start, end = month_range(moment)
    orders = OrderRepo(session)

    upcoming = await orders.upcoming_deadlines(user_id, after=moment)
    return {
        "activeOrders": await orders.count_active(user_id),
        "overdueOrders": await orders.count_active(user_id, overdue_before=moment),
        "monthlyIncome": await orders.income_between(user_id, start, end),
        "upcomingDeadlines": [
            {
                "id": str(order.id),
                "title": order.title,
                "deadline": order.deadline.replace(tzinfo=UTC).isoformat(),
                "clientName": order.client.name,
            }
            for order in upcoming
            if order.deadline is not None
        ],
    }
