"""
orderdesk.db.seed

Demo data for local development (`orderdesk-seed` or `python -m orderdesk.db.seed`).

Responsibilities:
- Wipe every OrderDesk table, children before parents.
- Create the dev-fallback user with a small set of clients, orders and templates,
  so the mini-app opened outside Telegram has something to show.
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
from datetime import timedelta

from sqlalchemy import delete
from sqlalchemy.ext.asyncio import AsyncSession

from orderdesk.auth.resolver import DEV_IDENTITY
from orderdesk.db.init_db import init_db
from orderdesk.db.models import (
    Client,
    MessageTemplate,
    Order,
    OrderNote,
    OrderStatus,
    Reminder,
    Task,
    User,
    utcnow,
)
from orderdesk.db.repositories.clients import ClientRepo
from orderdesk.db.repositories.order_children import NoteRepo, TaskRepo
from orderdesk.db.repositories.orders import OrderRepo
from orderdesk.db.repositories.reminders import ReminderRepo
from orderdesk.db.repositories.templates import TemplateRepo
from orderdesk.db.repositories.users import UserRepo
from orderdesk.db.session import create_engine, create_sessionmaker
from orderdesk.observability.logging import configure_logging, get_logger
from orderdesk.settings import get_settings

log = get_logger(__name__)

# Children first; foreign keys are enforced.
_WIPE_ORDER = (Reminder, OrderNote, Task, Order, MessageTemplate, Client, User)


@dataclass(frozen=True, slots=True)
class SeedResult:
    user_id: str
    order_ids: list[str]


async def clear_all(session: AsyncSession) -> None:
    for model in _WIPE_ORDER:
        await session.execute(delete(model))


async def seed(session: AsyncSession) -> SeedResult:
    """Replace the database contents with the demo data set and commit."""

    await clear_all(session)
    now = utcnow()

    user = await UserRepo(session).upsert(
        telegram_id=DEV_IDENTITY.telegram_id,
        name=DEV_IDENTITY.name,
        username=DEV_IDENTITY.username,
    )

    clients = ClientRepo(session)
    igor = await clients.create(
        user_id=user.id, name="Игорь Kwork", contact="@igor_kwork", source="Kwork"
    )
    maria = await clients.create(
        user_id=user.id, name="Мария Telegram", contact="@maria_design", source="Telegram"
    )
    alex = await clients.create(
        user_id=user.id, name="Алексей Site", contact="alex@example.com", source="Direct"
    )

    orders = OrderRepo(session)
    extension = await orders.create(
        user_id=user.id,
        client_id=igor.id,
        title="Chrome Extension Automation",
        budget=18000,
        status=OrderStatus.in_progress,
        deadline=now + timedelta(days=2),
    )
    mini_app = await orders.create(
        user_id=user.id,
        client_id=maria.id,
        title="Telegram Mini App MVP",
        budget=26000,
        status=OrderStatus.in_review,
        deadline=now + timedelta(days=1),
    )
    landing = await orders.create(
        user_id=user.id,
        client_id=alex.id,
        title="Landing Refactor",
        budget=12000,
        status=OrderStatus.done,
        deadline=now - timedelta(days=3),
    )

    tasks = TaskRepo(session)
    requirements = await tasks.create(
        order_id=extension.id, title="Собрать требования", position=0
    )
    await tasks.update(requirements, {"done": True})
    await tasks.create(order_id=extension.id, title="Сделать API интеграцию", position=1)

    notes = NoteRepo(session)
    await notes.create(order_id=extension.id, text="Клиент просил добавить экспорт в CSV.")
    await notes.create(order_id=mini_app.id, text="Ожидается фидбек после демонстрации.")

    templates = TemplateRepo(session)
    await templates.create(
        user_id=user.id,
        title="Старт работы",
        body="Привет. Начинаю работу по заказу, сегодня отправлю первый апдейт.",
    )
    await templates.create(
        user_id=user.id,
        title="Финальный апдейт",
        body="Проект готов. Отправляю результаты, проверьте пожалуйста и дайте обратную связь.",
    )

    reminders = ReminderRepo(session)
    await reminders.create(
        order_id=extension.id, remind_at=now + timedelta(hours=6), sent=False, channel="TELEGRAM"
    )
    await reminders.create(
        order_id=mini_app.id, remind_at=now + timedelta(hours=2), sent=False, channel="TELEGRAM"
    )
    await reminders.create(
        order_id=landing.id, remind_at=now - timedelta(hours=24), sent=True, channel="TELEGRAM"
    )

    await session.commit()
    result = SeedResult(
        user_id=str(user.id),
        order_ids=[str(o.id) for o in (extension, mini_app, landing)],
    )
    log.info("db.seeded", user_id=result.user_id, order_ids=result.order_ids)
    return result


async def _run() -> None:
    settings = get_settings()
    configure_logging(service_name=settings.service_name, level=settings.log_level)
    if settings.is_production:
        raise SystemExit("refusing to seed a production database")

    engine = create_engine(settings)
    try:
        await init_db(engine)
        async with create_sessionmaker(engine)() as session:
            await seed(session)
    finally:
        await engine.dispose()


def main() -> None:
    asyncio.run(_run())


if __name__ == "__main__":
    main()
