"""
orderdesk.auth.service

Principal upsert and public projection.

Responsibilities:
- Map a Telegram identity to a durable `User`, creating it on first sight and
  refreshing name/handle on every later sighting.
- Project a `User` into the shape returned by the auth endpoints.
"""

from __future__ import annotations

from datetime import UTC

from pydantic import BaseModel
from sqlalchemy.ext.asyncio import AsyncSession

from orderdesk.auth.models import TelegramIdentity
from orderdesk.db.models import User
from orderdesk.db.repositories.users import UserRepo
from orderdesk.observability.logging import get_logger

log = get_logger(__name__)


class PublicUser(BaseModel):
    id: str
    telegramId: str
    name: str
    username: str | None
    createdAt: str


async def upsert_telegram_user(session: AsyncSession, identity: TelegramIdentity) -> User:
    user = await UserRepo(session).upsert(
        telegram_id=identity.telegram_id,
        name=identity.name,
        username=identity.username,
    )
    await session.commit()
    log.info("auth.principal_upserted", user_id=str(user.id))
    return user


def to_public_user(user: User) -> PublicUser:
    # telegramId is a decimal string: JS clients cannot hold 64-bit ints exactly.
    return PublicUser(
        id=str(user.id),
        telegramId=str(user.telegram_id),
        name=user.name,
        username=user.username,
        createdAt=user.created_at.replace(tzinfo=UTC).isoformat(),
    )
