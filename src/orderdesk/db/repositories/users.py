"""
orderdesk.db.repositories.users

Repository for `User` (principal) entities.

Responsibilities:
- Fetch principals by internal id or Telegram id.
- Upsert a principal from a verified Telegram identity.
"""

from __future__ import annotations

import uuid

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from orderdesk.db.models import User


class UserRepo:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def get(self, user_id: uuid.UUID) -> User | None:
        return await self._session.get(User, user_id)

    async def get_by_telegram_id(self, telegram_id: int) -> User | None:
        stmt = select(User).where(User.telegram_id == telegram_id)
        return (await self._session.execute(stmt)).scalar_one_or_none()

    async def upsert(self, *, telegram_id: int, name: str, username: str | None) -> User:
        # Name and handle are refreshed on every sighting; telegram_id never changes.
        existing = await self.get_by_telegram_id(telegram_id)
        if existing is not None:
            existing.name = name
            existing.username = username
            await self._session.flush()
            return existing

        user = User(telegram_id=telegram_id, name=name, username=username)
        self._session.add(user)
        await self._session.flush()
        return user


# --- Module Notes -----------------------------------------------------------
# Concurrent first logins for one telegram_id are settled by the unique index;
# the losing insert surfaces as an IntegrityError and is not retried.
