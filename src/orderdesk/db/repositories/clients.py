from __future__ import annotations

import uuid
from typing import Any

from sqlalchemy import desc, select
from sqlalchemy.ext.asyncio import AsyncSession

from orderdesk.db.models import Client


class ClientRepo:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def list_for_user(self, user_id: uuid.UUID) -> list[Client]:
        stmt = select(Client).where(Client.user_id == user_id).order_by(desc(Client.created_at))
        return list((await self._session.execute(stmt)).scalars().all())

    async def create(
        self,
        *,
        user_id: uuid.UUID,
        name: str,
        contact: str | None,
        source: str | None,
    ) -> Client:
        client = Client(user_id=user_id, name=name, contact=contact, source=source)
        self._session.add(client)
        await self._session.flush()
        return client

    async def update(self, client: Client, changes: dict[str, Any]) -> Client:
        for field, value in changes.items():
            setattr(client, field, value)
        await self._session.flush()
        return client

    async def delete(self, client: Client) -> None:
        await self._session.delete(client)
        await self._session.flush()
