from __future__ import annotations

import uuid
from typing import Any

from sqlalchemy import desc, select
from sqlalchemy.ext.asyncio import AsyncSession

from orderdesk.db.models import MessageTemplate


class TemplateRepo:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def list_for_user(self, user_id: uuid.UUID) -> list[MessageTemplate]:
        stmt = (
            select(MessageTemplate)
            .where(MessageTemplate.user_id == user_id)
            .order_by(desc(MessageTemplate.created_at))
        )
        return list((await self._session.execute(stmt)).scalars().all())

    async def create(self, *, user_id: uuid.UUID, title: str, body: str) -> MessageTemplate:
        template = MessageTemplate(user_id=user_id, title=title, body=body)
        self._session.add(template)
        await self._session.flush()
        return template

    async def update(self, template: MessageTemplate, changes: dict[str, Any]) -> MessageTemplate:
        for field, value in changes.items():
            setattr(template, field, value)
        await self._session.flush()
        return template

    async def delete(self, template: MessageTemplate) -> None:
        await self._session.delete(template)
        await self._session.flush()
