from __future__ import annotations

import uuid

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from orderdesk.api.deps import db_session
from orderdesk.api.schemas import Deleted, Item, Items, TemplateIn, TemplateOut, TemplatePatch
from orderdesk.auth.deps import get_current_user
from orderdesk.db.models import User
from orderdesk.db.repositories.templates import TemplateRepo
from orderdesk.services.access import OwnershipGuard

router = APIRouter(prefix="/templates", tags=["templates"])


@router.get("", response_model=Items[TemplateOut])
async def list_templates(
    user: User = Depends(get_current_user),
    session: AsyncSession = Depends(db_session),
) -> dict:
    templates = await TemplateRepo(session).list_for_user(user.id)
    return {"items": [TemplateOut.model_validate(t) for t in templates]}


@router.post("", response_model=Item[TemplateOut])
async def create_template(
    body: TemplateIn,
    user: User = Depends(get_current_user),
    session: AsyncSession = Depends(db_session),
) -> dict:
    template = await TemplateRepo(session).create(user_id=user.id, title=body.title, body=body.body)
    await session.commit()
    return {"item": TemplateOut.model_validate(template)}


@router.patch("/{template_id}", response_model=Item[TemplateOut])
async def patch_template(
    template_id: uuid.UUID,
    body: TemplatePatch,
    user: User = Depends(get_current_user),
    session: AsyncSession = Depends(db_session),
) -> dict:
    template = await OwnershipGuard(session).ensure_template(template_id, user.id)
    template = await TemplateRepo(session).update(template, body.changes())
    await session.commit()
    return {"item": TemplateOut.model_validate(template)}


@router.delete("/{template_id}", response_model=Deleted)
async def delete_template(
    template_id: uuid.UUID,
    user: User = Depends(get_current_user),
    session: AsyncSession = Depends(db_session),
) -> Deleted:
    template = await OwnershipGuard(session).ensure_template(template_id, user.id)
    await TemplateRepo(session).delete(template)
    await session.commit()
    return Deleted()
