from __future__ import annotations

import uuid

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from orderdesk.api.deps import db_session
from orderdesk.api.schemas import ClientIn, ClientOut, ClientPatch, Deleted, Item, Items
from orderdesk.auth.deps import get_current_user
from orderdesk.db.models import User
from orderdesk.db.repositories.clients import ClientRepo
from orderdesk.services.access import OwnershipGuard

router = APIRouter(prefix="/clients", tags=["clients"])


@router.get("", response_model=Items[ClientOut])
async def list_clients(
    user: User = Depends(get_current_user),
    session: AsyncSession = Depends(db_session),
) -> dict:
    clients = await ClientRepo(session).list_for_user(user.id)
    return {"items": [ClientOut.model_validate(c) for c in clients]}


@router.post("", response_model=Item[ClientOut])
async def create_client(
    body: ClientIn,
    user: User = Depends(get_current_user),
    session: AsyncSession = Depends(db_session),
) -> dict:
    client = await ClientRepo(session).create(
        user_id=user.id, name=body.name, contact=body.contact, source=body.source
    )
    await session.commit()
    return {"item": ClientOut.model_validate(client)}


@router.patch("/{client_id}", response_model=Item[ClientOut])
async def patch_client(
    client_id: uuid.UUID,
    body: ClientPatch,
    user: User = Depends(get_current_user),
    session: AsyncSession = Depends(db_session),
) -> dict:
    client = await OwnershipGuard(session).ensure_client(client_id, user.id)
    client = await ClientRepo(session).update(client, body.changes())
    await session.commit()
    return {"item": ClientOut.model_validate(client)}


@router.delete("/{client_id}", response_model=Deleted)
async def delete_client(
    client_id: uuid.UUID,
    user: User = Depends(get_current_user),
    session: AsyncSession = Depends(db_session),
) -> Deleted:
    client = await OwnershipGuard(session).ensure_client(client_id, user.id)
    await ClientRepo(session).delete(client)
    await session.commit()
    return Deleted()
