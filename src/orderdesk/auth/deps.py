"""
orderdesk.auth.deps

FastAPI dependency functions for authentication.

Responsibilities:
- Collect credential material from request headers.
- Resolve it into the current `User` via the app's `IdentityResolver`.
"""

from __future__ import annotations

from fastapi import Depends, Header
from sqlalchemy.ext.asyncio import AsyncSession

from orderdesk.api.deps import db_session, identity_resolver_from_app
from orderdesk.auth.resolver import IdentityResolver, RequestCredentials
from orderdesk.db.models import User


def request_credentials(
    authorization: str | None = Header(default=None),
    x_user_id: str | None = Header(default=None),
) -> RequestCredentials:
    return RequestCredentials(authorization=authorization, user_id_header=x_user_id)


async def get_current_user(
    creds: RequestCredentials = Depends(request_credentials),
    session: AsyncSession = Depends(db_session),
    resolver: IdentityResolver = Depends(identity_resolver_from_app),
) -> User:
    # Raises `Unauthorized`; the API error handlers turn it into a bare 401.
    return await resolver.resolve(creds, session)


# --- Module Notes -----------------------------------------------------------
# Every resource router takes `user: User = Depends(get_current_user)` and
# passes `user.id` to `orderdesk.services.access.OwnershipGuard`.
