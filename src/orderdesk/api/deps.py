"""
orderdesk.api.deps

FastAPI dependency wiring for the API layer.

Responsibilities:
- Provide the request-scoped DB session.
- Encapsulate app.state access patterns (sessionmaker, auth config, token
  codec, resolver).
"""

from __future__ import annotations

from collections.abc import AsyncIterator

from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from orderdesk.auth.config import AuthConfig
from orderdesk.auth.resolver import IdentityResolver
from orderdesk.auth.session_token import SessionTokenCodec


def auth_config_from_app(request: Request) -> AuthConfig:
    # Built once in `create_app`; tests inject their own through Settings.
    return request.app.state.auth_config  # type: ignore[attr-defined]


def sessionmaker_from_app(request: Request) -> async_sessionmaker[AsyncSession]:
    # Created during app lifespan startup in `orderdesk.api.app.create_app`.
    return request.app.state.sessionmaker  # type: ignore[attr-defined]


def token_codec_from_app(request: Request) -> SessionTokenCodec:
    return request.app.state.token_codec  # type: ignore[attr-defined]


def identity_resolver_from_app(request: Request) -> IdentityResolver:
    return request.app.state.identity_resolver  # type: ignore[attr-defined]


async def db_session(
    session_factory: async_sessionmaker[AsyncSession] = Depends(sessionmaker_from_app),
) -> AsyncIterator[AsyncSession]:
    # Request-scoped DB session. Commits are explicit in routers/services.
    async with session_factory() as session:
        yield session


# --- Module Notes -----------------------------------------------------------
# FastAPI caches dependencies per request, so the auth dependency and the
# route handler share one session.
