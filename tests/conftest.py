"""
tests.conftest

Shared fixtures and helpers.

Responsibilities:
- Build per-test settings backed by a temporary SQLite file.
- Run the app (lifespan included) behind an httpx client.
- Sign Telegram initData the way the Telegram client does.
"""

from __future__ import annotations

import hashlib
import hmac
import json
import time
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Any
from urllib.parse import urlencode

import httpx
import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import AsyncSession

from orderdesk.api.app import create_app
from orderdesk.db.init_db import init_db
from orderdesk.db.session import create_engine, create_sessionmaker
from orderdesk.settings import Settings

BOT_TOKEN = "123456:TEST-bot-token"
TOKEN_SECRET = "test-token-secret"


def make_settings(tmp_path: Path, **overrides: Any) -> Settings:
    values: dict[str, Any] = {
        "env": "test",
        "database_url": f"sqlite+aiosqlite:///{tmp_path / 'test.db'}",
        "bot_token": BOT_TOKEN,
        "auth_token_secret": TOKEN_SECRET,
        "log_level": "WARNING",
    }
    values.update(overrides)
    return Settings(**values)


def sign_init_data(fields: dict[str, str], *, bot_token: str = BOT_TOKEN) -> str:
    data_check_string = "\n".join(f"{k}={v}" for k, v in sorted(fields.items()))
    secret_key = hmac.new(b"WebAppData", bot_token.encode(), hashlib.sha256).digest()
    digest = hmac.new(secret_key, data_check_string.encode(), hashlib.sha256).hexdigest()
    return urlencode({**fields, "hash": digest})


def telegram_fields(
    telegram_id: int = 4242,
    *,
    first_name: str = "Ada",
    last_name: str | None = "Lovelace",
    username: str | None = "ada",
    auth_date: int | None = None,
) -> dict[str, str]:
    user: dict[str, Any] = {"id": telegram_id, "first_name": first_name}
    if last_name is not None:
        user["last_name"] = last_name
    if username is not None:
        user["username"] = username
    return {
        "query_id": "AAHdF6IQAAAAAN0XohDhrOrc",
        "user": json.dumps(user, separators=(",", ":")),
        "auth_date": str(int(time.time()) if auth_date is None else auth_date),
    }


@asynccontextmanager
async def running_app(settings: Settings) -> AsyncIterator[httpx.AsyncClient]:
    app = create_app(settings=settings)
    # httpx ASGITransport does not run lifespan; enter it explicitly.
    async with app.router.lifespan_context(app):
        if settings.is_production:
            await init_db(app.state.engine)
        transport = httpx.ASGITransport(app=app)
        async with httpx.AsyncClient(transport=transport, base_url="http://test") as client:
            client.app = app  # type: ignore[attr-defined]
            yield client


@pytest.fixture
def settings(tmp_path: Path) -> Settings:
    return make_settings(tmp_path)


@pytest_asyncio.fixture
async def client(settings: Settings) -> AsyncIterator[httpx.AsyncClient]:
    async with running_app(settings) as c:
        yield c


@pytest_asyncio.fixture
async def session(settings: Settings) -> AsyncIterator[AsyncSession]:
    engine = create_engine(settings)
    await init_db(engine)
    try:
        async with create_sessionmaker(engine)() as s:
            yield s
    finally:
        await engine.dispose()


async def dev_login(
    client: httpx.AsyncClient, telegram_id: int, name: str = "Tester"
) -> tuple[str, dict[str, str]]:
    """Log in through the dev path; returns (user id, auth headers)."""

    r = await client.post(
        "/auth/telegram",
        json={"devUser": {"externalId": telegram_id, "name": name}},
    )
    assert r.status_code == 200, r.text
    body = r.json()
    return body["user"]["id"], {"Authorization": f"Bearer {body['token']}"}
