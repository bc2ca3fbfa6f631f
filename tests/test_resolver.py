from __future__ import annotations

import uuid

import pytest
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from conftest import BOT_TOKEN, TOKEN_SECRET, sign_init_data, telegram_fields
from orderdesk.auth.config import AuthConfig
from orderdesk.auth.models import TelegramIdentity
from orderdesk.auth.resolver import (
    DEV_IDENTITY,
    IdentityResolver,
    RequestCredentials,
    extract_authorization,
)
from orderdesk.auth.service import upsert_telegram_user
from orderdesk.auth.session_token import SessionTokenCodec
from orderdesk.db.models import User
from orderdesk.errors import Unauthorized


def _config(**overrides: object) -> AuthConfig:
    values: dict[str, object] = {
        "production": False,
        "bot_token": BOT_TOKEN,
        "init_data_max_age_seconds": 3600,
        "token_secret": TOKEN_SECRET,
        "token_ttl_seconds": 3600,
        "allow_user_id_header": False,
        "allow_dev_fallback_user": False,
    }
    values.update(overrides)
    return AuthConfig(**values)  # type: ignore[arg-type]


def _resolver(**overrides: object) -> tuple[IdentityResolver, SessionTokenCodec]:
    config = _config(**overrides)
    codec = SessionTokenCodec(config.token_secret, ttl_seconds=config.token_ttl_seconds)
    return IdentityResolver.from_config(config, codec), codec


async def _make_user(session: AsyncSession, telegram_id: int = 1001) -> User:
    return await upsert_telegram_user(
        session, TelegramIdentity(telegram_id=telegram_id, name="Grace", username=None)
    )


@pytest.mark.parametrize(
    ("header", "scheme", "expected"),
    [
        ("Bearer abc", "bearer", "abc"),
        ("bearer abc", "Bearer", "abc"),
        ("BEARER   abc  ", "bearer", "abc"),
        ("tma a=1&b=2", "tma", "a=1&b=2"),
        ("Bearer", "bearer", None),
        ("Bearer   ", "bearer", None),
        ("Basic abc", "bearer", None),
        (" Bearer abc", "bearer", None),
        ("", "bearer", None),
        (None, "bearer", None),
    ],
)
def test_extract_authorization(header: str | None, scheme: str, expected: str | None) -> None:
    assert extract_authorization(header, scheme) == expected


def test_strategy_order_in_dev_with_all_flags() -> None:
    resolver, _ = _resolver(allow_user_id_header=True, allow_dev_fallback_user=True)

    assert resolver.strategy_names == ("tma", "bearer", "dev_user_id_header", "dev_fallback_user")


def test_production_never_builds_dev_strategies() -> None:
    resolver, _ = _resolver(
        production=True, allow_user_id_header=True, allow_dev_fallback_user=True
    )

    assert resolver.strategy_names == ("tma", "bearer")


@pytest.mark.asyncio
async def test_no_credentials_is_unauthorized(session: AsyncSession) -> None:
    resolver, _ = _resolver()

    with pytest.raises(Unauthorized):
        await resolver.resolve(RequestCredentials(), session)


@pytest.mark.asyncio
async def test_tma_creates_principal(session: AsyncSession) -> None:
    resolver, _ = _resolver()
    creds = RequestCredentials(authorization=f"tma {sign_init_data(telegram_fields(555))}")

    user = await resolver.resolve(creds, session)

    assert user.telegram_id == 555
    assert user.name == "Ada Lovelace"


@pytest.mark.asyncio
async def test_tma_without_bot_token_does_not_fall_through(session: AsyncSession) -> None:
    resolver, _ = _resolver(bot_token="", allow_dev_fallback_user=True)
    creds = RequestCredentials(authorization=f"tma {sign_init_data(telegram_fields())}")

    with pytest.raises(Unauthorized, match="BOT_TOKEN is not configured"):
        await resolver.resolve(creds, session)


@pytest.mark.asyncio
async def test_invalid_tma_does_not_fall_through(session: AsyncSession) -> None:
    resolver, _ = _resolver(allow_dev_fallback_user=True)
    creds = RequestCredentials(authorization="tma auth_date=1&hash=00")

    with pytest.raises(Unauthorized, match="Invalid Telegram signature"):
        await resolver.resolve(creds, session)


@pytest.mark.asyncio
async def test_bearer_resolves_existing_principal(session: AsyncSession) -> None:
    resolver, codec = _resolver()
    user = await _make_user(session)

    resolved = await resolver.resolve(
        RequestCredentials(authorization=f"Bearer {codec.issue(str(user.id))}"), session
    )

    assert resolved.id == user.id


@pytest.mark.asyncio
@pytest.mark.parametrize("principal_id", [str(uuid.uuid4()), "not-a-uuid"])
async def test_bearer_for_unknown_principal(session: AsyncSession, principal_id: str) -> None:
    resolver, codec = _resolver()

    with pytest.raises(Unauthorized, match="User not found for auth token"):
        await resolver.resolve(
            RequestCredentials(authorization=f"Bearer {codec.issue(principal_id)}"), session
        )


@pytest.mark.asyncio
async def test_invalid_bearer_does_not_fall_through(session: AsyncSession) -> None:
    resolver, _ = _resolver(allow_user_id_header=True, allow_dev_fallback_user=True)
    user = await _make_user(session)
    creds = RequestCredentials(authorization="Bearer nope", user_id_header=str(user.id))

    with pytest.raises(Unauthorized, match="Invalid auth token format"):
        await resolver.resolve(creds, session)


@pytest.mark.asyncio
async def test_user_id_header_only_when_enabled(session: AsyncSession) -> None:
    user = await _make_user(session)
    creds = RequestCredentials(user_id_header=str(user.id))

    disabled, _ = _resolver()
    with pytest.raises(Unauthorized):
        await disabled.resolve(creds, session)

    enabled, _ = _resolver(allow_user_id_header=True)
    assert (await enabled.resolve(creds, session)).id == user.id


@pytest.mark.asyncio
@pytest.mark.parametrize("header", ["garbage", str(uuid.uuid4()), "   "])
async def test_unusable_user_id_header_is_skipped(session: AsyncSession, header: str) -> None:
    resolver, _ = _resolver(allow_user_id_header=True)

    with pytest.raises(Unauthorized, match="Unauthorized request"):
        await resolver.resolve(RequestCredentials(user_id_header=header), session)


@pytest.mark.asyncio
async def test_dev_fallback_user(session: AsyncSession) -> None:
    resolver, _ = _resolver(allow_dev_fallback_user=True)

    first = await resolver.resolve(RequestCredentials(), session)
    second = await resolver.resolve(RequestCredentials(), session)

    assert first.telegram_id == DEV_IDENTITY.telegram_id
    assert first.name == "Local Dev"
    assert first.id == second.id


@pytest.mark.asyncio
async def test_upsert_refreshes_profile_without_duplicating(session: AsyncSession) -> None:
    first = await upsert_telegram_user(
        session, TelegramIdentity(telegram_id=77, name="Old Name", username="old")
    )
    second = await upsert_telegram_user(
        session, TelegramIdentity(telegram_id=77, name="New Name", username=None)
    )

    count = (
        await session.execute(select(func.count()).select_from(User).where(User.telegram_id == 77))
    ).scalar_one()
    assert second.id == first.id
    assert second.name == "New Name"
    assert second.username is None
    assert count == 1
