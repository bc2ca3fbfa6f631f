"""
orderdesk.auth.resolver

Request identity resolution.

Responsibilities:
- Model each credential path as an independent strategy.
- Try strategies in a fixed precedence order; the first one that applies
  decides the outcome.

Strategy contract:
- return `None`   -> credential not present / not applicable, try the next one
- return a `User` -> authenticated
- raise `Unauthorized` -> credential present but rejected; no fallthrough

Precedence (see `IdentityResolver.from_config`):
1. `Authorization: tma <initData>`
2. `Authorization: Bearer <session token>`
3. `X-User-Id: <user id>`           (non-prod + explicit opt-in only)
4. fixed development principal      (non-prod + explicit opt-in only)
"""

from __future__ import annotations

import time
import uuid
from collections.abc import Callable, Sequence
from dataclasses import dataclass
from typing import Protocol

from sqlalchemy.ext.asyncio import AsyncSession

from orderdesk.auth.config import AuthConfig
from orderdesk.auth.models import TelegramIdentity
from orderdesk.auth.service import upsert_telegram_user
from orderdesk.auth.session_token import SessionTokenCodec
from orderdesk.auth.telegram import verify_init_data
from orderdesk.db.models import User
from orderdesk.db.repositories.users import UserRepo
from orderdesk.errors import Unauthorized
from orderdesk.observability.logging import bind_request_principal, get_logger

log = get_logger(__name__)

DEV_IDENTITY = TelegramIdentity(telegram_id=900000000001, name="Local Dev", username="local_dev")


@dataclass(frozen=True, slots=True)
class RequestCredentials:
    authorization: str | None = None
    user_id_header: str | None = None


def extract_authorization(header: str | None, scheme: str) -> str | None:
    """Return the credential after `scheme` (case-insensitive), or None."""

    if not header:
        return None
    first, *rest = header.split(" ")
    if not first or first.lower() != scheme.lower():
        return None
    value = " ".join(rest).strip()
    return value or None


class CredentialStrategy(Protocol):
    name: str

    async def resolve(self, creds: RequestCredentials, session: AsyncSession) -> User | None: ...


class TelegramInitDataStrategy:
    name = "tma"

    def __init__(
        self,
        *,
        bot_token: str,
        max_age_seconds: int,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self._bot_token = bot_token
        self._max_age_seconds = max_age_seconds
        self._clock = clock

    async def resolve(self, creds: RequestCredentials, session: AsyncSession) -> User | None:
        init_data = extract_authorization(creds.authorization, "tma")
        if init_data is None:
            return None
        if not self._bot_token:
            raise Unauthorized("BOT_TOKEN is not configured")

        verified = verify_init_data(
            init_data,
            bot_token=self._bot_token,
            max_age_seconds=self._max_age_seconds,
            now=int(self._clock()),
        )
        return await upsert_telegram_user(session, verified.user)


class BearerTokenStrategy:
    name = "bearer"

    def __init__(self, codec: SessionTokenCodec) -> None:
        self._codec = codec

    async def resolve(self, creds: RequestCredentials, session: AsyncSession) -> User | None:
        token = extract_authorization(creds.authorization, "bearer")
        if token is None:
            return None

        payload = self._codec.verify(token)
        try:
            user_id = uuid.UUID(payload.principal_id)
        except ValueError:
            raise Unauthorized("User not found for auth token") from None

        # Tokens never create principals; the user must still exist.
        user = await UserRepo(session).get(user_id)
        if user is None:
            raise Unauthorized("User not found for auth token")
        return user


class DevUserIdHeaderStrategy:
    name = "dev_user_id_header"

    async def resolve(self, creds: RequestCredentials, session: AsyncSession) -> User | None:
        raw = (creds.user_id_header or "").strip()
        if not raw:
            return None
        try:
            user_id = uuid.UUID(raw)
        except ValueError:
            return None
        return await UserRepo(session).get(user_id)


class DevFallbackUserStrategy:
    name = "dev_fallback_user"

    async def resolve(self, creds: RequestCredentials, session: AsyncSession) -> User | None:
        return await upsert_telegram_user(session, DEV_IDENTITY)


class IdentityResolver:
    def __init__(self, strategies: Sequence[CredentialStrategy]) -> None:
        self._strategies = tuple(strategies)

    @property
    def strategy_names(self) -> tuple[str, ...]:
        return tuple(s.name for s in self._strategies)

    @classmethod
    def from_config(
        cls,
        config: AuthConfig,
        codec: SessionTokenCodec,
        *,
        clock: Callable[[], float] = time.time,
    ) -> IdentityResolver:
        strategies: list[CredentialStrategy] = [
            TelegramInitDataStrategy(
                bot_token=config.bot_token,
                max_age_seconds=config.init_data_max_age_seconds,
                clock=clock,
            ),
            BearerTokenStrategy(codec),
        ]
        # Development paths are never constructed in production, whatever the flags say.
        if not config.production and config.allow_user_id_header:
            strategies.append(DevUserIdHeaderStrategy())
        if not config.production and config.allow_dev_fallback_user:
            log.warning(
                "auth.dev_fallback_enabled",
                detail="requests without credentials act as the Local Dev user",
            )
            strategies.append(DevFallbackUserStrategy())
        return cls(strategies)

    async def resolve(self, creds: RequestCredentials, session: AsyncSession) -> User:
        for strategy in self._strategies:
            user = await strategy.resolve(creds, session)
            if user is not None:
                bind_request_principal(user_id=str(user.id), strategy=strategy.name)
                return user
        raise Unauthorized("Unauthorized request")


# --- Module Notes -----------------------------------------------------------
# `orderdesk.auth.deps.get_current_user` is the only caller in the API layer.
