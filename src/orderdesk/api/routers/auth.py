"""
orderdesk.api.routers.auth

Login and identity endpoints.

Responsibilities:
- `POST /auth/telegram`: exchange a Telegram `initData` assertion (or, outside
  production, a development identity) for a session token.
- `GET /auth/me`: return the principal resolved from the request credentials.
"""

from __future__ import annotations

from typing import Any, Literal

from fastapi import APIRouter, Depends
from pydantic import AliasChoices, BaseModel, Field, ValidationError
from sqlalchemy.ext.asyncio import AsyncSession

from orderdesk.api.deps import auth_config_from_app, db_session, token_codec_from_app
from orderdesk.api.schemas import ApiModel, NonEmptyStr, TrimmedStr
from orderdesk.auth.config import AuthConfig
from orderdesk.auth.deps import get_current_user
from orderdesk.auth.models import MAX_TELEGRAM_ID, TelegramIdentity
from orderdesk.auth.service import PublicUser, to_public_user, upsert_telegram_user
from orderdesk.auth.session_token import SessionTokenCodec
from orderdesk.auth.telegram import verify_init_data
from orderdesk.db.models import User
from orderdesk.errors import BadRequest
from orderdesk.observability.logging import get_logger

log = get_logger(__name__)

router = APIRouter(prefix="/auth", tags=["auth"])


class LoginRequest(ApiModel):
    # Loosely typed on purpose: a non-string initData is treated as absent.
    init_data: Any = None
    dev_user: Any = None


class DevUserIn(BaseModel):
    telegram_id: int = Field(
        gt=0,
        le=MAX_TELEGRAM_ID,
        validation_alias=AliasChoices("externalId", "telegramId"),
    )
    name: NonEmptyStr
    username: TrimmedStr | None = None


class LoginResponse(BaseModel):
    mode: Literal["telegram", "dev"]
    user: PublicUser
    token: str


class MeResponse(BaseModel):
    user: PublicUser


def _parse_dev_user(raw: Any) -> TelegramIdentity:
    try:
        dev = DevUserIn.model_validate(raw)
    except ValidationError as e:
        raise BadRequest("Field 'devUser' is invalid") from e
    return TelegramIdentity(telegram_id=dev.telegram_id, name=dev.name, username=dev.username or None)


@router.post("/telegram", response_model=LoginResponse)
async def login_telegram(
    body: LoginRequest,
    session: AsyncSession = Depends(db_session),
    config: AuthConfig = Depends(auth_config_from_app),
    codec: SessionTokenCodec = Depends(token_codec_from_app),
) -> LoginResponse:
    mode: Literal["telegram", "dev"]
    if isinstance(body.init_data, str) and body.init_data.strip():
        if not config.bot_token:
            raise BadRequest("BOT_TOKEN is not configured for Telegram auth")
        verified = verify_init_data(
            body.init_data,
            bot_token=config.bot_token,
            max_age_seconds=config.init_data_max_age_seconds,
        )
        user = await upsert_telegram_user(session, verified.user)
        mode = "telegram"
    elif not config.production and body.dev_user is not None:
        user = await upsert_telegram_user(session, _parse_dev_user(body.dev_user))
        mode = "dev"
    else:
        raise BadRequest("Provide 'initData' for Telegram auth")

    log.info("auth.login", mode=mode, user_id=str(user.id))
    return LoginResponse(mode=mode, user=to_public_user(user), token=codec.issue(str(user.id)))


@router.get("/me", response_model=MeResponse)
async def me(user: User = Depends(get_current_user)) -> MeResponse:
    return MeResponse(user=to_public_user(user))
