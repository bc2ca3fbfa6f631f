"""
orderdesk.auth.telegram

Verification of Telegram mini-app `initData` assertions.

Responsibilities:
- Rebuild the data-check string and check the platform HMAC in constant time.
- Enforce freshness of `auth_date`.
- Extract the identity claims from the signed `user` field.

The check follows Telegram's "Validating data received via the Mini App":
secret_key = HMAC_SHA256(key="WebAppData", msg=bot_token), then
hash = hex(HMAC_SHA256(key=secret_key, msg=data_check_string)).
"""

from __future__ import annotations

import hashlib
import hmac
import json
import re
import time
from typing import Any
from urllib.parse import parse_qsl

from orderdesk.auth.models import MAX_TELEGRAM_ID, TelegramIdentity, VerifiedInitData
from orderdesk.errors import Unauthorized

WEB_APP_DATA_KEY = b"WebAppData"

_HASH_RE = re.compile(r"[0-9a-fA-F]{64}")
_AUTH_DATE_RE = re.compile(r"[0-9]+")


def build_data_check_string(fields: list[tuple[str, str]]) -> str:
    # `hash` must already be removed; sort is stable so duplicate keys keep their order.
    return "\n".join(f"{key}={value}" for key, value in sorted(fields, key=lambda kv: kv[0]))


def compute_init_data_hash(data_check_string: str, bot_token: str) -> str:
    secret_key = hmac.new(WEB_APP_DATA_KEY, bot_token.encode("utf-8"), hashlib.sha256).digest()
    return hmac.new(secret_key, data_check_string.encode("utf-8"), hashlib.sha256).hexdigest()


def _hash_matches(calculated_hex: str, supplied_hex: str) -> bool:
    # Exactly one spelling per digest (case aside); fromhex alone would skip whitespace.
    if _HASH_RE.fullmatch(supplied_hex) is None:
        return False
    return hmac.compare_digest(bytes.fromhex(calculated_hex), bytes.fromhex(supplied_hex))


def _parse_user(raw: str) -> TelegramIdentity:
    try:
        data: Any = json.loads(raw)
    except ValueError as e:
        raise Unauthorized("Invalid Telegram user payload") from e
    if not isinstance(data, dict):
        raise Unauthorized("Invalid Telegram user payload")

    user_id = data.get("id")
    if not isinstance(user_id, int) or isinstance(user_id, bool):
        raise Unauthorized("Invalid Telegram user id")
    if not 0 < user_id <= MAX_TELEGRAM_ID:
        raise Unauthorized("Invalid Telegram user id")

    first_name = data.get("first_name")
    if not isinstance(first_name, str) or not first_name.strip():
        raise Unauthorized("Invalid Telegram user first_name")

    last_name = data.get("last_name")
    name = f"{first_name} {last_name if isinstance(last_name, str) else ''}".strip()

    username = data.get("username")
    handle = username if isinstance(username, str) and username.strip() else None

    return TelegramIdentity(telegram_id=user_id, name=name, username=handle)


def verify_init_data(
    raw: str,
    *,
    bot_token: str,
    max_age_seconds: int,
    now: int | None = None,
) -> VerifiedInitData:
    """
    Verify a raw `initData` query string and return the identity it carries.

    Raises `Unauthorized` with a reason-specific message; all reasons map to the
    same HTTP response.
    """

    fields = parse_qsl(raw, keep_blank_values=True)

    supplied_hash = next((value for key, value in fields if key == "hash"), "")
    if not supplied_hash:
        raise Unauthorized("Missing Telegram hash")

    remaining = [(key, value) for key, value in fields if key != "hash"]
    calculated = compute_init_data_hash(build_data_check_string(remaining), bot_token)
    if not _hash_matches(calculated, supplied_hash):
        raise Unauthorized("Invalid Telegram signature")

    # Signature is valid from here on; the remaining checks inspect trusted data.
    values: dict[str, str] = {}
    for key, value in remaining:
        values.setdefault(key, value)

    auth_date_raw = values.get("auth_date")
    if not auth_date_raw:
        raise Unauthorized("Missing Telegram auth_date")
    # Plain decimal only; int() would also take "1_700", " 17" and "+17".
    if _AUTH_DATE_RE.fullmatch(auth_date_raw) is None:
        raise Unauthorized("Invalid Telegram auth_date")
    auth_date = int(auth_date_raw)

    current = int(time.time()) if now is None else now
    if abs(current - auth_date) > max_age_seconds:
        raise Unauthorized("Telegram auth data is expired")

    user_raw = values.get("user")
    if not user_raw:
        raise Unauthorized("Missing Telegram user data")

    return VerifiedInitData(auth_date=auth_date, user=_parse_user(user_raw))


# --- Module Notes -----------------------------------------------------------
# Used by the `tma` Authorization scheme (auth.resolver) and by POST /auth/telegram.
