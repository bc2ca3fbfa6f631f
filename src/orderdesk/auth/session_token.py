"""
orderdesk.auth.session_token

Stateless session tokens issued after a successful login.

Responsibilities:
- Issue `<payload>.<signature>` tokens: unpadded URL-safe base64 of canonical
  JSON, signed with HMAC-SHA256 over the encoded payload.
- Verify shape, then signature (constant time), then payload, then expiry.

Note:
- Tokens are never stored server-side; there is no revocation or refresh.
"""

from __future__ import annotations

import base64
import binascii
import hashlib
import hmac
import json
import math
import time
from collections.abc import Callable
from typing import Any

from orderdesk.auth.models import SessionTokenPayload
from orderdesk.errors import Unauthorized


def _b64url_encode(data: bytes) -> str:
    return base64.urlsafe_b64encode(data).rstrip(b"=").decode("ascii")


def _b64url_decode(text: str) -> bytes:
    padded = text + "=" * (-len(text) % 4)
    return base64.urlsafe_b64decode(padded.encode("ascii"))


def _is_finite_number(value: Any) -> bool:
    return (
        isinstance(value, (int, float))
        and not isinstance(value, bool)
        and math.isfinite(value)
    )


class SessionTokenCodec:
    """Issue and verify session tokens bound to a principal id."""

    def __init__(
        self,
        secret: str,
        *,
        ttl_seconds: int,
        clock: Callable[[], float] = time.time,
    ) -> None:
        if not secret:
            raise ValueError("session token secret cannot be empty")
        if ttl_seconds <= 0:
            raise ValueError("session token ttl must be positive")
        self._secret = secret.encode("utf-8")
        self._ttl_seconds = ttl_seconds
        self._clock = clock

    def _sign(self, encoded_payload: str) -> str:
        digest = hmac.new(self._secret, encoded_payload.encode("ascii"), hashlib.sha256).digest()
        return _b64url_encode(digest)

    def issue(self, principal_id: str) -> str:
        now = int(self._clock())
        payload = {"userId": principal_id, "iat": now, "exp": now + self._ttl_seconds}
        canonical = json.dumps(payload, sort_keys=True, separators=(",", ":"))
        encoded_payload = _b64url_encode(canonical.encode("utf-8"))
        return f"{encoded_payload}.{self._sign(encoded_payload)}"

    def verify(self, token: str) -> SessionTokenPayload:
        parts = token.split(".")
        if len(parts) != 2 or not parts[0] or not parts[1]:
            raise Unauthorized("Invalid auth token format")
        encoded_payload, signature = parts

        try:
            expected = self._sign(encoded_payload)
        except UnicodeEncodeError as e:
            raise Unauthorized("Invalid auth token signature") from e
        # compare_digest on bytes: unequal lengths simply compare unequal.
        if not hmac.compare_digest(expected.encode("ascii"), signature.encode("utf-8")):
            raise Unauthorized("Invalid auth token signature")

        payload = self._decode_payload(encoded_payload)
        if payload.expires_at <= self._clock():
            raise Unauthorized("Auth token is expired")
        return payload

    @staticmethod
    def _decode_payload(encoded_payload: str) -> SessionTokenPayload:
        try:
            data: Any = json.loads(_b64url_decode(encoded_payload).decode("utf-8"))
        except (binascii.Error, UnicodeDecodeError, ValueError) as e:
            raise Unauthorized("Invalid auth token payload") from e
        if not isinstance(data, dict):
            raise Unauthorized("Invalid auth token payload")

        principal_id = data.get("userId")
        issued_at = data.get("iat")
        expires_at = data.get("exp")
        if not isinstance(principal_id, str) or not principal_id.strip():
            raise Unauthorized("Invalid auth token payload")
        if not _is_finite_number(issued_at) or not _is_finite_number(expires_at):
            raise Unauthorized("Invalid auth token payload")

        return SessionTokenPayload(
            principal_id=principal_id,
            issued_at=issued_at,
            expires_at=expires_at,
        )


# --- Module Notes -----------------------------------------------------------
# Issued by POST /auth/telegram; verified by the Bearer strategy in auth.resolver.
