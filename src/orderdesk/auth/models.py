"""
orderdesk.auth.models

Auth value types.

Responsibilities:
- `TelegramIdentity`: identity claims taken from a verified assertion (or a
  development login); never persisted as-is.
- `VerifiedInitData`: verifier output.
- `SessionTokenPayload`: decoded, verified session token.
"""

from __future__ import annotations

from dataclasses import dataclass

# Largest id the `BigInteger` telegram_id column can hold.
MAX_TELEGRAM_ID = 2**63 - 1


@dataclass(frozen=True, slots=True)
class TelegramIdentity:
    telegram_id: int
    name: str
    username: str | None


@dataclass(frozen=True, slots=True)
class VerifiedInitData:
    auth_date: int
    user: TelegramIdentity


@dataclass(frozen=True, slots=True)
class SessionTokenPayload:
    principal_id: str
    issued_at: float
    expires_at: float
