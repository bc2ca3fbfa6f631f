"""
orderdesk.auth.config

Immutable auth configuration.

Responsibilities:
- Project the settings the auth layer needs into a frozen value object.
- Decide, once, which development credential paths are reachable.
"""

from __future__ import annotations

from dataclasses import dataclass

from orderdesk.settings import Settings


@dataclass(frozen=True, slots=True)
class AuthConfig:
    production: bool
    bot_token: str
    init_data_max_age_seconds: int
    token_secret: str
    token_ttl_seconds: int
    allow_user_id_header: bool
    allow_dev_fallback_user: bool

    def __repr__(self) -> str:
        return (
            f"AuthConfig(production={self.production}, "
            f"bot_token_configured={bool(self.bot_token)}, "
            f"allow_user_id_header={self.allow_user_id_header}, "
            f"allow_dev_fallback_user={self.allow_dev_fallback_user})"
        )

    @classmethod
    def from_settings(cls, settings: Settings) -> AuthConfig:
        dev = not settings.is_production
        return cls(
            production=settings.is_production,
            bot_token=settings.bot_token,
            init_data_max_age_seconds=settings.auth_max_age_seconds,
            token_secret=settings.token_secret,
            token_ttl_seconds=settings.auth_token_ttl_seconds,
            allow_user_id_header=dev and settings.dev_allow_user_id_header,
            allow_dev_fallback_user=dev and settings.dev_fallback_user,
        )
