"""
orderdesk.settings

Central configuration model (Pydantic Settings).

Responsibilities:
- Provide strongly-typed, env-driven settings for all layers.
- Hide secrets from repr/logging (bot token, token signing secret).
- Refuse to start in production without a token signing secret.
- Offer a cached settings instance for dependency injection.
"""

from __future__ import annotations

from functools import lru_cache
from typing import Literal

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

DEV_AUTH_TOKEN_SECRET = "dev-auth-token-secret"


class Settings(BaseSettings):
    """
    Process-wide configuration, built once at startup.

    Production mode is `env == "prod"`. Every development-only credential path
    is disabled there regardless of the opt-in flags below.
    """

    model_config = SettingsConfigDict(env_prefix="ORDERDESK_", case_sensitive=False, frozen=True)

    env: Literal["dev", "test", "prod"] = "dev"
    service_name: str = "orderdesk-api"
    log_level: str = "INFO"

    api_host: str = "0.0.0.0"
    api_port: int = 3000
    cors_origins: list[str] = Field(default_factory=lambda: ["*"])

    # Persistence
    database_url: str = "sqlite+aiosqlite:///./orderdesk.db"

    # Telegram mini-app assertion (initData) verification
    bot_token: str = Field(default="", repr=False)
    auth_max_age_seconds: int = Field(default=86400, gt=0)

    # Session tokens
    auth_token_secret: str | None = Field(default=None, repr=False)
    auth_token_ttl_seconds: int = Field(default=604800, gt=0)

    # Development escape hatches; both default off and are ignored in prod.
    dev_allow_user_id_header: bool = False
    dev_fallback_user: bool = False

    @model_validator(mode="after")
    def require_token_secret_in_prod(self) -> Settings:
        if self.is_production and not self.auth_token_secret:
            raise ValueError("ORDERDESK_AUTH_TOKEN_SECRET is required when env=prod")
        return self

    @property
    def is_production(self) -> bool:
        return self.env == "prod"

    @property
    def token_secret(self) -> str:
        return self.auth_token_secret or DEV_AUTH_TOKEN_SECRET


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    # Cache avoids re-parsing env vars for each request dependency.
    return Settings()


# --- Module Notes -----------------------------------------------------------
# Auth components never read this module directly; they receive an
# `orderdesk.auth.config.AuthConfig` built from these settings at startup.
