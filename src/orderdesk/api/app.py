"""
orderdesk.api.app

FastAPI app factory for the OrderDesk backend.

Responsibilities:
- Build the FastAPI application and register routers/middleware/error handlers.
- Build the auth components (config, token codec, identity resolver) once from
  settings and stash them on app.state.
- Initialize and dispose shared infrastructure (DB engine/session factory).
"""

from __future__ import annotations

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from orderdesk import __version__
from orderdesk.api.errors import register_error_handlers
from orderdesk.api.routers.auth import router as auth_router
from orderdesk.api.routers.clients import router as clients_router
from orderdesk.api.routers.dashboard import router as dashboard_router
from orderdesk.api.routers.health import router as health_router
from orderdesk.api.routers.order_details import router as order_details_router
from orderdesk.api.routers.orders import router as orders_router
from orderdesk.api.routers.reminders import router as reminders_router
from orderdesk.api.routers.templates import router as templates_router
from orderdesk.auth.config import AuthConfig
from orderdesk.auth.resolver import IdentityResolver
from orderdesk.auth.session_token import SessionTokenCodec
from orderdesk.db.init_db import init_db
from orderdesk.db.session import create_engine, create_sessionmaker
from orderdesk.observability.logging import configure_logging, get_logger
from orderdesk.observability.middleware import RequestContextMiddleware
from orderdesk.settings import Settings

log = get_logger(__name__)


def create_app(*, settings: Settings) -> FastAPI:
    configure_logging(service_name=settings.service_name, level=settings.log_level)

    auth_config = AuthConfig.from_settings(settings)
    token_codec = SessionTokenCodec(
        auth_config.token_secret, ttl_seconds=auth_config.token_ttl_seconds
    )
    identity_resolver = IdentityResolver.from_config(auth_config, token_codec)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        log.info(
            "startup",
            env=settings.env,
            auth_strategies=list(identity_resolver.strategy_names),
            bot_token_configured=bool(auth_config.bot_token),
        )
        engine = create_engine(settings)
        app.state.engine = engine
        app.state.sessionmaker = create_sessionmaker(engine)
        if settings.env in ("dev", "test"):
            # Dev/test convenience: create tables automatically. Prod uses Alembic.
            await init_db(engine)
        try:
            yield
        finally:
            await engine.dispose()
            log.info("shutdown")

    app = FastAPI(
        title="OrderDesk API",
        version=__version__,
        docs_url=None if settings.is_production else "/docs",
        openapi_url=None if settings.is_production else "/openapi.json",
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.auth_config = auth_config
    app.state.token_codec = token_codec
    app.state.identity_resolver = identity_resolver

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=["x-request-id"],
    )
    app.add_middleware(RequestContextMiddleware)
    register_error_handlers(app)

    app.include_router(health_router, tags=["health"])
    app.include_router(auth_router)
    app.include_router(dashboard_router)
    app.include_router(clients_router)
    app.include_router(orders_router)
    app.include_router(order_details_router)
    app.include_router(templates_router)
    app.include_router(reminders_router)

    return app


# --- Module Notes -----------------------------------------------------------
# App composition stays here; credential handling lives in `orderdesk.auth`,
# ownership checks in `orderdesk.services.access`.
