"""
orderdesk.db.init_db

Schema bootstrap for dev/test (production runs Alembic).
"""

from __future__ import annotations

from sqlalchemy.ext.asyncio import AsyncEngine

from orderdesk.db import models  # noqa: F401  # register tables on Base.metadata
from orderdesk.db.base import Base
from orderdesk.observability.logging import get_logger

log = get_logger(__name__)


async def init_db(engine: AsyncEngine) -> list[str]:
    """Create missing OrderDesk tables; returns the names of all mapped tables."""

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    tables = sorted(Base.metadata.tables)
    log.info("db.schema_ready", tables=tables)
    return tables
