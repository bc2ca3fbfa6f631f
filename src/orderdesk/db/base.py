"""
orderdesk.db.base

SQLAlchemy declarative base.

Responsibilities:
- Share one `MetaData` across all OrderDesk tables.
- Name constraints deterministically so SQLite batch migrations can find them.
"""

from __future__ import annotations

from sqlalchemy import MetaData
from sqlalchemy.orm import DeclarativeBase

NAMING_CONVENTION = {
    "ix": "ix_%(column_0_label)s",
    "uq": "uq_%(table_name)s_%(column_0_name)s",
    "ck": "ck_%(table_name)s_%(constraint_name)s",
    "fk": "fk_%(table_name)s_%(column_0_name)s_%(referred_table_name)s",
    "pk": "pk_%(table_name)s",
}


class Base(DeclarativeBase):
    metadata = MetaData(naming_convention=NAMING_CONVENTION)


# --- Module Notes -----------------------------------------------------------
# Alembic's batch mode recreates SQLite tables and drops constraints by name;
# unnamed constraints (the SQLite default) cannot be altered later.
