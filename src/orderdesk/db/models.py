"""
orderdesk.db.models

Persistence schema for the OrderDesk backend.

Responsibilities:
- Define the principal table (`User`) keyed by an internal UUID with a unique
  Telegram identity.
- Define the owned resources:
  - directly owned (`user_id`): Client, Order, MessageTemplate
  - owned through their order (`order_id`): Task, OrderNote, Reminder
"""

from __future__ import annotations

import enum
import uuid
from datetime import UTC, datetime

from sqlalchemy import (
    BigInteger,
    Enum,
    ForeignKey,
    Index,
    String,
    Text,
    Uuid as SAUuid,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from orderdesk.db.base import Base


def utcnow() -> datetime:
    # Naive UTC timestamps; SQLite has no tz-aware column type.
    return datetime.now(tz=UTC).replace(tzinfo=None)


class OrderStatus(enum.StrEnum):
    new = "NEW"
    in_progress = "IN_PROGRESS"
    in_review = "IN_REVIEW"
    done = "DONE"
    archived = "ARCHIVED"


ACTIVE_ORDER_STATUSES: tuple[OrderStatus, ...] = (
    OrderStatus.new,
    OrderStatus.in_progress,
    OrderStatus.in_review,
)


class User(Base):
    __tablename__ = "users"

    id: Mapped[uuid.UUID] = mapped_column(
        SAUuid(as_uuid=True), primary_key=True, default=uuid.uuid4
    )
    telegram_id: Mapped[int] = mapped_column(BigInteger, nullable=False, unique=True)
    name: Mapped[str] = mapped_column(String(256), nullable=False)
    username: Mapped[str | None] = mapped_column(String(256), nullable=True)

    created_at: Mapped[datetime] = mapped_column(nullable=False, default=utcnow)


class Client(Base):
    __tablename__ = "clients"

    id: Mapped[uuid.UUID] = mapped_column(
        SAUuid(as_uuid=True), primary_key=True, default=uuid.uuid4
    )
    user_id: Mapped[uuid.UUID] = mapped_column(
        SAUuid(as_uuid=True), ForeignKey("users.id"), nullable=False, index=True
    )

    name: Mapped[str] = mapped_column(String(256), nullable=False)
    contact: Mapped[str | None] = mapped_column(String(512), nullable=True)
    source: Mapped[str | None] = mapped_column(String(256), nullable=True)

    created_at: Mapped[datetime] = mapped_column(nullable=False, default=utcnow)

    orders: Mapped[list[Order]] = relationship(
        back_populates="client", cascade="all, delete-orphan"
    )


class Order(Base):
    __tablename__ = "orders"

    id: Mapped[uuid.UUID] = mapped_column(
        SAUuid(as_uuid=True), primary_key=True, default=uuid.uuid4
    )
    user_id: Mapped[uuid.UUID] = mapped_column(
        SAUuid(as_uuid=True), ForeignKey("users.id"), nullable=False, index=True
    )
    client_id: Mapped[uuid.UUID] = mapped_column(
        SAUuid(as_uuid=True), ForeignKey("clients.id"), nullable=False, index=True
    )

    title: Mapped[str] = mapped_column(String(512), nullable=False)
    budget: Mapped[float] = mapped_column(nullable=False, default=0)
    status: Mapped[OrderStatus] = mapped_column(
        Enum(OrderStatus), nullable=False, default=OrderStatus.new, index=True
    )
    deadline: Mapped[datetime | None] = mapped_column(nullable=True)

    created_at: Mapped[datetime] = mapped_column(nullable=False, default=utcnow)
    updated_at: Mapped[datetime] = mapped_column(nullable=False, default=utcnow, onupdate=utcnow)

    client: Mapped[Client] = relationship(back_populates="orders")
    tasks: Mapped[list[Task]] = relationship(
        back_populates="order", cascade="all, delete-orphan"
    )
    notes: Mapped[list[OrderNote]] = relationship(
        back_populates="order", cascade="all, delete-orphan"
    )
    reminders: Mapped[list[Reminder]] = relationship(
        back_populates="order", cascade="all, delete-orphan"
    )

    __table_args__ = (Index("ix_orders_user_status", "user_id", "status"),)


class Task(Base):
    __tablename__ = "tasks"

    id: Mapped[uuid.UUID] = mapped_column(
        SAUuid(as_uuid=True), primary_key=True, default=uuid.uuid4
    )
    order_id: Mapped[uuid.UUID] = mapped_column(
        SAUuid(as_uuid=True), ForeignKey("orders.id"), nullable=False, index=True
    )

    title: Mapped[str] = mapped_column(String(512), nullable=False)
    done: Mapped[bool] = mapped_column(nullable=False, default=False)
    position: Mapped[int] = mapped_column(nullable=False, default=0)

    order: Mapped[Order] = relationship(back_populates="tasks")


class OrderNote(Base):
    __tablename__ = "order_notes"

    id: Mapped[uuid.UUID] = mapped_column(
        SAUuid(as_uuid=True), primary_key=True, default=uuid.uuid4
    )
    order_id: Mapped[uuid.UUID] = mapped_column(
        SAUuid(as_uuid=True), ForeignKey("orders.id"), nullable=False, index=True
    )

    text: Mapped[str] = mapped_column(Text, nullable=False)
    created_at: Mapped[datetime] = mapped_column(nullable=False, default=utcnow)

    order: Mapped[Order] = relationship(back_populates="notes")


class MessageTemplate(Base):
    __tablename__ = "message_templates"

    id: Mapped[uuid.UUID] = mapped_column(
        SAUuid(as_uuid=True), primary_key=True, default=uuid.uuid4
    )
    user_id: Mapped[uuid.UUID] = mapped_column(
        SAUuid(as_uuid=True), ForeignKey("users.id"), nullable=False, index=True
    )

    title: Mapped[str] = mapped_column(String(256), nullable=False)
    body: Mapped[str] = mapped_column(Text, nullable=False)
    created_at: Mapped[datetime] = mapped_column(nullable=False, default=utcnow)


class Reminder(Base):
    __tablename__ = "reminders"

    id: Mapped[uuid.UUID] = mapped_column(
        SAUuid(as_uuid=True), primary_key=True, default=uuid.uuid4
    )
    order_id: Mapped[uuid.UUID] = mapped_column(
        SAUuid(as_uuid=True), ForeignKey("orders.id"), nullable=False, index=True
    )

    remind_at: Mapped[datetime] = mapped_column(nullable=False, index=True)
    # Only the flag is stored; nothing in this service delivers reminders.
    sent: Mapped[bool] = mapped_column(nullable=False, default=False)
    channel: Mapped[str] = mapped_column(String(32), nullable=False, default="TELEGRAM")
    created_at: Mapped[datetime] = mapped_column(nullable=False, default=utcnow)

    order: Mapped[Order] = relationship(back_populates="reminders")


# --- Module Notes -----------------------------------------------------------
# Deletes cascade through the ORM relationships (client -> orders -> children),
# so repositories delete via `session.delete` rather than bulk statements.
