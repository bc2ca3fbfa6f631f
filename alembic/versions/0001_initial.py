"""initial schema

Revision ID: 0001_initial
Revises:
Create Date: 2026-10-19
"""

from __future__ import annotations

import sqlalchemy as sa
from alembic import op

revision = "0001_initial"
down_revision = None
branch_labels = None
depends_on = None

ORDER_STATUS = sa.Enum("new", "in_progress", "in_review", "done", "archived", name="orderstatus")


def upgrade() -> None:
    op.create_table(
        "users",
        sa.Column("id", sa.Uuid(), primary_key=True),
        sa.Column("telegram_id", sa.BigInteger(), nullable=False),
        sa.UniqueConstraint("telegram_id", name="uq_users_telegram_id"),
        sa.Column("name", sa.String(256), nullable=False),
        sa.Column("username", sa.String(256), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=False),
    )
    op.create_table(
        "clients",
        sa.Column("id", sa.Uuid(), primary_key=True),
        sa.Column("user_id", sa.Uuid(), sa.ForeignKey("users.id", name="fk_clients_user_id_users"), nullable=False, index=True),
        sa.Column("name", sa.String(256), nullable=False),
        sa.Column("contact", sa.String(512), nullable=True),
        sa.Column("source", sa.String(256), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=False),
    )
    op.create_table(
        "message_templates",
        sa.Column("id", sa.Uuid(), primary_key=True),
        sa.Column("user_id", sa.Uuid(), sa.ForeignKey("users.id", name="fk_message_templates_user_id_users"), nullable=False, index=True),
        sa.Column("title", sa.String(256), nullable=False),
        sa.Column("body", sa.Text(), nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=False),
    )
    op.create_table(
        "orders",
        sa.Column("id", sa.Uuid(), primary_key=True),
        sa.Column("user_id", sa.Uuid(), sa.ForeignKey("users.id", name="fk_orders_user_id_users"), nullable=False, index=True),
        sa.Column("client_id", sa.Uuid(), sa.ForeignKey("clients.id", name="fk_orders_client_id_clients"), nullable=False, index=True),
        sa.Column("title", sa.String(512), nullable=False),
        sa.Column("budget", sa.Float(), nullable=False),
        sa.Column("status", ORDER_STATUS, nullable=False, index=True),
        sa.Column("deadline", sa.DateTime(), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
    )
    op.create_index("ix_orders_user_status", "orders", ["user_id", "status"])
    op.create_table(
        "tasks",
        sa.Column("id", sa.Uuid(), primary_key=True),
        sa.Column("order_id", sa.Uuid(), sa.ForeignKey("orders.id", name="fk_tasks_order_id_orders"), nullable=False, index=True),
        sa.Column("title", sa.String(512), nullable=False),
        sa.Column("done", sa.Boolean(), nullable=False),
        sa.Column("position", sa.Integer(), nullable=False),
    )
    op.create_table(
        "order_notes",
        sa.Column("id", sa.Uuid(), primary_key=True),
        sa.Column("order_id", sa.Uuid(), sa.ForeignKey("orders.id", name="fk_order_notes_order_id_orders"), nullable=False, index=True),
        sa.Column("text", sa.Text(), nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=False),
    )
    op.create_table(
        "reminders",
        sa.Column("id", sa.Uuid(), primary_key=True),
        sa.Column("order_id", sa.Uuid(), sa.ForeignKey("orders.id", name="fk_reminders_order_id_orders"), nullable=False, index=True),
        sa.Column("remind_at", sa.DateTime(), nullable=False, index=True),
        sa.Column("sent", sa.Boolean(), nullable=False),
        sa.Column("channel", sa.String(32), nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=False),
    )


def downgrade() -> None:
    op.drop_table("reminders")
    op.drop_table("order_notes")
    op.drop_table("tasks")
    op.drop_index("ix_orders_user_status", table_name="orders")
    op.drop_table("orders")
    op.drop_table("message_templates")
    op.drop_table("clients")
    op.drop_table("users")
