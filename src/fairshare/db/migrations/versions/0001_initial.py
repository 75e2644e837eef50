"""initial schema

Revision ID: 0001
Revises: 
Create Date: 2026-10-19 00:00:00.000000
"""

from __future__ import annotations

from alembic import op
import sqlalchemy as sa


revision = "0001"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        "trips",
        sa.Column("id", sa.Text(), primary_key=True),
        sa.Column("name", sa.Text(), nullable=False),
        sa.Column("description", sa.Text()),
        sa.Column("created_by", sa.Text()),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
    )

    op.create_table(
        "trip_participants",
        sa.Column("trip_id", sa.Text(), sa.ForeignKey("trips.id", ondelete="CASCADE"), primary_key=True),
        sa.Column("id", sa.Text(), primary_key=True),
        sa.Column("name", sa.Text(), nullable=False),
        sa.Column("email", sa.Text()),
        sa.Column("status", sa.Text()),
        sa.Column("position", sa.Integer(), nullable=False, server_default="0"),
        sa.CheckConstraint("status in ('active','invited')", name="trip_participants_status_check"),
    )

    op.create_table(
        "expenses",
        sa.Column("id", sa.Text(), primary_key=True),
        sa.Column("trip_id", sa.Text(), sa.ForeignKey("trips.id", ondelete="CASCADE"), nullable=False),
        sa.Column("description", sa.Text(), nullable=False),
        sa.Column("amount", sa.Numeric(12, 2), nullable=False),
        sa.Column("payer_id", sa.Text(), nullable=False),
        sa.Column("category", sa.Text(), nullable=False, server_default="Other"),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
    )

    op.create_table(
        "expense_splits",
        sa.Column("expense_id", sa.Text(), sa.ForeignKey("expenses.id", ondelete="CASCADE"), primary_key=True),
        sa.Column("participant_id", sa.Text(), primary_key=True),
    )

    op.create_table(
        "settlements",
        sa.Column("trip_id", sa.Text(), sa.ForeignKey("trips.id", ondelete="CASCADE"), primary_key=True),
        sa.Column("from_id", sa.Text(), primary_key=True),
        sa.Column("to_id", sa.Text(), primary_key=True),
        sa.Column("amount", sa.Numeric(12, 2), nullable=False),
        sa.Column("status", sa.Text(), nullable=False, server_default="pending"),
        sa.Column("position", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.CheckConstraint("status in ('pending','settled')", name="settlements_status_check"),
        sa.CheckConstraint("from_id <> to_id", name="settlements_no_self_check"),
    )

    op.create_index("idx_expenses_trip", "expenses", ["trip_id"])
    op.create_index("idx_trip_participants_trip", "trip_participants", ["trip_id"])


def downgrade() -> None:
    op.drop_index("idx_trip_participants_trip", table_name="trip_participants")
    op.drop_index("idx_expenses_trip", table_name="expenses")

    op.drop_table("settlements")
    op.drop_table("expense_splits")
    op.drop_table("expenses")
    op.drop_table("trip_participants")
    op.drop_table("trips")
