"""Wallet ledger schema: profiles, buses, bookings with constraints and indexes.

Revision ID: 001
Revises: None
Create Date: 2026-10-17
"""
from typing import Sequence, Union
from alembic import op
import sqlalchemy as sa

revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    # Profiles: identity + wallet account
    op.create_table(
        "profiles",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column("name", sa.String(100), nullable=False),
        sa.Column("email", sa.String(255), nullable=False),
        sa.Column("hashed_password", sa.String(255), nullable=False),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.text("true")),
        sa.Column("wallet_balance", sa.Integer(), nullable=False, server_default=sa.text("0")),
        # Optimistic-concurrency token for balance writes
        sa.Column("version", sa.Integer(), nullable=False, server_default=sa.text("1")),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.CheckConstraint("wallet_balance >= 0", name="check_wallet_balance_non_negative"),
    )
    op.create_index("ix_profiles_email", "profiles", ["email"], unique=True)

    # Buses: catalog, maintained outside this service
    op.create_table(
        "buses",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column("bus_code", sa.String(20), nullable=False, unique=True),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("from_city", sa.String(100), nullable=False),
        sa.Column("to_city", sa.String(100), nullable=False),
        sa.Column("fare", sa.Integer(), nullable=False),
        sa.Column("seats_available", sa.Integer(), nullable=False, server_default=sa.text("0")),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.CheckConstraint("fare >= 0", name="check_bus_fare_non_negative"),
        sa.CheckConstraint("seats_available >= 0", name="check_bus_seats_non_negative"),
    )
    op.create_index("ix_buses_route", "buses", ["from_city", "to_city"])
    op.create_index("ix_buses_name", "buses", ["name"])

    # Bookings: immutable, one per settled purchase
    op.create_table(
        "bookings",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("booking_id", sa.String(40), nullable=False, unique=True),
        sa.Column("user_id", sa.String(36), sa.ForeignKey("profiles.id"), nullable=False),
        sa.Column("bus_id", sa.String(36), sa.ForeignKey("buses.id"), nullable=False),
        sa.Column("amount", sa.Integer(), nullable=False),
        sa.Column("status", sa.String(20), nullable=False, server_default=sa.text("'Success'")),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.CheckConstraint("amount >= 0", name="check_booking_amount_non_negative"),
        sa.CheckConstraint("status IN ('Success', 'Failed')", name="check_booking_status"),
    )
    # History is always "my bookings, newest first"
    op.create_index("ix_bookings_user_created", "bookings", ["user_id", "created_at"])


def downgrade() -> None:
    op.drop_table("bookings")
    op.drop_table("buses")
    op.drop_table("profiles")
