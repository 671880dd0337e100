"""Initial database schema.

Revision ID: 001_initial
Revises: None
Create Date: 2026-10-18

Creates all initial tables for the Neighbourhood Wash platform:
- Profiles and washer applications
- Bookings
- Auto-assignment runs
"""

from typing import Sequence

import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

from alembic import op

# revision identifiers
revision: str = "001_initial"
down_revision: str | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None


def upgrade() -> None:
    """Create all database tables."""

    # ==================== PROFILES ====================
    op.create_table(
        "profiles",
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column("email", sa.String(255), unique=True, index=True),
        sa.Column("full_name", sa.String(200)),
        sa.Column("role", sa.String(20), nullable=False, server_default="user", index=True),
        sa.Column("postcode", sa.String(10)),
        sa.Column("washer_status", sa.String(20), index=True),
        sa.Column("stripe_account_id", sa.String(255), unique=True, index=True),
        sa.Column("stripe_account_status", sa.String(20)),
        sa.Column("charges_enabled", sa.Boolean, server_default=sa.false()),
        sa.Column("payouts_enabled", sa.Boolean, server_default=sa.false()),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now(), onupdate=sa.func.now()),
    )

    op.create_table(
        "washer_applications",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("user_id", postgresql.UUID(as_uuid=True), sa.ForeignKey("profiles.id", ondelete="CASCADE"), nullable=False, index=True),
        sa.Column("status", sa.String(20), server_default="pending", index=True),
        sa.Column("service_description", sa.Text),
        sa.Column("experience", sa.Text),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now(), onupdate=sa.func.now()),
    )

    # ==================== BOOKINGS ====================
    op.create_table(
        "bookings",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("user_id", postgresql.UUID(as_uuid=True), sa.ForeignKey("profiles.id"), nullable=False, index=True),
        sa.Column("washer_id", postgresql.UUID(as_uuid=True), sa.ForeignKey("profiles.id"), index=True),
        sa.Column("collection_date", sa.Date, nullable=False),
        sa.Column("collection_time_slot", sa.String(50)),
        sa.Column("delivery_method", sa.String(20), server_default="collection"),
        sa.Column("services_config", postgresql.JSONB),
        sa.Column("total_price", sa.Numeric(10, 2), nullable=False),
        sa.Column("special_instructions", sa.Text),
        sa.Column("stain_images", postgresql.JSONB),
        sa.Column("access_notes", sa.Text),
        sa.Column("collection_pin", sa.String(4), nullable=False),
        sa.Column("delivery_pin", sa.String(4), nullable=False),
        sa.Column("collection_verified_at", sa.DateTime(timezone=True)),
        sa.Column("delivery_verified_at", sa.DateTime(timezone=True)),
        sa.Column("payment_intent_id", sa.String(255)),
        sa.Column("payment_status", sa.String(20), server_default="pending"),
        sa.Column("status", sa.String(30), server_default="pending_washer_assignment", index=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), index=True),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now(), onupdate=sa.func.now()),
        sa.CheckConstraint("collection_pin <> delivery_pin", name="ck_bookings_distinct_pins"),
    )
    op.create_index("ix_bookings_status_created_at", "bookings", ["status", "created_at"])

    # ==================== AUTO-ASSIGNMENT ====================
    op.create_table(
        "assignment_runs",
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column("trigger", sa.String(30), nullable=False),
        sa.Column("total_processed", sa.Integer, server_default="0"),
        sa.Column("assigned", sa.Integer, server_default="0"),
        sa.Column("skipped", sa.Integer, server_default="0"),
        sa.Column("errored", sa.Integer, server_default="0"),
        sa.Column("results", postgresql.JSONB),
        sa.Column("started_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("completed_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column("duration_ms", sa.Integer, nullable=False),
        sa.Column("error_message", sa.Text),
    )
    op.create_index("ix_assignment_runs_started_at", "assignment_runs", ["started_at"])


def downgrade() -> None:
    """Drop all database tables in reverse order."""
    op.drop_index("ix_assignment_runs_started_at", table_name="assignment_runs")
    op.drop_table("assignment_runs")
    op.drop_index("ix_bookings_status_created_at", table_name="bookings")
    op.drop_table("bookings")
    op.drop_table("washer_applications")
    op.drop_table("profiles")
