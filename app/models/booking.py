"""Booking-related database models."""

from __future__ import annotations

import uuid
from datetime import date, datetime
from decimal import Decimal
from typing import TYPE_CHECKING, Any

from sqlalchemy import JSON, CheckConstraint, Date, DateTime, ForeignKey, Index, Integer, Numeric, String, Text
from sqlalchemy.dialects.postgresql import JSONB, UUID
from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy.sql import func

from app.database import Base

if TYPE_CHECKING:
    from app.models.profile import Profile

# JSONB on Postgres, plain JSON elsewhere
JSONType = JSON().with_variant(JSONB(), "postgresql")


class Booking(Base):
    """Laundry booking model."""

    __tablename__ = "bookings"
    __table_args__ = (
        # Stale backlog scan: status filter, oldest first
        Index("ix_bookings_status_created_at", "status", "created_at"),
        CheckConstraint("collection_pin <> delivery_pin", name="ck_bookings_distinct_pins"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    user_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), ForeignKey("profiles.id"), nullable=False, index=True
    )
    washer_id: Mapped[uuid.UUID | None] = mapped_column(
        UUID(as_uuid=True), ForeignKey("profiles.id"), index=True
    )

    # Schedule
    collection_date: Mapped[date] = mapped_column(Date, nullable=False)
    collection_time_slot: Mapped[str | None] = mapped_column(String(50))
    delivery_method: Mapped[str] = mapped_column(
        String(20), default="collection"
    )  # collection, drop-off

    # Services: weight tier, special items, add-ons
    services_config: Mapped[dict[str, Any]] = mapped_column(JSONType, default=dict)
    total_price: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False)

    # Details
    special_instructions: Mapped[str | None] = mapped_column(Text)
    stain_images: Mapped[list[str]] = mapped_column(JSONType, default=list)
    access_notes: Mapped[str | None] = mapped_column(Text)

    # Physical handover verification
    collection_pin: Mapped[str] = mapped_column(String(4), nullable=False)
    delivery_pin: Mapped[str] = mapped_column(String(4), nullable=False)
    collection_verified_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True))
    delivery_verified_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True))

    # Payment
    payment_intent_id: Mapped[str | None] = mapped_column(String(255))
    payment_status: Mapped[str] = mapped_column(
        String(20), default="pending"
    )  # pending, paid, failed, refunded

    # Status
    status: Mapped[str] = mapped_column(
        String(30), default="pending_washer_assignment", index=True
    )  # awaiting_payment, pending_washer_assignment, awaiting_washer_acceptance,
    # washer_assigned, in_progress, completed, cancelled

    # Timestamps
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), index=True
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now()
    )

    # Relationships
    user: Mapped["Profile"] = relationship(
        "Profile", back_populates="bookings", foreign_keys=[user_id]
    )
    washer: Mapped["Profile | None"] = relationship(
        "Profile", back_populates="assigned_bookings", foreign_keys=[washer_id]
    )
