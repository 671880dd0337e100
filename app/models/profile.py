"""Profile and washer application models."""

from __future__ import annotations

import uuid
from datetime import datetime
from typing import TYPE_CHECKING

from sqlalchemy import Boolean, DateTime, ForeignKey, Integer, String, Text
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy.sql import func

from app.database import Base

if TYPE_CHECKING:
    from app.models.booking import Booking


class Profile(Base):
    """User profile model.

    The id is the auth provider's user id; the profile carries role,
    washer approval and Stripe Connect state.
    """

    __tablename__ = "profiles"

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), primary_key=True, default=uuid.uuid4
    )
    email: Mapped[str | None] = mapped_column(String(255), unique=True, index=True)
    full_name: Mapped[str | None] = mapped_column(String(200))
    role: Mapped[str] = mapped_column(
        String(20), nullable=False, default="user", index=True
    )  # user, washer, admin
    postcode: Mapped[str | None] = mapped_column(String(10))

    # Washer approval
    washer_status: Mapped[str | None] = mapped_column(
        String(20), index=True
    )  # pending, approved, rejected

    # Stripe Connect
    stripe_account_id: Mapped[str | None] = mapped_column(String(255), unique=True, index=True)
    stripe_account_status: Mapped[str | None] = mapped_column(
        String(20)
    )  # pending, restricted, active (legacy: enabled)
    charges_enabled: Mapped[bool] = mapped_column(Boolean, default=False)
    payouts_enabled: Mapped[bool] = mapped_column(Boolean, default=False)

    # Timestamps
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now()
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now()
    )

    # Relationships
    bookings: Mapped[list["Booking"]] = relationship(
        "Booking", back_populates="user", foreign_keys="[Booking.user_id]"
    )
    assigned_bookings: Mapped[list["Booking"]] = relationship(
        "Booking", back_populates="washer", foreign_keys="[Booking.washer_id]"
    )
    applications: Mapped[list["WasherApplication"]] = relationship(
        "WasherApplication", back_populates="user"
    )


class WasherApplication(Base):
    """Application submitted by a user who wants to become a washer."""

    __tablename__ = "washer_applications"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    user_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), ForeignKey("profiles.id", ondelete="CASCADE"), nullable=False, index=True
    )
    status: Mapped[str] = mapped_column(
        String(20), default="pending", index=True
    )  # pending, approved, rejected
    service_description: Mapped[str | None] = mapped_column(Text)
    experience: Mapped[str | None] = mapped_column(Text)

    # Timestamps
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now()
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now()
    )

    # Relationships
    user: Mapped["Profile"] = relationship("Profile", back_populates="applications")
