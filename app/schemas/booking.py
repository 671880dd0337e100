"""Booking-related Pydantic schemas."""

from datetime import date, datetime
from decimal import Decimal
from typing import Literal
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, field_validator

from app.domain.pricing import ADD_ONS, SPECIAL_ITEMS, TIME_SLOTS


class ServiceSelection(BaseModel):
    """Selected laundry services."""

    weight_tier: Literal["0-6kg", "6-10kg"] | None = None
    selected_items: dict[str, int] = Field(default_factory=dict)
    selected_add_ons: list[str] = Field(default_factory=list)

    @field_validator("selected_items")
    @classmethod
    def validate_items(cls, v: dict[str, int]) -> dict[str, int]:
        unknown = set(v) - set(SPECIAL_ITEMS)
        if unknown:
            raise ValueError(f"Unknown special items: {', '.join(sorted(unknown))}")
        if any(quantity < 0 for quantity in v.values()):
            raise ValueError("Item quantities cannot be negative")
        return v

    @field_validator("selected_add_ons")
    @classmethod
    def validate_add_ons(cls, v: list[str]) -> list[str]:
        unknown = set(v) - set(ADD_ONS)
        if unknown:
            raise ValueError(f"Unknown add-ons: {', '.join(sorted(unknown))}")
        return v


class BookingCreate(ServiceSelection):
    """Schema for creating a booking."""

    collection_date: date
    time_slot: str | None = Field(None, max_length=50)
    delivery_method: Literal["collection", "drop-off"] = "collection"
    special_instructions: str | None = Field(None, max_length=2000)
    stain_image_urls: list[str] = Field(default_factory=list, max_length=10)
    access_notes: str | None = Field(None, max_length=1000)
    total_price: Decimal = Field(..., ge=0, decimal_places=2)
    payment_intent_id: str | None = Field(None, max_length=255)

    @field_validator("time_slot")
    @classmethod
    def validate_time_slot(cls, v: str | None) -> str | None:
        if v is not None and v not in TIME_SLOTS:
            raise ValueError(f"Time slot must be one of: {', '.join(TIME_SLOTS)}")
        return v


class BookingCreateResult(BaseModel):
    """Result of booking creation."""

    success: bool
    message: str
    booking_id: int | None = None


class PriceLineItem(BaseModel):
    label: str
    price: Decimal


class PriceQuote(BaseModel):
    """Itemized price for a service selection."""

    items: list[PriceLineItem]
    total: Decimal
    currency: str = "GBP"


class CheckoutSessionResponse(BaseModel):
    """Hosted checkout redirect."""

    success: bool
    message: str
    url: str | None = None


class PinVerificationRequest(BaseModel):
    """Handover PIN submitted by the washer."""

    pin_type: Literal["collection", "delivery"]
    pin: str = Field(..., min_length=4, max_length=4)


class BookingResponse(BaseModel):
    """Schema for booking response."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    user_id: UUID
    washer_id: UUID | None
    collection_date: date
    collection_time_slot: str | None
    delivery_method: str
    total_price: Decimal
    status: str
    payment_status: str
    collection_verified_at: datetime | None
    delivery_verified_at: datetime | None
