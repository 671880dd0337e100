"""Booking endpoints."""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, status
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import get_current_user, get_current_washer, get_db, get_payment_gateway
from app.domain.pricing import calculate_total, get_itemized_breakdown
from app.gateways.base import PaymentGateway
from app.models.booking import Booking
from app.models.profile import Profile
from app.schemas.booking import (
    BookingCreate,
    BookingCreateResult,
    BookingResponse,
    CheckoutSessionResponse,
    PinVerificationRequest,
    PriceQuote,
    ServiceSelection,
)
from app.services.booking_service import booking_service

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("", response_model=BookingCreateResult, status_code=status.HTTP_201_CREATED)
async def create_booking(
    data: BookingCreate,
    current_user: Annotated[Profile, Depends(get_current_user)],
    db: Annotated[AsyncSession, Depends(get_db)],
) -> BookingCreateResult:
    """Create a new laundry booking awaiting washer assignment."""
    try:
        booking = await booking_service.create_booking(db, current_user.id, data)
    except SQLAlchemyError:
        await db.rollback()
        logger.exception("Error creating booking for user %s", current_user.id)
        return BookingCreateResult(
            success=False,
            message="Failed to create booking. Please try again.",
        )

    return BookingCreateResult(
        success=True,
        message="Booking created successfully.",
        booking_id=booking.id,
    )


@router.post("/quote", response_model=PriceQuote)
async def quote_booking_price(selection: ServiceSelection) -> PriceQuote:
    """Calculate the itemized price for a service selection without booking."""
    items = get_itemized_breakdown(
        selection.weight_tier,
        selection.selected_items,
        selection.selected_add_ons,
    )
    total = calculate_total(
        selection.weight_tier,
        selection.selected_items,
        selection.selected_add_ons,
    )
    return PriceQuote(items=items, total=total)


@router.post("/{booking_id}/checkout", response_model=CheckoutSessionResponse)
async def create_checkout_session(
    booking_id: int,
    current_user: Annotated[Profile, Depends(get_current_user)],
    db: Annotated[AsyncSession, Depends(get_db)],
    gateway: Annotated[PaymentGateway, Depends(get_payment_gateway)],
) -> CheckoutSessionResponse:
    """Start a hosted checkout for a booking with an assigned washer."""
    result = await booking_service.create_checkout(db, booking_id, current_user, gateway)
    return CheckoutSessionResponse(
        success=True,
        message="Redirecting to payment...",
        url=result.url,
    )


@router.post("/{booking_id}/verify-pin", response_model=BookingResponse)
async def verify_handover_pin(
    booking_id: int,
    data: PinVerificationRequest,
    washer: Annotated[Profile, Depends(get_current_washer)],
    db: Annotated[AsyncSession, Depends(get_db)],
) -> Booking:
    """Confirm collection or delivery with the PIN the customer provides."""
    return await booking_service.verify_handover_pin(
        db,
        booking_id=booking_id,
        washer=washer,
        pin_type=data.pin_type,
        pin=data.pin,
    )
