"""Booking creation, checkout and handover verification."""

import logging
from datetime import UTC, datetime
from decimal import Decimal
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import (
    AuthorizationError,
    BadRequestError,
    InvalidBookingStatus,
    NotFoundError,
    PaymentError,
    ValidationError,
)
from app.domain.booking_state import BookingStatus, assert_booking_transition
from app.domain.payment_state import assert_payment_transition
from app.domain.pricing import calculate_total
from app.domain.washer_state import can_receive_payouts
from app.gateways.base import CheckoutResult, PaymentGateway
from app.models.booking import Booking
from app.models.profile import Profile
from app.schemas.booking import BookingCreate
from app.utils.pins import generate_handover_pins
from app.utils.validators import validate_pin

logger = logging.getLogger(__name__)

# Allowed rounding drift between the client-computed and server price
PRICE_TOLERANCE = Decimal("0.01")

PIN_TRANSITIONS = {
    "collection": ("collection_verified_at", BookingStatus.IN_PROGRESS.value),
    "delivery": ("delivery_verified_at", BookingStatus.COMPLETED.value),
}


class BookingService:
    """Service for the user- and washer-facing booking flows."""

    async def create_booking(
        self,
        db: AsyncSession,
        user_id: UUID,
        data: BookingCreate,
    ) -> Booking:
        """Create a booking awaiting washer assignment.

        Raises:
            ValidationError: If the submitted total does not match the
                price of the selected services
        """
        expected_total = calculate_total(
            data.weight_tier,
            data.selected_items,
            data.selected_add_ons,
        )
        if abs(expected_total - data.total_price) > PRICE_TOLERANCE:
            raise ValidationError(
                f"Total price {data.total_price} does not match the selected services ({expected_total})"
            )

        collection_pin, delivery_pin = generate_handover_pins()

        booking = Booking(
            user_id=user_id,
            collection_date=data.collection_date,
            collection_time_slot=data.time_slot,
            delivery_method=data.delivery_method,
            services_config={
                "weightTier": data.weight_tier,
                "selectedItems": data.selected_items,
                "selectedAddOns": data.selected_add_ons,
            },
            total_price=expected_total,
            special_instructions=data.special_instructions or None,
            stain_images=list(data.stain_image_urls),
            access_notes=data.access_notes or None,
            collection_pin=collection_pin,
            delivery_pin=delivery_pin,
            payment_intent_id=data.payment_intent_id,
            payment_status="pending",
            status=BookingStatus.PENDING_WASHER_ASSIGNMENT.value,
        )
        db.add(booking)
        await db.flush()

        logger.info(f"Booking {booking.id} created for user {user_id}")
        return booking

    async def get_booking(self, db: AsyncSession, booking_id: int) -> Booking:
        result = await db.execute(select(Booking).where(Booking.id == booking_id))
        booking = result.scalar_one_or_none()
        if not booking:
            raise NotFoundError("Booking", str(booking_id))
        return booking

    async def create_checkout(
        self,
        db: AsyncSession,
        booking_id: int,
        user: Profile,
        gateway: PaymentGateway,
    ) -> CheckoutResult:
        """Start a hosted checkout paying the assigned washer."""
        booking = await self.get_booking(db, booking_id)

        if booking.user_id != user.id:
            raise AuthorizationError("You can only pay for your own bookings")
        if booking.payment_status == "paid":
            raise BadRequestError("Booking is already paid")
        assert_payment_transition(booking.payment_status, "paid")
        if booking.status == BookingStatus.CANCELLED.value:
            raise InvalidBookingStatus("Cannot pay for a cancelled booking")
        if booking.washer_id is None:
            raise InvalidBookingStatus("A washer has not been assigned to this booking yet")

        washer = await db.get(Profile, booking.washer_id)
        if washer is None:
            raise NotFoundError("Washer profile", str(booking.washer_id))

        allowed, reason = can_receive_payouts(washer)
        if not allowed:
            logger.error(f"Washer {washer.id} cannot receive payouts for booking {booking.id}: {reason}")
            raise BadRequestError(f"{reason}. Please contact support.")

        result = await gateway.create_checkout_session(
            booking_id=booking.id,
            amount=booking.total_price,
            customer_email=user.email,
            destination_account_id=washer.stripe_account_id,
            metadata={
                "bookingId": str(booking.id),
                "userId": str(user.id),
                "washerId": str(washer.id),
            },
        )
        if not result.success:
            raise PaymentError("Could not set up payment. Please try again.")

        booking.payment_intent_id = result.session_id
        return result

    async def verify_handover_pin(
        self,
        db: AsyncSession,
        booking_id: int,
        washer: Profile,
        pin_type: str,
        pin: str,
    ) -> Booking:
        """Confirm a collection or delivery handover with the user's PIN.

        Collection moves the booking to in_progress, delivery to completed.
        """
        if pin_type not in PIN_TRANSITIONS:
            raise ValidationError("PIN type must be 'collection' or 'delivery'.")
        if not validate_pin(pin):
            raise BadRequestError("PIN must be a 4-digit number.")

        result = await db.execute(
            select(Booking).where(
                Booking.id == booking_id,
                Booking.washer_id == washer.id,
            )
        )
        booking = result.scalar_one_or_none()
        if not booking:
            raise NotFoundError("Booking", str(booking_id))

        verified_field, new_status = PIN_TRANSITIONS[pin_type]
        label = pin_type.capitalize()

        if getattr(booking, verified_field):
            raise BadRequestError(f"{label} has already been verified.")

        correct_pin = booking.collection_pin if pin_type == "collection" else booking.delivery_pin
        if pin != correct_pin:
            raise BadRequestError("Incorrect PIN. Please try again.")

        assert_booking_transition(booking.status, new_status)

        setattr(booking, verified_field, datetime.now(UTC))
        booking.status = new_status

        logger.info(f"{label} verified for booking {booking.id}; status {new_status}")
        return booking


# Singleton instance
booking_service = BookingService()
