"""Payment provider event processing.

Handles the Stripe events that drive the booking lifecycle and washer
payout readiness. Signature verification happens before anything here runs.
"""

import logging
from collections.abc import Mapping
from typing import Any

from sqlalchemy import func, update
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import WebhookError
from app.domain.account_status import derive_account_status
from app.domain.booking_state import PAYABLE_STATUSES, BookingStatus
from app.domain.payment_state import statuses_leading_to
from app.models.booking import Booking
from app.models.profile import Profile
from app.utils.validators import parse_booking_id

logger = logging.getLogger(__name__)

CHECKOUT_COMPLETED = "checkout.session.completed"
ACCOUNT_UPDATED = "account.updated"


class WebhookService:
    """Applies verified provider events to bookings and profiles."""

    async def handle_event(self, db: AsyncSession, event: Mapping[str, Any]) -> str:
        """Dispatch a verified event.

        Returns:
            str: Short description of what was done, for logging
        """
        event_type = event["type"]
        data = event["data"]["object"]
        logger.info(f"Received event: {event_type}")

        if event_type == CHECKOUT_COMPLETED:
            return await self.handle_checkout_completed(db, data)
        if event_type == ACCOUNT_UPDATED:
            return await self.handle_account_updated(db, data)

        logger.info(f"Unhandled event type: {event_type}")
        return "ignored"

    async def handle_checkout_completed(self, db: AsyncSession, session: Mapping[str, Any]) -> str:
        """Mark a booking paid and move it out of the payment stage.

        The status only moves forward from a pre-assignment status. A replay
        for a booking that has since been assigned updates the payment
        fields without regressing its status.

        Raises:
            WebhookError: If the session metadata has no valid booking id
        """
        booking_id = parse_booking_id(session.get("metadata"))
        if booking_id is None:
            logger.warning(
                "checkout.session.completed without a valid booking id (session %s)",
                session.get("id"),
            )
            raise WebhookError("Missing or invalid booking ID in checkout session metadata")

        payment_reference = session.get("payment_intent") or session.get("id")
        payable_payment_statuses = sorted(statuses_leading_to("paid") | {"paid"})

        result = await db.execute(
            update(Booking)
            .where(
                Booking.id == booking_id,
                Booking.status.in_(sorted(PAYABLE_STATUSES)),
                Booking.payment_status.in_(payable_payment_statuses),
            )
            .values(
                status=BookingStatus.AWAITING_WASHER_ACCEPTANCE.value,
                payment_status="paid",
                payment_intent_id=payment_reference,
                updated_at=func.now(),
            )
            .execution_options(synchronize_session=False)
        )
        if result.rowcount:
            logger.info(f"Booking {booking_id} marked paid")
            return "booking_paid"

        # Already past the payment stage: record the payment, keep the status
        result = await db.execute(
            update(Booking)
            .where(
                Booking.id == booking_id,
                Booking.payment_status.in_(payable_payment_statuses),
            )
            .values(
                payment_status="paid",
                payment_intent_id=payment_reference,
                updated_at=func.now(),
            )
            .execution_options(synchronize_session=False)
        )
        if result.rowcount:
            logger.warning(
                f"Booking {booking_id} already past payment stage; payment recorded, status unchanged"
            )
            return "payment_recorded"

        logger.warning(f"No payable booking found for id {booking_id}")
        return "booking_not_found"

    async def handle_account_updated(self, db: AsyncSession, account: Mapping[str, Any]) -> str:
        """Recompute a connected account's status onto its profile.

        Raises:
            WebhookError: If the event carries no account id
        """
        account_id = account.get("id")
        if not account_id:
            logger.warning("account.updated without an account id")
            raise WebhookError("Missing account ID in account.updated event")

        charges_enabled = bool(account.get("charges_enabled"))
        payouts_enabled = bool(account.get("payouts_enabled"))
        status = derive_account_status(
            details_submitted=bool(account.get("details_submitted")),
            payouts_enabled=payouts_enabled,
            charges_enabled=charges_enabled,
        )

        result = await db.execute(
            update(Profile)
            .where(Profile.stripe_account_id == account_id)
            .values(
                stripe_account_status=status.value,
                charges_enabled=charges_enabled,
                payouts_enabled=payouts_enabled,
                updated_at=func.now(),
            )
            .execution_options(synchronize_session=False)
        )
        if not result.rowcount:
            logger.warning(f"No profile found for Stripe account {account_id}")
            return "profile_not_found"

        logger.info(f"Updated status for account {account_id} to {status.value}")
        return "account_updated"


# Singleton instance
webhook_service = WebhookService()
