"""Stripe payment gateway adapter."""

import json
import logging
from decimal import ROUND_HALF_UP, Decimal
from typing import Any

import stripe

from app.config import settings
from app.core.exceptions import WebhookError
from app.gateways.base import AccountFlags, CheckoutResult, PaymentGateway

logger = logging.getLogger(__name__)


def to_minor_units(amount: Decimal) -> int:
    """Convert pounds to pence."""
    return int((amount * 100).quantize(Decimal("1"), rounding=ROUND_HALF_UP))


class StripeGateway(PaymentGateway):
    """Stripe Checkout and Connect implementation."""

    def __init__(
        self,
        secret_key: str | None = None,
        webhook_secret: str | None = None,
    ):
        self.secret_key = secret_key or settings.stripe_secret_key
        self.webhook_secret = webhook_secret or settings.stripe_webhook_secret

    def _configure(self) -> None:
        stripe.api_key = self.secret_key
        stripe.api_version = settings.stripe_api_version

    async def create_checkout_session(
        self,
        booking_id: int,
        amount: Decimal,
        customer_email: str | None,
        destination_account_id: str,
        metadata: dict[str, str],
    ) -> CheckoutResult:
        """Create a Stripe Checkout Session with a destination charge."""
        if not self.secret_key:
            return CheckoutResult(
                success=False,
                error_message="Stripe not configured",
            )

        price_in_pence = to_minor_units(amount)
        commission_in_pence = to_minor_units(
            amount * Decimal(str(settings.platform_commission_percent)) / 100
        )

        try:
            self._configure()

            session = stripe.checkout.Session.create(
                payment_method_types=["card"],
                line_items=[
                    {
                        "price_data": {
                            "currency": settings.currency,
                            "product_data": {
                                "name": f"Neighbourhood Wash Service (Booking #{booking_id})",
                                "description": "Complete laundry service including wash, dry, and fold.",
                            },
                            "unit_amount": price_in_pence,
                        },
                        "quantity": 1,
                    }
                ],
                mode="payment",
                success_url=f"{settings.site_url}/user/dashboard/my-bookings/{booking_id}?payment_success=true",
                cancel_url=f"{settings.site_url}/user/dashboard/my-bookings/{booking_id}?payment_cancelled=true",
                customer_email=customer_email,
                metadata=metadata,
                payment_intent_data={
                    "application_fee_amount": commission_in_pence,
                    "transfer_data": {"destination": destination_account_id},
                },
            )

            if not session.url:
                return CheckoutResult(
                    success=False,
                    error_message="Could not create Stripe checkout session",
                )

            return CheckoutResult(success=True, session_id=session.id, url=session.url)

        except stripe.StripeError as e:
            logger.exception("Stripe checkout session creation failed for booking %s", booking_id)
            return CheckoutResult(
                success=False,
                error_message=str(e),
            )

    async def retrieve_account(self, account_id: str) -> AccountFlags:
        """Fetch a connected account's flags."""
        self._configure()
        account = stripe.Account.retrieve(account_id)
        return AccountFlags(
            account_id=account.id,
            details_submitted=bool(getattr(account, "details_submitted", False)),
            charges_enabled=bool(getattr(account, "charges_enabled", False)),
            payouts_enabled=bool(getattr(account, "payouts_enabled", False)),
        )

    def verify_webhook(
        self,
        payload: bytes,
        signature: str | None,
    ) -> dict[str, Any]:
        """Verify the Stripe-Signature header and decode the event payload."""
        if not self.webhook_secret:
            raise WebhookError("Stripe webhook secret is not configured")
        if not signature:
            raise WebhookError("Missing Stripe-Signature header")

        try:
            body = payload.decode("utf-8")
        except UnicodeDecodeError:
            raise WebhookError("Invalid payload")

        try:
            stripe.WebhookSignature.verify_header(
                body,
                signature,
                self.webhook_secret,
                tolerance=stripe.Webhook.DEFAULT_TOLERANCE,
            )
        except stripe.SignatureVerificationError:
            raise WebhookError("Invalid signature")

        try:
            event = json.loads(body)
        except ValueError:
            raise WebhookError("Invalid payload")
        if not isinstance(event, dict):
            raise WebhookError("Invalid payload")
        return event
