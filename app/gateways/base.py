"""Base payment gateway interface.

Business logic should NOT live in adapters - only gateway communication.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from decimal import Decimal
from typing import Any


@dataclass
class CheckoutResult:
    """Result of creating a hosted checkout session."""

    success: bool
    session_id: str | None = None
    url: str | None = None
    error_message: str | None = None


@dataclass
class AccountFlags:
    """Connected account capability flags reported by the provider."""

    account_id: str
    details_submitted: bool
    charges_enabled: bool
    payouts_enabled: bool


class PaymentGateway(ABC):
    """Abstract base class for payment gateways."""

    @abstractmethod
    async def create_checkout_session(
        self,
        booking_id: int,
        amount: Decimal,
        customer_email: str | None,
        destination_account_id: str,
        metadata: dict[str, str],
    ) -> CheckoutResult:
        """Create a hosted checkout session paying out to a connected account.

        Args:
            booking_id: Booking being paid for
            amount: Total price in major currency units
            customer_email: Prefilled customer email
            destination_account_id: Connected account receiving the transfer
            metadata: Metadata echoed back on the completion webhook

        Returns:
            CheckoutResult with session id and redirect URL
        """
        pass

    @abstractmethod
    async def retrieve_account(self, account_id: str) -> AccountFlags:
        """Fetch current capability flags for a connected account."""
        pass

    @abstractmethod
    def verify_webhook(
        self,
        payload: bytes,
        signature: str | None,
    ) -> Any:
        """Verify webhook signature and parse payload.

        Args:
            payload: Raw request body
            signature: Webhook signature header

        Returns:
            Parsed event

        Raises:
            WebhookError: If the payload or signature is invalid
        """
        pass
