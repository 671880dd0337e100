"""Washer self-service endpoints."""

import logging
from typing import Annotated

import stripe
from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import get_current_washer, get_db, get_payment_gateway
from app.core.exceptions import ExternalServiceError
from app.domain.account_status import AccountStatus
from app.domain.washer_state import can_receive_payouts
from app.gateways.base import PaymentGateway
from app.models.profile import Profile
from app.schemas.washer import AccountStatusResponse
from app.services.washer_service import washer_service

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/me/stripe-status", response_model=AccountStatusResponse)
async def refresh_stripe_status(
    washer: Annotated[Profile, Depends(get_current_washer)],
    db: Annotated[AsyncSession, Depends(get_db)],
    gateway: Annotated[PaymentGateway, Depends(get_payment_gateway)],
) -> AccountStatusResponse:
    """Re-read the washer's connected account and store its status."""
    try:
        status = await washer_service.refresh_account_status(db, washer, gateway)
    except stripe.StripeError as e:
        logger.exception("Failed to retrieve Stripe account for washer %s", washer.id)
        raise ExternalServiceError("Stripe", "Could not check payout account status") from e

    can_pay, _ = can_receive_payouts(washer)
    return AccountStatusResponse(
        connected=status is not None,
        account_status=(status or AccountStatus.PENDING).value,
        can_receive_payouts=can_pay,
        charges_enabled=bool(washer.charges_enabled),
        payouts_enabled=bool(washer.payouts_enabled),
    )
