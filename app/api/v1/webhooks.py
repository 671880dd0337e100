"""Inbound webhooks: payment provider events and auth sign-ups."""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, Header, HTTPException, Request, status
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import get_db, get_payment_gateway
from app.config import settings
from app.core.exceptions import BadRequestError, WebhookError
from app.core.security import verify_bearer_secret
from app.gateways.base import PaymentGateway
from app.services.referral_service import OUTCOME_MESSAGES, ReferralOutcome, referral_service
from app.services.webhook_service import webhook_service

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/stripe", status_code=status.HTTP_200_OK)
async def stripe_webhook(
    request: Request,
    db: Annotated[AsyncSession, Depends(get_db)],
    gateway: Annotated[PaymentGateway, Depends(get_payment_gateway)],
    stripe_signature: str | None = Header(None, alias="Stripe-Signature"),
) -> dict:
    """Handle Stripe webhook events."""
    if not settings.stripe_webhook_secret:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Stripe webhook secret is not configured",
        )

    # Get raw body for signature verification
    payload = await request.body()

    try:
        event = gateway.verify_webhook(payload, stripe_signature)
    except WebhookError as e:
        logger.warning(f"Webhook signature verification failed: {e.detail}")
        raise

    try:
        outcome = await webhook_service.handle_event(db, event)
    except WebhookError:
        raise
    except Exception:
        logger.exception("Error processing Stripe event %s", event.get("id"))
        raise WebhookError("Webhook handler failed")

    logger.info(f"Stripe event {event.get('id')} processed: {outcome}")
    return {"received": True}


@router.post("/auth/user-created")
async def auth_user_created(
    request: Request,
    db: Annotated[AsyncSession, Depends(get_db)],
    authorization: str | None = Header(None),
):
    """Record the referral carried by a new sign-up.

    Called by the auth provider's database webhook on user insert;
    protected by a shared bearer token when one is configured.
    """
    if not verify_bearer_secret(authorization, settings.auth_webhook_token):
        logger.warning("Rejected auth webhook with invalid credentials")
        return JSONResponse(
            status_code=status.HTTP_401_UNAUTHORIZED,
            content={"error": "Unauthorized"},
        )

    try:
        payload = await request.json()
    except ValueError:
        payload = None
    if not isinstance(payload, dict):
        logger.warning("Auth webhook body is not a JSON object")
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={"error": "Failed to parse request body"},
        )

    try:
        outcome = await referral_service.process_new_user(db, payload)
    except BadRequestError as e:
        return JSONResponse(status_code=e.status_code, content={"error": e.detail})
    except SQLAlchemyError:
        await db.rollback()
        logger.exception("Error processing referral")
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"error": "An unexpected server error occurred."},
        )

    message = OUTCOME_MESSAGES[outcome]
    if outcome == ReferralOutcome.RECORDED:
        return {"success": True, "message": message}
    return {"message": message}
