"""Referral codes and sign-up referral processing.

New sign-ups arrive as auth user-insert events. A submitted referral code
is resolved to its owner and recorded once per referred user; unknown
codes, self-referrals and replays are acknowledged without writing.
"""

import logging
from collections.abc import Mapping
from enum import Enum
from typing import Any
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import AppException, BadRequestError
from app.models.referral import Referral, ReferralEvent
from app.utils.referral_codes import generate_referral_code, normalize_referral_code

logger = logging.getLogger(__name__)

MAX_CODE_ATTEMPTS = 10


class ReferralOutcome(str, Enum):
    RECORDED = "recorded"
    IGNORED = "ignored"
    NO_CODE = "no_code"
    UNKNOWN_CODE = "unknown_code"
    SELF_REFERRAL = "self_referral"
    DUPLICATE = "duplicate"


OUTCOME_MESSAGES = {
    ReferralOutcome.RECORDED: "Referral processed successfully.",
    ReferralOutcome.IGNORED: "Event ignored: not a new user creation.",
    ReferralOutcome.NO_CODE: "No referral code submitted.",
    ReferralOutcome.UNKNOWN_CODE: "Referral code not found.",
    ReferralOutcome.SELF_REFERRAL: "Self-referral attempt ignored.",
    ReferralOutcome.DUPLICATE: "Referral event already recorded for this user.",
}


def _is_new_user_event(payload: Mapping[str, Any]) -> bool:
    return (
        payload.get("type") == "INSERT"
        and payload.get("schema") == "auth"
        and payload.get("table") == "users"
    )


class ReferralService:
    """Service for referral codes and referral events."""

    async def get_or_create_code(self, db: AsyncSession, user_id: UUID) -> str:
        """Return the user's referral code, creating a unique one if needed."""
        existing = await db.scalar(select(Referral.code).where(Referral.user_id == user_id))
        if existing:
            return existing

        for _ in range(MAX_CODE_ATTEMPTS):
            code = generate_referral_code()
            taken = await db.scalar(select(Referral.id).where(Referral.code == code))
            if taken is None:
                break
        else:
            logger.error(f"Failed to generate a unique referral code after {MAX_CODE_ATTEMPTS} attempts")
            raise AppException(detail="Could not create a referral code. Please try again.")

        db.add(Referral(user_id=user_id, code=code))
        await db.flush()
        logger.info(f"Referral code created for user {user_id}")
        return code

    async def process_new_user(
        self,
        db: AsyncSession,
        payload: Mapping[str, Any],
    ) -> ReferralOutcome:
        """Record the referral carried by a new-user event.

        Raises:
            BadRequestError: If a new-user event has no usable user id
        """
        if not _is_new_user_event(payload):
            logger.info(
                f"Not a new user event (type={payload.get('type')}, "
                f"schema={payload.get('schema')}, table={payload.get('table')})"
            )
            return ReferralOutcome.IGNORED

        record = payload.get("record")
        if not isinstance(record, Mapping):
            record = {}
        try:
            referred_user_id = UUID(str(record["id"]))
        except (KeyError, ValueError):
            logger.error("New user event without a valid user id")
            raise BadRequestError("New user data or ID missing.")

        metadata = record.get("user_metadata")
        if not isinstance(metadata, Mapping):
            metadata = {}
        code = normalize_referral_code(metadata.get("submitted_referral_code"))
        if code is None:
            logger.info(f"No referral code submitted by user {referred_user_id}")
            return ReferralOutcome.NO_CODE

        referrer_id = await db.scalar(select(Referral.user_id).where(Referral.code == code))
        if referrer_id is None:
            logger.warning(f"Referral code {code} not found (user {referred_user_id})")
            return ReferralOutcome.UNKNOWN_CODE

        if referrer_id == referred_user_id:
            logger.warning(f"User {referred_user_id} attempted to refer themselves")
            return ReferralOutcome.SELF_REFERRAL

        db.add(
            ReferralEvent(
                referrer_user_id=referrer_id,
                referred_user_id=referred_user_id,
                referral_code_used=code,
                status="pending_first_action",
            )
        )
        try:
            await db.commit()
        except IntegrityError:
            await db.rollback()
            logger.warning(f"Referral event for user {referred_user_id} already exists")
            return ReferralOutcome.DUPLICATE

        logger.info(f"Referral recorded: {referrer_id} referred {referred_user_id}")
        return ReferralOutcome.RECORDED


# Singleton instance
referral_service = ReferralService()
