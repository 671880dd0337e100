"""Washer application review and payout account service."""

import logging
from datetime import UTC, datetime
from uuid import UUID

from sqlalchemy import update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.domain.account_status import AccountStatus, derive_account_status
from app.domain.washer_state import REVIEW_DECISIONS
from app.gateways.base import PaymentGateway
from app.models.profile import Profile, WasherApplication

logger = logging.getLogger(__name__)

APPLICATION_UPDATE_FAILED = "Failed to update the application record."
PROFILE_UPDATE_FAILED = "Failed to update the user profile status."


class WasherService:
    """Service for washer approval and Connect account state."""

    async def update_application_status(
        self,
        db: AsyncSession,
        application_id: int,
        user_id: UUID,
        new_status: str,
    ) -> dict:
        """Record an admin decision on an application and its profile.

        The two writes commit separately. If the profile write fails after
        the application write committed, the application keeps its new
        status and the failure is logged as critical; nothing is rolled back.

        Args:
            db: Database session
            application_id: Washer application ID
            user_id: Profile ID owning the application
            new_status: "approved" or "rejected"

        Returns:
            {"success": True} or {"error": message}
        """
        if new_status not in REVIEW_DECISIONS:
            return {"error": f"Invalid status '{new_status}'."}

        now = datetime.now(UTC)

        try:
            updated = await self._update_application(db, application_id, new_status, now)
        except SQLAlchemyError:
            await db.rollback()
            logger.exception("Error updating application status for application %s", application_id)
            return {"error": APPLICATION_UPDATE_FAILED}

        if not updated:
            logger.warning(f"Washer application {application_id} not found")
            return {"error": APPLICATION_UPDATE_FAILED}

        try:
            updated = await self._update_profile(db, user_id, new_status, now)
        except SQLAlchemyError:
            await db.rollback()
            logger.critical(
                "Application %s updated to %s but profile %s status update failed",
                application_id,
                new_status,
                user_id,
                exc_info=True,
            )
            return {"error": PROFILE_UPDATE_FAILED}

        if not updated:
            logger.critical(
                "Application %s updated to %s but profile %s does not exist",
                application_id,
                new_status,
                user_id,
            )
            return {"error": PROFILE_UPDATE_FAILED}

        logger.info(f"Washer application {application_id} {new_status} for user {user_id}")
        return {"success": True}

    async def _update_application(
        self,
        db: AsyncSession,
        application_id: int,
        new_status: str,
        now: datetime,
    ) -> bool:
        result = await db.execute(
            update(WasherApplication)
            .where(WasherApplication.id == application_id)
            .values(status=new_status, updated_at=now)
            .execution_options(synchronize_session=False)
        )
        await db.commit()
        return result.rowcount > 0

    async def _update_profile(
        self,
        db: AsyncSession,
        user_id: UUID,
        new_status: str,
        now: datetime,
    ) -> bool:
        result = await db.execute(
            update(Profile)
            .where(Profile.id == user_id)
            .values(washer_status=new_status, updated_at=now)
            .execution_options(synchronize_session=False)
        )
        await db.commit()
        return result.rowcount > 0

    async def refresh_account_status(
        self,
        db: AsyncSession,
        profile: Profile,
        gateway: PaymentGateway,
    ) -> AccountStatus | None:
        """Pull the connected account's flags and store the derived status.

        Returns:
            The derived status, or None if no account is connected
        """
        if not profile.stripe_account_id:
            return None

        flags = await gateway.retrieve_account(profile.stripe_account_id)
        status = derive_account_status(
            details_submitted=flags.details_submitted,
            payouts_enabled=flags.payouts_enabled,
            charges_enabled=flags.charges_enabled,
        )

        profile.stripe_account_status = status.value
        profile.charges_enabled = flags.charges_enabled
        profile.payouts_enabled = flags.payouts_enabled
        return status


# Singleton instance
washer_service = WasherService()
