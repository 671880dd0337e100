"""Auto-assignment of stale bookings to eligible washers.

Each run:
1. selects bookings still in ``pending_washer_assignment`` with no washer
   that are older than the staleness threshold, oldest first
2. loads the eligible washer pool (role washer, approved)
3. picks a washer uniformly at random per booking and claims the booking
   with a conditional update on its current status
4. reports per-booking outcomes; one failing booking never aborts the run

Concurrent runs may select the same booking. Only the conditional update
decides the winner; the loser records the booking as skipped.
"""

import logging
import random
import time
from dataclasses import asdict, dataclass, field
from datetime import UTC, datetime, timedelta
from enum import Enum
from typing import Any
from uuid import UUID

from sqlalchemy import func, select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.config import settings
from app.domain.booking_state import BookingStatus, assert_booking_transition
from app.domain.washer_state import ELIGIBLE_WASHER
from app.models.assignment import AssignmentRun
from app.models.booking import Booking
from app.models.profile import Profile

logger = logging.getLogger(__name__)


class AssignmentOutcome(str, Enum):
    ASSIGNED = "assigned"
    SKIPPED = "skipped"
    ERRORED = "errored"


@dataclass
class BookingAssignmentResult:
    """Outcome for a single candidate booking."""

    booking_id: int
    outcome: AssignmentOutcome
    washer_id: UUID | None = None
    reason: str | None = None

    @property
    def success(self) -> bool:
        return self.outcome == AssignmentOutcome.ASSIGNED

    def to_dict(self) -> dict[str, Any]:
        return {
            "booking_id": self.booking_id,
            "outcome": self.outcome.value,
            "success": self.success,
            "washer_id": str(self.washer_id) if self.washer_id else None,
            "reason": self.reason,
        }


@dataclass
class AssignmentSummary:
    """Summary of one scheduler run."""

    total_processed: int = 0
    assigned: int = 0
    skipped: int = 0
    errored: int = 0
    results: list[BookingAssignmentResult] = field(default_factory=list)
    errors: list[str] = field(default_factory=list)
    duration_ms: int = 0
    message: str = "Auto-assignment completed"

    def record(self, result: BookingAssignmentResult) -> None:
        self.results.append(result)
        if result.outcome == AssignmentOutcome.ASSIGNED:
            self.assigned += 1
        elif result.outcome == AssignmentOutcome.SKIPPED:
            self.skipped += 1
        else:
            self.errored += 1
            self.errors.append(f"Booking {result.booking_id}: {result.reason}")

    def to_dict(self) -> dict[str, Any]:
        data = asdict(self)
        data["results"] = [r.to_dict() for r in self.results]
        return data


class AutoAssignmentService:
    """Assigns bookings that have waited too long for a washer."""

    def __init__(self, rng: random.Random | None = None):
        self._rng = rng or random.Random()

    @property
    def staleness_threshold(self) -> timedelta:
        return timedelta(minutes=settings.auto_assign_staleness_minutes)

    async def find_stale_bookings(
        self,
        db: AsyncSession,
        now: datetime | None = None,
    ) -> list[Booking]:
        """Unassigned bookings older than the staleness threshold, oldest first."""
        cutoff = (now or datetime.now(UTC)) - self.staleness_threshold
        result = await db.execute(
            select(Booking)
            .where(
                Booking.status == BookingStatus.PENDING_WASHER_ASSIGNMENT.value,
                Booking.washer_id.is_(None),
                Booking.created_at < cutoff,
            )
            .order_by(Booking.created_at.asc(), Booking.id.asc())
            .limit(settings.auto_assign_batch_size)
        )
        return list(result.scalars().all())

    async def get_eligible_washers(self, db: AsyncSession) -> list[Profile]:
        """All approved washers at the moment of the call."""
        result = await db.execute(
            select(Profile)
            .filter_by(**ELIGIBLE_WASHER)
            .order_by(Profile.created_at.asc())
        )
        return list(result.scalars().all())

    def choose_washer(self, pool: list[UUID]) -> UUID:
        """Uniform random choice; no load balancing or locality matching."""
        return self._rng.choice(pool)

    async def claim_booking(
        self,
        db: AsyncSession,
        booking_id: int,
        washer_id: UUID,
    ) -> bool:
        """Assign a washer only if the booking is still unclaimed.

        Returns:
            bool: True if this call claimed the booking, False if another
            process changed it first
        """
        assert_booking_transition(
            BookingStatus.PENDING_WASHER_ASSIGNMENT.value,
            BookingStatus.WASHER_ASSIGNED.value,
        )
        result = await db.execute(
            update(Booking)
            .where(
                Booking.id == booking_id,
                Booking.status == BookingStatus.PENDING_WASHER_ASSIGNMENT.value,
                Booking.washer_id.is_(None),
            )
            .values(
                washer_id=washer_id,
                status=BookingStatus.WASHER_ASSIGNED.value,
                updated_at=func.now(),
            )
            .execution_options(synchronize_session=False)
        )
        await db.commit()
        return result.rowcount == 1

    async def run(
        self,
        db: AsyncSession,
        now: datetime | None = None,
    ) -> AssignmentSummary:
        """Run one assignment pass over the stale backlog."""
        started = time.monotonic()
        summary = AssignmentSummary()

        candidates = await self.find_stale_bookings(db, now=now)
        candidate_ids = [booking.id for booking in candidates]
        summary.total_processed = len(candidate_ids)

        if not candidate_ids:
            summary.message = "No bookings need auto-assignment"
            summary.duration_ms = int((time.monotonic() - started) * 1000)
            return summary

        # Plain ids: a rollback after a failed claim expires loaded rows
        pool = [washer.id for washer in await self.get_eligible_washers(db)]
        if not pool:
            logger.info("No available washers; %d bookings left waiting", len(candidate_ids))
            summary.message = "No available washers"
            summary.duration_ms = int((time.monotonic() - started) * 1000)
            return summary

        for booking_id in candidate_ids:
            washer_id = self.choose_washer(pool)
            try:
                claimed = await self.claim_booking(db, booking_id, washer_id)
            except SQLAlchemyError as e:
                await db.rollback()
                logger.exception("Error assigning booking %s", booking_id)
                summary.record(
                    BookingAssignmentResult(
                        booking_id=booking_id,
                        outcome=AssignmentOutcome.ERRORED,
                        reason=f"Failed to assign booking ({type(e).__name__})",
                    )
                )
                continue

            if claimed:
                logger.info("Assigned booking %s to washer %s", booking_id, washer_id)
                summary.record(
                    BookingAssignmentResult(
                        booking_id=booking_id,
                        outcome=AssignmentOutcome.ASSIGNED,
                        washer_id=washer_id,
                    )
                )
            else:
                logger.info("Booking %s already claimed, skipping", booking_id)
                summary.record(
                    BookingAssignmentResult(
                        booking_id=booking_id,
                        outcome=AssignmentOutcome.SKIPPED,
                        reason="Booking was already claimed",
                    )
                )

        summary.duration_ms = int((time.monotonic() - started) * 1000)
        logger.info(
            "Auto-assignment completed: processed=%d assigned=%d skipped=%d errored=%d",
            summary.total_processed,
            summary.assigned,
            summary.skipped,
            summary.errored,
        )
        return summary

    async def run_and_record(
        self,
        db: AsyncSession,
        trigger: str,
        now: datetime | None = None,
    ) -> tuple[AssignmentSummary, AssignmentRun]:
        """Run a pass and persist its outcome, including failed runs."""
        started_at = datetime.now(UTC)
        try:
            summary = await self.run(db, now=now)
        except Exception as e:
            await db.rollback()
            completed_at = datetime.now(UTC)
            db.add(
                AssignmentRun(
                    trigger=trigger,
                    started_at=started_at,
                    completed_at=completed_at,
                    duration_ms=int((completed_at - started_at).total_seconds() * 1000),
                    error_message=str(e),
                )
            )
            await db.commit()
            logger.error(f"Auto-assignment run failed (trigger: {trigger}): {e}")
            raise

        run = AssignmentRun(
            trigger=trigger,
            total_processed=summary.total_processed,
            assigned=summary.assigned,
            skipped=summary.skipped,
            errored=summary.errored,
            results=[r.to_dict() for r in summary.results],
            started_at=started_at,
            completed_at=datetime.now(UTC),
            duration_ms=summary.duration_ms,
        )
        db.add(run)
        await db.commit()
        return summary, run


# Singleton instance
assignment_service = AutoAssignmentService()
