"""Booking state machine."""

from enum import Enum

from app.core.exceptions import InvalidBookingStatus


class BookingStatus(str, Enum):
    AWAITING_PAYMENT = "awaiting_payment"
    PENDING_WASHER_ASSIGNMENT = "pending_washer_assignment"
    AWAITING_WASHER_ACCEPTANCE = "awaiting_washer_acceptance"
    WASHER_ASSIGNED = "washer_assigned"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


BOOKING_TRANSITIONS = {
    "awaiting_payment": {"awaiting_washer_acceptance", "pending_washer_assignment", "cancelled"},
    "pending_washer_assignment": {"washer_assigned", "awaiting_washer_acceptance", "cancelled"},
    "awaiting_washer_acceptance": {"washer_assigned", "cancelled"},
    "washer_assigned": {"in_progress", "cancelled"},
    "in_progress": {"completed"},
    "completed": set(),
    "cancelled": set(),
}

# Statuses in which washer_id must still be null
PRE_ASSIGNMENT_STATUSES = frozenset(
    {
        "awaiting_payment",
        "pending_washer_assignment",
        "awaiting_washer_acceptance",
    }
)

# A checkout completion may only move the status from one of these
PAYABLE_STATUSES = PRE_ASSIGNMENT_STATUSES


def can_transition(current: str, target: str) -> bool:
    return target in BOOKING_TRANSITIONS.get(current, set())


def assert_booking_transition(current: str, target: str) -> None:
    if not can_transition(current, target):
        raise InvalidBookingStatus(
            f"Invalid booking transition: {current} → {target}"
        )
