"""Database models."""

from app.models.assignment import AssignmentRun
from app.models.booking import Booking
from app.models.profile import Profile, WasherApplication
from app.models.referral import Referral, ReferralEvent

__all__ = [
    # Profile
    "Profile",
    "WasherApplication",
    # Booking
    "Booking",
    # Scheduler
    "AssignmentRun",
    # Referrals
    "Referral",
    "ReferralEvent",
]
