"""Washer approval and eligibility rules."""

from typing import TYPE_CHECKING

from app.domain.account_status import is_payout_ready

if TYPE_CHECKING:
    from app.models.profile import Profile

WASHER_ROLE = "washer"
APPROVED = "approved"

# Column values that make a profile an assignable washer
ELIGIBLE_WASHER = {"role": WASHER_ROLE, "washer_status": APPROVED}

# Decisions an admin may record on an application
REVIEW_DECISIONS = {"approved", "rejected"}


def is_eligible_washer(profile: "Profile") -> bool:
    """Whether a profile may be auto-assigned bookings."""
    return all(getattr(profile, column) == value for column, value in ELIGIBLE_WASHER.items())


def can_access_washer_features(profile: "Profile") -> tuple[bool, str | None]:
    """Check if a profile may use washer-only features."""
    if profile.role != WASHER_ROLE:
        return False, "This feature is only available to washers"
    if not is_eligible_washer(profile):
        return False, "Your washer application is not yet approved"
    return True, None


def can_receive_payouts(profile: "Profile") -> tuple[bool, str | None]:
    """Check if a washer can be paid through their connected account."""
    allowed, reason = can_access_washer_features(profile)
    if not allowed:
        return allowed, reason
    if not profile.stripe_account_id:
        return False, "The assigned washer is not set up to receive payments"
    if not is_payout_ready(profile.stripe_account_status):
        return False, "The washer's payout account is not active yet"
    return True, None
