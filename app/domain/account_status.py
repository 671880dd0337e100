"""Stripe Connect account status derivation.

Statuses:
- active: details submitted, charges and payouts enabled
- restricted: details submitted but charges or payouts still disabled
- pending: details not yet submitted
"""

from enum import Enum


class AccountStatus(str, Enum):
    """Derived Connect account status stored on the profile."""

    PENDING = "pending"
    RESTRICTED = "restricted"
    ACTIVE = "active"


# "enabled" is written by older onboarding code and means the same as active
PAYOUT_READY_STATUSES = frozenset({AccountStatus.ACTIVE.value, "enabled"})


def derive_account_status(
    details_submitted: bool,
    payouts_enabled: bool,
    charges_enabled: bool,
) -> AccountStatus:
    """Map the three provider flags to a single account status."""
    if not details_submitted:
        return AccountStatus.PENDING
    if payouts_enabled and charges_enabled:
        return AccountStatus.ACTIVE
    return AccountStatus.RESTRICTED


def is_payout_ready(account_status: str | None) -> bool:
    return account_status in PAYOUT_READY_STATUSES
