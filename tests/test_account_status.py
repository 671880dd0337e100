"""Connected account status derivation and washer gates."""

from types import SimpleNamespace

import pytest

from app.domain.account_status import AccountStatus, derive_account_status, is_payout_ready
from app.domain.washer_state import (
    can_access_washer_features,
    can_receive_payouts,
    is_eligible_washer,
)


@pytest.mark.parametrize(
    "details_submitted,payouts_enabled,charges_enabled,expected",
    [
        (True, True, True, AccountStatus.ACTIVE),
        (True, True, False, AccountStatus.RESTRICTED),
        (True, False, True, AccountStatus.RESTRICTED),
        (True, False, False, AccountStatus.RESTRICTED),
        (False, True, True, AccountStatus.PENDING),
        (False, False, False, AccountStatus.PENDING),
    ],
)
def test_derive_account_status(details_submitted, payouts_enabled, charges_enabled, expected):
    assert derive_account_status(details_submitted, payouts_enabled, charges_enabled) is expected


def test_legacy_enabled_status_counts_as_payout_ready():
    assert is_payout_ready("active")
    assert is_payout_ready("enabled")
    assert not is_payout_ready("restricted")
    assert not is_payout_ready(None)


def _profile(**overrides):
    fields = {
        "role": "washer",
        "washer_status": "approved",
        "stripe_account_id": "acct_123",
        "stripe_account_status": "active",
    }
    fields.update(overrides)
    return SimpleNamespace(**fields)


def test_eligible_washer_requires_role_and_approval():
    assert is_eligible_washer(_profile())
    assert not is_eligible_washer(_profile(role="user"))
    assert not is_eligible_washer(_profile(washer_status="pending"))


def test_washer_features_gate_reports_reason():
    allowed, reason = can_access_washer_features(_profile(washer_status="rejected"))
    assert not allowed
    assert "not yet approved" in reason


def test_payouts_need_connected_active_account():
    assert can_receive_payouts(_profile()) == (True, None)

    allowed, reason = can_receive_payouts(_profile(stripe_account_id=None))
    assert not allowed
    assert "not set up to receive payments" in reason

    allowed, _ = can_receive_payouts(_profile(stripe_account_status="restricted"))
    assert not allowed
