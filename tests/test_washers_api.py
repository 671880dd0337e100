"""Washer payout account refresh."""

from app.gateways.base import AccountFlags
from app.models.profile import Profile
from tests.factories import auth_headers, create_profile, create_washer

URL = "/api/v1/washers/me/stripe-status"


async def test_refresh_stores_derived_status(client, db, gateway):
    washer = await create_washer(db, stripe_account_id="acct_1", stripe_account_status="pending")
    gateway.account_flags = AccountFlags("acct_1", details_submitted=True, charges_enabled=True, payouts_enabled=True)

    response = await client.post(URL, headers=auth_headers(washer))

    assert response.status_code == 200
    assert response.json() == {
        "connected": True,
        "account_status": "active",
        "can_receive_payouts": True,
        "charges_enabled": True,
        "payouts_enabled": True,
    }
    washer = await db.get(Profile, washer.id, populate_existing=True)
    assert washer.stripe_account_status == "active"


async def test_refresh_without_connected_account(client, db):
    washer = await create_washer(db)

    response = await client.post(URL, headers=auth_headers(washer))

    assert response.status_code == 200
    body = response.json()
    assert body["connected"] is False
    assert body["account_status"] == "pending"
    assert body["can_receive_payouts"] is False


async def test_non_washer_is_forbidden(client, db):
    user = await create_profile(db)

    response = await client.post(URL, headers=auth_headers(user))

    assert response.status_code == 403
