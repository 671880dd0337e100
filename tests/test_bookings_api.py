"""Booking creation, quoting, checkout and handover endpoints."""

from decimal import Decimal

from app.gateways.base import CheckoutResult
from app.models.booking import Booking
from tests.factories import auth_headers, create_booking, create_profile, create_washer

BOOKING_PAYLOAD = {
    "collection_date": "2026-02-14",
    "time_slot": "9:00 AM - 12:00 PM",
    "delivery_method": "collection",
    "weight_tier": "0-6kg",
    "selected_items": {"pillows": 1},
    "selected_add_ons": ["ironing"],
    "special_instructions": "Gentle cycle please",
    "stain_image_urls": ["https://cdn.example.com/stains/1.jpg"],
    "access_notes": "Ring the side door",
    "total_price": "41.49",
}


async def reload(db, booking_id):
    return await db.get(Booking, booking_id, populate_existing=True)


async def test_create_booking(client, db):
    user = await create_profile(db)

    response = await client.post("/api/v1/bookings", json=BOOKING_PAYLOAD, headers=auth_headers(user))

    assert response.status_code == 201
    body = response.json()
    assert body["success"] is True
    booking = await reload(db, body["booking_id"])
    assert booking.user_id == user.id
    assert booking.status == "pending_washer_assignment"
    assert booking.payment_status == "pending"
    assert booking.washer_id is None
    assert booking.total_price == Decimal("41.49")
    assert booking.collection_pin != booking.delivery_pin
    assert len(booking.collection_pin) == len(booking.delivery_pin) == 4
    assert booking.services_config["selectedAddOns"] == ["ironing"]
    assert booking.stain_images == ["https://cdn.example.com/stains/1.jpg"]


async def test_create_booking_rejects_price_mismatch(client, db):
    user = await create_profile(db)
    payload = {**BOOKING_PAYLOAD, "total_price": "10.00"}

    response = await client.post("/api/v1/bookings", json=payload, headers=auth_headers(user))

    assert response.status_code == 422


async def test_create_booking_requires_authentication(client):
    response = await client.post("/api/v1/bookings", json=BOOKING_PAYLOAD)

    assert response.status_code == 401


async def test_quote(client):
    response = await client.post(
        "/api/v1/bookings/quote",
        json={"weight_tier": "6-10kg", "selected_add_ons": ["stain_removal"]},
    )

    assert response.status_code == 200
    body = response.json()
    assert [item["label"] for item in body["items"]] == [
        "Large Wash (6-10kg)",
        "Stain Removal Treatment",
        "Collection & Delivery",
    ]
    assert Decimal(body["total"]) == Decimal("34.99")


async def test_checkout_creates_session_for_assigned_washer(client, db, gateway):
    user = await create_profile(db)
    washer = await create_washer(db, stripe_account_id="acct_washer", stripe_account_status="active")
    booking = await create_booking(db, user, status="washer_assigned", washer_id=washer.id)

    response = await client.post(f"/api/v1/bookings/{booking.id}/checkout", headers=auth_headers(user))

    assert response.status_code == 200
    assert response.json()["url"] == "https://checkout.stripe.com/c/pay/cs_test_123"
    call = gateway.checkout_calls[0]
    assert call["destination_account_id"] == "acct_washer"
    assert call["metadata"]["bookingId"] == str(booking.id)
    booking = await reload(db, booking.id)
    assert booking.payment_intent_id == "cs_test_123"


async def test_checkout_rejects_washer_without_stripe_account(client, db, gateway):
    user = await create_profile(db)
    washer = await create_washer(db)
    booking = await create_booking(db, user, status="washer_assigned", washer_id=washer.id)

    response = await client.post(f"/api/v1/bookings/{booking.id}/checkout", headers=auth_headers(user))

    assert response.status_code == 400
    assert "not set up to receive payments" in response.json()["detail"]
    assert gateway.checkout_calls == []


async def test_checkout_gateway_failure_returns_payment_error(client, db, gateway):
    user = await create_profile(db)
    washer = await create_washer(db, stripe_account_id="acct_washer", stripe_account_status="active")
    booking = await create_booking(db, user, status="washer_assigned", washer_id=washer.id)
    gateway.checkout_result = CheckoutResult(success=False, error_message="card_declined")

    response = await client.post(f"/api/v1/bookings/{booking.id}/checkout", headers=auth_headers(user))

    assert response.status_code == 402


async def test_checkout_only_for_own_booking(client, db):
    owner = await create_profile(db)
    stranger = await create_profile(db)
    washer = await create_washer(db, stripe_account_id="acct_washer", stripe_account_status="active")
    booking = await create_booking(db, owner, status="washer_assigned", washer_id=washer.id)

    response = await client.post(f"/api/v1/bookings/{booking.id}/checkout", headers=auth_headers(stranger))

    assert response.status_code == 403


async def test_checkout_rejects_refunded_booking(client, db, gateway):
    user = await create_profile(db)
    washer = await create_washer(db, stripe_account_id="acct_washer", stripe_account_status="active")
    booking = await create_booking(
        db, user, status="washer_assigned", washer_id=washer.id, payment_status="refunded"
    )

    response = await client.post(f"/api/v1/bookings/{booking.id}/checkout", headers=auth_headers(user))

    assert response.status_code == 422
    assert "refunded" in response.json()["detail"]
    assert gateway.checkout_calls == []


async def test_collection_then_delivery_pin_completes_booking(client, db):
    user = await create_profile(db)
    washer = await create_washer(db)
    booking = await create_booking(db, user, status="washer_assigned", washer_id=washer.id)
    url = f"/api/v1/bookings/{booking.id}/verify-pin"

    collected = await client.post(url, json={"pin_type": "collection", "pin": "1234"}, headers=auth_headers(washer))
    assert collected.status_code == 200
    assert collected.json()["status"] == "in_progress"
    assert collected.json()["collection_verified_at"] is not None

    delivered = await client.post(url, json={"pin_type": "delivery", "pin": "5678"}, headers=auth_headers(washer))
    assert delivered.status_code == 200
    assert delivered.json()["status"] == "completed"


async def test_wrong_pin_is_rejected(client, db):
    user = await create_profile(db)
    washer = await create_washer(db)
    booking = await create_booking(db, user, status="washer_assigned", washer_id=washer.id)

    response = await client.post(
        f"/api/v1/bookings/{booking.id}/verify-pin",
        json={"pin_type": "collection", "pin": "0000"},
        headers=auth_headers(washer),
    )

    assert response.status_code == 400
    booking = await reload(db, booking.id)
    assert booking.status == "washer_assigned"
    assert booking.collection_verified_at is None


async def test_repeated_collection_pin_is_rejected(client, db):
    user = await create_profile(db)
    washer = await create_washer(db)
    booking = await create_booking(db, user, status="washer_assigned", washer_id=washer.id)
    url = f"/api/v1/bookings/{booking.id}/verify-pin"

    await client.post(url, json={"pin_type": "collection", "pin": "1234"}, headers=auth_headers(washer))
    response = await client.post(url, json={"pin_type": "collection", "pin": "1234"}, headers=auth_headers(washer))

    assert response.status_code == 400
    assert response.json()["detail"] == "Collection has already been verified."


async def test_delivery_before_collection_is_an_invalid_transition(client, db):
    user = await create_profile(db)
    washer = await create_washer(db)
    booking = await create_booking(db, user, status="washer_assigned", washer_id=washer.id)

    response = await client.post(
        f"/api/v1/bookings/{booking.id}/verify-pin",
        json={"pin_type": "delivery", "pin": "5678"},
        headers=auth_headers(washer),
    )

    assert response.status_code == 400
    assert "Invalid booking transition" in response.json()["detail"]


async def test_other_washer_cannot_verify(client, db):
    user = await create_profile(db)
    assigned = await create_washer(db)
    other = await create_washer(db)
    booking = await create_booking(db, user, status="washer_assigned", washer_id=assigned.id)

    response = await client.post(
        f"/api/v1/bookings/{booking.id}/verify-pin",
        json={"pin_type": "collection", "pin": "1234"},
        headers=auth_headers(other),
    )

    assert response.status_code == 404


async def test_unapproved_washer_cannot_verify(client, db):
    user = await create_profile(db)
    washer = await create_washer(db, washer_status="pending")
    booking = await create_booking(db, user, status="washer_assigned", washer_id=washer.id)

    response = await client.post(
        f"/api/v1/bookings/{booking.id}/verify-pin",
        json={"pin_type": "collection", "pin": "1234"},
        headers=auth_headers(washer),
    )

    assert response.status_code == 403
