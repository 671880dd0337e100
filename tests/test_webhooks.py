"""Stripe webhook endpoint."""

from app.config import settings
from app.models.booking import Booking
from app.models.profile import Profile
from tests.factories import create_booking, create_profile, create_washer, stripe_event, stripe_signature

URL = "/api/v1/webhooks/stripe"


async def post_event(client, payload: bytes, secret: str):
    return await client.post(
        URL,
        content=payload,
        headers={
            "Stripe-Signature": stripe_signature(payload, secret),
            "Content-Type": "application/json",
        },
    )


def checkout_completed(booking_id, payment_intent="pi_test_123"):
    return stripe_event(
        "checkout.session.completed",
        {
            "id": "cs_test_123",
            "object": "checkout.session",
            "payment_intent": payment_intent,
            "metadata": {"bookingId": str(booking_id)} if booking_id is not None else {},
        },
    )


async def reload(db, model, ident):
    return await db.get(model, ident, populate_existing=True)


async def test_checkout_completed_marks_booking_paid(client, db, webhook_secret):
    user = await create_profile(db)
    booking = await create_booking(db, user, status="awaiting_payment")

    response = await post_event(client, checkout_completed(booking.id), webhook_secret)

    assert response.status_code == 200
    assert response.json() == {"received": True}

    booking = await reload(db, Booking, booking.id)
    assert booking.status == "awaiting_washer_acceptance"
    assert booking.payment_status == "paid"
    assert booking.payment_intent_id == "pi_test_123"


async def test_payment_intent_falls_back_to_session_id(client, db, webhook_secret):
    user = await create_profile(db)
    booking = await create_booking(db, user)

    response = await post_event(client, checkout_completed(booking.id, payment_intent=None), webhook_secret)

    assert response.status_code == 200
    booking = await reload(db, Booking, booking.id)
    assert booking.payment_intent_id == "cs_test_123"


async def test_replayed_event_converges_on_same_state(client, db, webhook_secret):
    user = await create_profile(db)
    booking = await create_booking(db, user)
    payload = checkout_completed(booking.id)

    first = await post_event(client, payload, webhook_secret)
    second = await post_event(client, payload, webhook_secret)

    assert first.status_code == second.status_code == 200
    booking = await reload(db, Booking, booking.id)
    assert booking.status == "awaiting_washer_acceptance"
    assert booking.payment_status == "paid"


async def test_replay_after_assignment_does_not_regress_status(client, db, webhook_secret):
    user = await create_profile(db)
    washer = await create_washer(db)
    booking = await create_booking(
        db,
        user,
        status="washer_assigned",
        washer_id=washer.id,
        payment_status="paid",
    )

    response = await post_event(client, checkout_completed(booking.id), webhook_secret)

    assert response.status_code == 200
    booking = await reload(db, Booking, booking.id)
    assert booking.status == "washer_assigned"
    assert booking.washer_id == washer.id
    assert booking.payment_status == "paid"


async def test_missing_booking_id_is_rejected_without_writes(client, db, webhook_secret):
    user = await create_profile(db)
    booking = await create_booking(db, user)

    response = await post_event(client, checkout_completed(None), webhook_secret)

    assert response.status_code == 400
    booking = await reload(db, Booking, booking.id)
    assert booking.status == "pending_washer_assignment"
    assert booking.payment_status == "pending"


async def test_non_numeric_booking_id_is_rejected(client, webhook_secret):
    response = await post_event(client, checkout_completed("not-a-number"), webhook_secret)

    assert response.status_code == 400


async def test_invalid_signature_is_rejected(client, db, webhook_secret):
    user = await create_profile(db)
    booking = await create_booking(db, user)
    payload = checkout_completed(booking.id)

    response = await client.post(
        URL,
        content=payload,
        headers={"Stripe-Signature": stripe_signature(payload, "whsec_wrong")},
    )

    assert response.status_code == 400
    assert response.json() == {"detail": "Invalid signature"}
    booking = await reload(db, Booking, booking.id)
    assert booking.payment_status == "pending"


async def test_missing_signature_header_is_rejected(client, webhook_secret):
    response = await client.post(URL, content=checkout_completed(1))

    assert response.status_code == 400


async def test_unconfigured_webhook_secret_returns_503(client, monkeypatch):
    monkeypatch.setattr(settings, "stripe_webhook_secret", None)

    response = await client.post(URL, content=checkout_completed(1))

    assert response.status_code == 503


async def test_account_updated_sets_derived_status(client, db, webhook_secret):
    washer = await create_washer(db, stripe_account_id="acct_123", stripe_account_status="pending")
    payload = stripe_event(
        "account.updated",
        {
            "id": "acct_123",
            "object": "account",
            "details_submitted": True,
            "charges_enabled": True,
            "payouts_enabled": True,
        },
    )

    response = await post_event(client, payload, webhook_secret)

    assert response.status_code == 200
    washer = await reload(db, Profile, washer.id)
    assert washer.stripe_account_status == "active"
    assert washer.charges_enabled is True
    assert washer.payouts_enabled is True


async def test_account_updated_restricted_when_payouts_disabled(client, db, webhook_secret):
    washer = await create_washer(db, stripe_account_id="acct_456")
    payload = stripe_event(
        "account.updated",
        {"id": "acct_456", "details_submitted": True, "charges_enabled": True, "payouts_enabled": False},
    )

    await post_event(client, payload, webhook_secret)

    washer = await reload(db, Profile, washer.id)
    assert washer.stripe_account_status == "restricted"
    assert washer.payouts_enabled is False


async def test_account_updated_for_unknown_account_is_acknowledged(client, webhook_secret):
    payload = stripe_event("account.updated", {"id": "acct_unknown", "details_submitted": False})

    response = await post_event(client, payload, webhook_secret)

    assert response.status_code == 200


async def test_unhandled_event_type_is_acknowledged(client, db, webhook_secret):
    user = await create_profile(db)
    booking = await create_booking(db, user)
    payload = stripe_event("invoice.paid", {"id": "in_123", "metadata": {"bookingId": str(booking.id)}})

    response = await post_event(client, payload, webhook_secret)

    assert response.status_code == 200
    assert response.json() == {"received": True}
    booking = await reload(db, Booking, booking.id)
    assert booking.payment_status == "pending"


async def test_account_updated_without_account_id_touches_no_profile(client, db, webhook_secret):
    user = await create_profile(db)
    payload = stripe_event(
        "account.updated",
        {"details_submitted": True, "charges_enabled": True, "payouts_enabled": False},
    )

    response = await post_event(client, payload, webhook_secret)

    assert response.status_code == 400
    assert response.json() == {"detail": "Missing account ID in account.updated event"}
    user = await reload(db, Profile, user.id)
    assert user.stripe_account_status is None
    assert user.charges_enabled is False


async def test_signed_non_object_payload_is_rejected(client, webhook_secret):
    response = await post_event(client, b"[]", webhook_secret)

    assert response.status_code == 400
    assert response.json() == {"detail": "Invalid payload"}
