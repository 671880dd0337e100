"""Scheduler trigger endpoint."""

from datetime import UTC, datetime, timedelta

from sqlalchemy import select

from app.config import settings
from app.models.assignment import AssignmentRun
from app.models.booking import Booking
from app.services.assignment_service import AutoAssignmentService
from tests.factories import auth_headers, create_booking, create_profile, create_washer

URL = "/api/v1/jobs/auto-assign"


async def test_missing_token_is_unauthorized(client, scheduler_token):
    response = await client.post(URL)

    assert response.status_code == 401
    assert response.json() == {"success": False, "error": "Unauthorized"}


async def test_wrong_token_is_unauthorized(client, db, scheduler_token):
    user = await create_profile(db)
    booking = await create_booking(db, user, created_at=datetime.now(UTC) - timedelta(minutes=30))
    await create_washer(db)

    response = await client.post(URL, headers={"Authorization": "Bearer not-the-token"})

    assert response.status_code == 401
    booking = await db.get(Booking, booking.id, populate_existing=True)
    assert booking.washer_id is None


async def test_authorized_run_assigns_and_reports(client, db, scheduler_token):
    user = await create_profile(db)
    washer = await create_washer(db)
    booking = await create_booking(db, user, created_at=datetime.now(UTC) - timedelta(minutes=30))

    response = await client.post(URL, headers={"Authorization": f"Bearer {scheduler_token}"})

    assert response.status_code == 200
    body = response.json()
    assert body["success"] is True
    assert body["message"] == "Auto-assignment completed"
    data = body["data"]
    assert data["total_processed"] == 1
    assert data["assigned"] == 1
    assert data["skipped"] == 0
    assert data["errors"] == []
    assert data["results"][0]["booking_id"] == booking.id
    assert data["results"][0]["washer_id"] == str(washer.id)
    assert data["run_id"]

    result = await db.execute(select(AssignmentRun))
    run = result.scalar_one()
    assert str(run.id) == data["run_id"]
    assert run.trigger == "http"


async def test_open_endpoint_when_no_token_configured(client, monkeypatch):
    monkeypatch.setattr(settings, "scheduler_api_token", None)

    response = await client.post(URL)

    assert response.status_code == 200
    assert response.json()["message"] == "No bookings need auto-assignment"


async def test_unexpected_failure_returns_500(client, monkeypatch, scheduler_token):
    async def broken_run(self, db, now=None):
        raise RuntimeError("database unavailable")

    monkeypatch.setattr(AutoAssignmentService, "run", broken_run)

    response = await client.post(URL, headers={"Authorization": f"Bearer {scheduler_token}"})

    assert response.status_code == 500
    assert response.json() == {
        "success": False,
        "error": "Internal server error",
        "message": "Failed to run auto-assignment job",
    }


async def test_health_check(client):
    response = await client.get(URL)

    assert response.status_code == 200
    body = response.json()
    assert body["status"] == "ok"
    assert "timestamp" in body


async def test_history_requires_admin(client, db):
    user = await create_profile(db)

    response = await client.get(f"{URL}/history", headers=auth_headers(user))

    assert response.status_code == 403


async def test_history_lists_recent_runs(client, db, monkeypatch):
    monkeypatch.setattr(settings, "scheduler_api_token", None)
    admin = await create_profile(db, role="admin")

    await client.post(URL)
    response = await client.get(f"{URL}/history", headers=auth_headers(admin))

    assert response.status_code == 200
    runs = response.json()
    assert len(runs) == 1
    assert runs[0]["trigger"] == "http"
    assert runs[0]["total_processed"] == 0
