"""Washer application review."""

import logging
from uuid import uuid4

from sqlalchemy.exc import OperationalError

from app.models.profile import Profile, WasherApplication
from app.services.washer_service import WasherService
from tests.factories import create_application, create_profile


async def reload(db, model, ident):
    return await db.get(model, ident, populate_existing=True)


async def test_approval_updates_application_and_profile(db):
    applicant = await create_profile(db, role="washer", washer_status="pending")
    application = await create_application(db, applicant, id=7)

    result = await WasherService().update_application_status(db, 7, applicant.id, "approved")

    assert result == {"success": True}
    application = await reload(db, WasherApplication, application.id)
    applicant = await reload(db, Profile, applicant.id)
    assert application.status == "approved"
    assert applicant.washer_status == "approved"


async def test_rejection_updates_both_rows(db):
    applicant = await create_profile(db, role="washer", washer_status="pending")
    application = await create_application(db, applicant)

    result = await WasherService().update_application_status(db, application.id, applicant.id, "rejected")

    assert result == {"success": True}
    applicant = await reload(db, Profile, applicant.id)
    assert applicant.washer_status == "rejected"


async def test_profile_failure_leaves_application_updated(db, monkeypatch, caplog):
    applicant = await create_profile(db, role="washer", washer_status="pending")
    applicant_id = applicant.id
    await create_application(db, applicant, id=7)

    async def failing_profile_update(self, *args, **kwargs):
        raise OperationalError("UPDATE profiles", {}, Exception("connection reset"))

    monkeypatch.setattr(WasherService, "_update_profile", failing_profile_update)

    with caplog.at_level(logging.CRITICAL, logger="app.services.washer_service"):
        result = await WasherService().update_application_status(db, 7, applicant_id, "approved")

    assert result == {"error": "Failed to update the user profile status."}
    application = await reload(db, WasherApplication, 7)
    applicant = await reload(db, Profile, applicant_id)
    assert application.status == "approved"
    assert applicant.washer_status == "pending"
    assert any(record.levelno == logging.CRITICAL for record in caplog.records)


async def test_missing_profile_is_reported_as_profile_failure(db):
    applicant = await create_profile(db, role="washer", washer_status="pending")
    application = await create_application(db, applicant)
    result = await WasherService().update_application_status(db, application.id, uuid4(), "approved")

    assert result == {"error": "Failed to update the user profile status."}


async def test_unknown_application_returns_error(db):
    applicant = await create_profile(db)

    result = await WasherService().update_application_status(db, 999, applicant.id, "approved")

    assert result == {"error": "Failed to update the application record."}


async def test_invalid_status_is_rejected_before_any_write(db):
    applicant = await create_profile(db, role="washer", washer_status="pending")
    application = await create_application(db, applicant)

    result = await WasherService().update_application_status(db, application.id, applicant.id, "pending")

    assert "error" in result
    application = await reload(db, WasherApplication, application.id)
    assert application.status == "pending"
