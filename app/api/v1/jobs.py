"""Scheduler-triggered job endpoints."""

import logging
from datetime import UTC, datetime
from typing import Annotated

from fastapi import APIRouter, Depends, Header, Query, status
from fastapi.responses import JSONResponse
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import get_current_admin, get_db
from app.config import settings
from app.core.security import verify_bearer_secret
from app.models.assignment import AssignmentRun
from app.models.profile import Profile
from app.schemas.assignment import AssignmentRunResponse, AutoAssignResponse
from app.services.assignment_service import assignment_service

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/auto-assign", response_model=AutoAssignResponse)
async def run_auto_assign(
    db: Annotated[AsyncSession, Depends(get_db)],
    authorization: str | None = Header(None),
):
    """Assign stale unassigned bookings to approved washers.

    Called by the external scheduler; protected by a shared bearer token
    when one is configured.
    """
    if not verify_bearer_secret(authorization, settings.scheduler_api_token):
        logger.warning("Rejected auto-assign trigger with invalid credentials")
        return JSONResponse(
            status_code=status.HTTP_401_UNAUTHORIZED,
            content={"success": False, "error": "Unauthorized"},
        )

    try:
        summary, run = await assignment_service.run_and_record(db, trigger="http")
    except Exception:
        logger.exception("Auto-assignment job failed")
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={
                "success": False,
                "error": "Internal server error",
                "message": "Failed to run auto-assignment job",
            },
        )

    data = summary.to_dict()
    message = data.pop("message")
    data["run_id"] = run.id
    return {"success": True, "data": data, "message": message}


@router.get("/auto-assign")
async def auto_assign_health() -> dict:
    """Liveness check for the scheduler integration."""
    return {
        "status": "ok",
        "message": "Auto-assignment endpoint is running",
        "timestamp": datetime.now(UTC).isoformat(),
    }


@router.get("/auto-assign/history", response_model=list[AssignmentRunResponse])
async def get_auto_assign_history(
    admin: Annotated[Profile, Depends(get_current_admin)],
    db: Annotated[AsyncSession, Depends(get_db)],
    limit: int = Query(10, ge=1, le=100),
) -> list[AssignmentRun]:
    """Get recent auto-assignment runs (admin only)."""
    result = await db.execute(
        select(AssignmentRun)
        .order_by(AssignmentRun.started_at.desc())
        .limit(limit)
    )
    return list(result.scalars().all())
