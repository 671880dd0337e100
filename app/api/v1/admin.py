"""Admin panel endpoints."""

from typing import Annotated, Literal

from fastapi import APIRouter, Depends, Query
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import get_current_admin, get_db
from app.models.profile import Profile, WasherApplication
from app.schemas.washer import (
    ActionResult,
    ApplicationStatusUpdate,
    WasherApplicationResponse,
)
from app.services.washer_service import washer_service

router = APIRouter()


# ============ WASHER APPLICATIONS ============


@router.get("/washer-applications", response_model=list[WasherApplicationResponse])
async def list_washer_applications(
    admin: Annotated[Profile, Depends(get_current_admin)],
    db: Annotated[AsyncSession, Depends(get_db)],
    status_filter: Literal["pending", "approved", "rejected"] | None = Query(
        None, alias="status"
    ),
) -> list[WasherApplication]:
    """List washer applications, oldest first."""
    query = select(WasherApplication).order_by(WasherApplication.created_at.asc())
    if status_filter:
        query = query.where(WasherApplication.status == status_filter)

    result = await db.execute(query)
    return list(result.scalars().all())


@router.post(
    "/washer-applications/{application_id}/status",
    response_model=ActionResult,
    response_model_exclude_none=True,
)
async def update_washer_application_status(
    application_id: int,
    data: ApplicationStatusUpdate,
    admin: Annotated[Profile, Depends(get_current_admin)],
    db: Annotated[AsyncSession, Depends(get_db)],
) -> dict:
    """Approve or reject a washer application and update the applicant's profile."""
    return await washer_service.update_application_status(
        db,
        application_id=application_id,
        user_id=data.user_id,
        new_status=data.status,
    )
