"""Referral endpoints."""

from typing import Annotated

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import get_current_user, get_db
from app.models.profile import Profile
from app.schemas.referral import ReferralCodeResponse
from app.services.referral_service import referral_service

router = APIRouter()


@router.get("/me", response_model=ReferralCodeResponse)
async def get_my_referral_code(
    current_user: Annotated[Profile, Depends(get_current_user)],
    db: Annotated[AsyncSession, Depends(get_db)],
) -> ReferralCodeResponse:
    """Get the caller's referral code, creating it on first use."""
    code = await referral_service.get_or_create_code(db, current_user.id)
    return ReferralCodeResponse(code=code)
