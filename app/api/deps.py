"""API dependencies for authentication and common operations."""

from typing import Annotated
from uuid import UUID

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import AuthenticationError, AuthorizationError
from app.core.security import verify_token
from app.database import get_db
from app.domain.washer_state import can_access_washer_features
from app.gateways.base import PaymentGateway
from app.gateways.stripe_gateway import StripeGateway
from app.models.profile import Profile

__all__ = [
    "get_current_admin",
    "get_current_user",
    "get_current_washer",
    "get_db",
    "get_payment_gateway",
]

# Security scheme
security = HTTPBearer(auto_error=False)


async def get_current_user(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(security)],
    db: Annotated[AsyncSession, Depends(get_db)],
) -> Profile:
    """Get the profile of the caller from the access token."""
    if credentials is None:
        raise AuthenticationError("Not authenticated")

    payload = verify_token(credentials.credentials)
    user_id = payload.get("sub")
    if not user_id:
        raise AuthenticationError("Invalid token payload")

    try:
        profile_id = UUID(user_id)
    except ValueError:
        raise AuthenticationError("Invalid token subject")

    result = await db.execute(select(Profile).where(Profile.id == profile_id))
    profile = result.scalar_one_or_none()

    if not profile:
        raise AuthenticationError("User not found")

    return profile


async def get_current_admin(
    current_user: Annotated[Profile, Depends(get_current_user)],
) -> Profile:
    """Get current user and verify they are an admin."""
    if current_user.role != "admin":
        raise AuthorizationError("Admin access required")
    return current_user


async def get_current_washer(
    current_user: Annotated[Profile, Depends(get_current_user)],
) -> Profile:
    """Get current user and verify they are an approved washer."""
    allowed, reason = can_access_washer_features(current_user)
    if not allowed:
        raise AuthorizationError(reason or "Washer access required")
    return current_user


def get_payment_gateway() -> PaymentGateway:
    """Payment gateway used by checkout and account endpoints."""
    return StripeGateway()
