"""Pydantic schemas for API validation."""

from app.schemas.assignment import (
    AssignmentRunData,
    AssignmentRunResponse,
    AutoAssignResponse,
)
from app.schemas.booking import (
    BookingCreate,
    BookingCreateResult,
    BookingResponse,
    CheckoutSessionResponse,
    PinVerificationRequest,
    PriceQuote,
    ServiceSelection,
)
from app.schemas.referral import ReferralCodeResponse
from app.schemas.washer import (
    AccountStatusResponse,
    ActionResult,
    ApplicationStatusUpdate,
    WasherApplicationResponse,
)

__all__ = [
    # Assignment
    "AssignmentRunData",
    "AssignmentRunResponse",
    "AutoAssignResponse",
    # Booking
    "BookingCreate",
    "BookingCreateResult",
    "BookingResponse",
    "CheckoutSessionResponse",
    "PinVerificationRequest",
    "PriceQuote",
    "ServiceSelection",
    # Referral
    "ReferralCodeResponse",
    # Washer
    "AccountStatusResponse",
    "ActionResult",
    "ApplicationStatusUpdate",
    "WasherApplicationResponse",
]
