"""Washer application and account schemas."""

from datetime import datetime
from typing import Literal
from uuid import UUID

from pydantic import BaseModel, ConfigDict


class ApplicationStatusUpdate(BaseModel):
    """Admin decision on a washer application."""

    user_id: UUID
    status: Literal["approved", "rejected"]


class ActionResult(BaseModel):
    """Outcome of an admin action: success flag or a one-line error."""

    success: bool | None = None
    error: str | None = None


class WasherApplicationResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    user_id: UUID
    status: str
    service_description: str | None
    experience: str | None
    created_at: datetime
    updated_at: datetime


class AccountStatusResponse(BaseModel):
    """Connected payout account state for a washer."""

    connected: bool
    account_status: str
    can_receive_payouts: bool
    charges_enabled: bool
    payouts_enabled: bool
