"""Auto-assignment job schemas."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict


class BookingAssignmentResultSchema(BaseModel):
    booking_id: int
    outcome: str
    success: bool
    washer_id: str | None = None
    reason: str | None = None


class AssignmentRunData(BaseModel):
    """Summary returned to the scheduler."""

    run_id: UUID | None = None
    duration_ms: int
    errors: list[str]
    total_processed: int
    assigned: int
    skipped: int
    errored: int
    results: list[BookingAssignmentResultSchema]


class AutoAssignResponse(BaseModel):
    success: bool
    data: AssignmentRunData
    message: str


class AssignmentRunResponse(BaseModel):
    """Persisted scheduler run."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    trigger: str
    total_processed: int
    assigned: int
    skipped: int
    errored: int
    started_at: datetime
    completed_at: datetime
    duration_ms: int
    error_message: str | None
