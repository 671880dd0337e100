"""Core utilities and security modules."""

from app.core.exceptions import (
    AppException,
    AuthenticationError,
    AuthorizationError,
    BadRequestError,
    ExternalServiceError,
    InvalidBookingStatus,
    NotFoundError,
    PaymentError,
    ValidationError,
    WebhookError,
)
from app.core.security import verify_bearer_secret, verify_token

__all__ = [
    "AppException",
    "AuthenticationError",
    "AuthorizationError",
    "BadRequestError",
    "ExternalServiceError",
    "InvalidBookingStatus",
    "NotFoundError",
    "PaymentError",
    "ValidationError",
    "WebhookError",
    "verify_bearer_secret",
    "verify_token",
]
