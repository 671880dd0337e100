"""Custom validation utilities."""

import re
from collections.abc import Mapping
from typing import Any

from app.utils.pins import PIN_LENGTH

PIN_PATTERN = re.compile(rf"^[0-9]{{{PIN_LENGTH}}}$")


def validate_pin(pin: str) -> bool:
    """Validate handover PIN format.

    Args:
        pin: PIN submitted by the washer

    Returns:
        bool: True if the PIN is exactly four digits
    """
    return bool(PIN_PATTERN.match(pin or ""))


def parse_booking_id(metadata: Mapping[str, Any] | None) -> int | None:
    """Extract a booking id from payment session metadata.

    Checkout sessions carry ``bookingId``; ``booking_id`` is accepted too.
    Stripe stores metadata values as strings.

    Args:
        metadata: Session metadata mapping

    Returns:
        int | None: Positive booking id, or None if missing or malformed
    """
    if not metadata:
        return None

    raw = metadata.get("bookingId") or metadata.get("booking_id")
    if raw is None:
        return None

    value = str(raw).strip()
    if not (value.isascii() and value.isdigit()):
        return None

    booking_id = int(value)
    return booking_id if booking_id > 0 else None
