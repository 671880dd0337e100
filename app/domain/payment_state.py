"""Payment state machine."""

from app.core.exceptions import ValidationError

PAYMENT_TRANSITIONS = {
    "pending": {"paid", "failed"},
    "failed": {"paid"},
    "paid": {"refunded"},
    "refunded": set(),
}


def assert_payment_transition(current: str, target: str) -> None:
    allowed = PAYMENT_TRANSITIONS.get(current, set())
    if target not in allowed:
        raise ValidationError(
            f"Invalid payment transition: {current} → {target}"
        )


def statuses_leading_to(target: str) -> set[str]:
    """All payment statuses from which ``target`` is reachable in one step."""
    return {current for current, allowed in PAYMENT_TRANSITIONS.items() if target in allowed}
