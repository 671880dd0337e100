"""Handover PIN generation utilities."""

import secrets

PIN_LENGTH = 4


def generate_pin() -> str:
    """Generate a 4-digit handover PIN.

    Returns:
        str: PIN in the range 1000-9999, e.g. '4821'
    """
    return str(1000 + secrets.randbelow(9000))


def generate_handover_pins() -> tuple[str, str]:
    """Generate distinct collection and delivery PINs.

    Returns:
        tuple[str, str]: (collection_pin, delivery_pin), never equal
    """
    collection_pin = generate_pin()
    delivery_pin = generate_pin()
    while delivery_pin == collection_pin:
        delivery_pin = generate_pin()
    return collection_pin, delivery_pin
