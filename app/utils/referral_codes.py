"""Referral code generation."""

import secrets
import string

REFERRAL_CODE_ALPHABET = string.ascii_uppercase + string.digits
REFERRAL_CODE_LENGTH = 6


def generate_referral_code(length: int = REFERRAL_CODE_LENGTH) -> str:
    """Generate an upper-case alphanumeric referral code, e.g. 'K7Q2ZD'."""
    return "".join(secrets.choice(REFERRAL_CODE_ALPHABET) for _ in range(length))


def normalize_referral_code(code: object) -> str | None:
    """Upper-case a submitted code; None for anything blank or non-text."""
    if not isinstance(code, str) or not code.strip():
        return None
    return code.strip().upper()
