"""Security utilities for authentication and authorization."""

import hmac
from typing import Any

from jose import JWTError, jwt

from app.config import settings
from app.core.exceptions import AuthenticationError


def verify_token(token: str) -> dict[str, Any]:
    """Verify and decode an access token issued by the auth provider."""
    try:
        options = {"verify_aud": settings.jwt_audience is not None}
        return jwt.decode(
            token,
            settings.supabase_jwt_secret,
            algorithms=[settings.jwt_algorithm],
            audience=settings.jwt_audience,
            options=options,
        )
    except JWTError as e:
        raise AuthenticationError(f"Token validation failed: {str(e)}")


def verify_bearer_secret(authorization: str | None, expected_token: str | None) -> bool:
    """Check an ``Authorization: Bearer <token>`` header against a shared secret.

    When no secret is configured every caller is accepted.
    """
    if not expected_token:
        return True
    if not authorization:
        return False
    return hmac.compare_digest(authorization, f"Bearer {expected_token}")
