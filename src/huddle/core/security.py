"""Session token handling for identity-provider issued JWTs."""
from __future__ import annotations

import time
from dataclasses import dataclass, field
from typing import Any

from jose import JWTError, jwt

from huddle.core.settings import settings


class InvalidSessionError(ValueError):
    """Raised when a session token cannot be verified."""


@dataclass(frozen=True)
class SessionClaims:
    """Verified claims extracted from a session token."""

    external_id: str
    onboarding_complete: bool = False
    metadata: dict[str, Any] = field(default_factory=dict)


def decode_session_token(token: str) -> SessionClaims:
    """Verify a session token and return its claims.

    Args:
        token: Encoded JWT as presented by the client.

    Returns:
        Parsed session claims.

    Raises:
        InvalidSessionError: If the signature, expiry or subject is invalid.
    """
    try:
        payload = jwt.decode(
            token,
            settings.auth_jwt_key,
            algorithms=[settings.auth_jwt_algorithm],
            options={"verify_aud": False},
        )
    except JWTError as err:
        raise InvalidSessionError("Could not validate credentials") from err

    subject = payload.get("sub")
    if not subject:
        raise InvalidSessionError("Token has no subject")

    metadata = payload.get("metadata") or {}
    if not isinstance(metadata, dict):
        metadata = {}
    return SessionClaims(
        external_id=str(subject),
        onboarding_complete=bool(metadata.get("onboardingComplete")),
        metadata=metadata,
    )


def create_session_token(
    external_id: str,
    *,
    onboarding_complete: bool = False,
    expires_in: int = 3600,
) -> str:
    """Issue a session token in the identity provider's claim layout.

    Used by local tooling and tests; production tokens come from the
    identity provider.
    """
    now = int(time.time())
    payload = {
        "sub": external_id,
        "iat": now,
        "exp": now + expires_in,
        "metadata": {"onboardingComplete": onboarding_complete},
    }
    return jwt.encode(payload, settings.auth_jwt_key, algorithm=settings.auth_jwt_algorithm)
