"""
Identity token handling.

Sessions are owned by the external identity provider. It issues signed JWT
access tokens carrying the user's stable id ("sub") plus optional email and
first name; this module verifies those tokens and turns them into an
Identity.

This module provides:
- The Identity value (display name and authorship alias set)
- JWT token generation (used by the identity provider and tests)
- JWT token verification
"""

from datetime import UTC, datetime, timedelta

import jwt
from pydantic import BaseModel, ConfigDict

from threadline.config import ANONYMOUS_DISPLAY_NAME, settings


class Identity(BaseModel):
    """Authenticated user as supplied by the identity provider."""

    model_config = ConfigDict(frozen=True)

    user_id: str
    email: str | None = None
    first_name: str | None = None

    @property
    def display_name(self) -> str:
        """Name recorded as author of new content: first name, email, then anonymous."""
        return self.first_name or self.email or ANONYMOUS_DISPLAY_NAME

    @property
    def aliases(self) -> frozenset[str]:
        """
        Every string that proves authorship for this user.

        author_username was historically populated from different claims
        (user id, email, first name, or the first-name-or-email fallback),
        so ownership is a set-membership test against all of them.
        """
        candidates = [
            self.user_id,
            self.email,
            self.first_name,
            self.first_name or self.email,
        ]
        return frozenset(alias for alias in candidates if alias)

    def owns(self, author_username: str | None) -> bool:
        """Check whether content recorded under author_username belongs to this user."""
        return bool(author_username) and author_username in self.aliases


def create_access_token(identity: Identity, expires_delta: timedelta | None = None) -> str:
    """
    Create a JWT access token for an identity.

    Args:
        identity: The identity to encode in the token
        expires_delta: Optional custom expiration time (defaults to settings.ACCESS_TOKEN_EXPIRE_MINUTES)

    Returns:
        Encoded JWT token string
    """
    if expires_delta is None:
        expires_delta = timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)

    expire = datetime.now(UTC) + expires_delta

    payload: dict[str, object] = {
        "sub": identity.user_id,
        "exp": expire,
        "type": "access",
    }
    if identity.email:
        payload["email"] = identity.email
    if identity.first_name:
        payload["first_name"] = identity.first_name

    return jwt.encode(payload, settings.SECRET_KEY, algorithm=settings.ALGORITHM)


def verify_access_token(token: str) -> Identity | None:
    """
    Verify and decode a JWT access token.

    Args:
        token: The JWT token to verify

    Returns:
        Identity if token is valid, None otherwise
    """
    try:
        payload = jwt.decode(
            token,
            settings.SECRET_KEY,
            algorithms=[settings.ALGORITHM],
            options={"verify_exp": True, "verify_signature": True},
        )
    except jwt.ExpiredSignatureError:
        return None
    except jwt.InvalidTokenError:
        # Bad signature, malformed token, or missing required claims
        return None

    if payload.get("type") != "access":
        return None

    user_id = payload.get("sub")
    if not user_id:
        return None

    return Identity(
        user_id=str(user_id),
        email=payload.get("email") or None,
        first_name=payload.get("first_name") or None,
    )
