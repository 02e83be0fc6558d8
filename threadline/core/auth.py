"""
Authentication dependencies for FastAPI route protection.

This module provides dependency functions for:
- Extracting and verifying identity tokens from requests
- Protecting routes with authentication requirements
- Optional identity for endpoints that also serve anonymous users
"""

from typing import Annotated

from fastapi import Cookie, Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from threadline.core.logging import set_user_context
from threadline.core.security import Identity, verify_access_token

bearer_scheme = HTTPBearer(auto_error=False)


def _extract_token(
    access_token: str | None, credentials: HTTPAuthorizationCredentials | None
) -> str | None:
    """Prefer the Authorization header, fall back to the access_token cookie."""
    if credentials and credentials.credentials:
        return credentials.credentials
    return access_token


async def get_current_identity(
    access_token: Annotated[str | None, Cookie()] = None,
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(bearer_scheme)] = None,
) -> Identity:
    """
    Extract and verify the identity token.

    Raises:
        HTTPException: 401 if token is missing, invalid, or expired
    """
    token = _extract_token(access_token, credentials)
    if not token:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
            headers={"WWW-Authenticate": "Bearer"},
        )

    identity = verify_access_token(token)
    if identity is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Could not validate credentials",
            headers={"WWW-Authenticate": "Bearer"},
        )

    set_user_context(identity.user_id)
    return identity


async def get_optional_identity(
    access_token: Annotated[str | None, Cookie()] = None,
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(bearer_scheme)] = None,
) -> Identity | None:
    """
    Get the current identity if authenticated, otherwise None.

    Invalid or expired tokens are treated as anonymous rather than rejected.
    """
    token = _extract_token(access_token, credentials)
    if not token:
        return None

    identity = verify_access_token(token)
    if identity is not None:
        set_user_context(identity.user_id)
    return identity


CurrentIdentity = Annotated[Identity, Depends(get_current_identity)]
OptionalIdentity = Annotated[Identity | None, Depends(get_optional_identity)]
