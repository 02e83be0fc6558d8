"""
Domain errors raised by the service layer.

Each error is an HTTPException so FastAPI renders it directly as
{"detail": ...} with the matching status code.
"""

from fastapi import HTTPException, status


class ValidationError(HTTPException):
    """Malformed input: bad vote target, vote type, or missing text."""

    def __init__(self, detail: str) -> None:
        super().__init__(status_code=status.HTTP_400_BAD_REQUEST, detail=detail)


class NotFoundError(HTTPException):
    """Referenced post, comment, subreddit or parent does not exist."""

    def __init__(self, detail: str) -> None:
        super().__init__(status_code=status.HTTP_404_NOT_FOUND, detail=detail)


class AuthorizationError(HTTPException):
    """Identity does not match any alias recorded for the content's author."""

    def __init__(self, detail: str) -> None:
        super().__init__(status_code=status.HTTP_403_FORBIDDEN, detail=detail)


class ConflictError(HTTPException):
    """Uniqueness constraint still violated after the allowed retry."""

    def __init__(self, detail: str) -> None:
        super().__init__(status_code=status.HTTP_409_CONFLICT, detail=detail)
