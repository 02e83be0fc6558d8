"""Timestamp helpers."""

from datetime import UTC, datetime


def utc_now() -> datetime:
    """
    Current time as a timezone-aware UTC datetime.

    Every timestamp written by the service is UTC; the API serializes them
    with a Z suffix.
    """
    return datetime.now(UTC)
