"""
Core Utilities.

Shared utility functions used across the package.
All modules should import time helpers from this module.
"""

from datetime import datetime, timedelta, timezone

EPOCH = datetime(1970, 1, 1)
_ONE_MS = timedelta(milliseconds=1)


def normalize_timestamp(value: datetime) -> datetime:
    """
    Bring a datetime into the application's canonical form.

    Aware values are converted to UTC and made naive; naive values are
    taken as UTC already. The result is truncated to milliseconds.
    """
    if value.tzinfo is not None:
        value = value.astimezone(timezone.utc).replace(tzinfo=None)
    return value.replace(microsecond=value.microsecond - value.microsecond % 1000)


def utc_now() -> datetime:
    """
    Return current UTC time as timezone-naive datetime.

    All datetime values in the application are timezone-naive and assumed
    to be UTC. The value is truncated to millisecond resolution so it
    survives the millisecond epoch encoding used by the store unchanged.

    Returns:
        Current UTC time with tzinfo stripped, truncated to milliseconds
    """
    return normalize_timestamp(datetime.now(timezone.utc))


def to_epoch_ms(value: datetime) -> int:
    """Convert a datetime to integer milliseconds since the Unix epoch."""
    return (normalize_timestamp(value) - EPOCH) // _ONE_MS


def from_epoch_ms(value: int) -> datetime:
    """Convert integer milliseconds since the Unix epoch to a naive UTC datetime."""
    return EPOCH + timedelta(milliseconds=value)
