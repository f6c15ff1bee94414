"""
Date Formatting.

Human-readable timestamps for note lists and the editor header. Output is
English and independent of the process locale.
"""

from datetime import datetime

from noteprompt.core.utils import utc_now

_MONTHS = (
    "January", "February", "March", "April", "May", "June",
    "July", "August", "September", "October", "November", "December",
)


def _plural(count: int, unit: str) -> str:
    return f"{count} {unit if count == 1 else unit + 's'}"


def format_time(date: datetime) -> str:
    """Format time only, e.g. "3:45 PM"."""
    hour = date.hour % 12 or 12
    meridiem = "AM" if date.hour < 12 else "PM"
    return f"{hour}:{date.minute:02d} {meridiem}"


def format_for_display(date: datetime) -> str:
    """Format a date for the note list, e.g. "Jan 15, 2024"."""
    return f"{_MONTHS[date.month - 1][:3]} {date.day}, {date.year}"


def format_full(date: datetime) -> str:
    """Format a date with full details, e.g. "January 15, 2024 3:45 PM"."""
    return f"{_MONTHS[date.month - 1]} {date.day}, {date.year} {format_time(date)}"


def format_relative(date: datetime, now: datetime | None = None) -> str:
    """
    Format a timestamp relative to now.

    Args:
        date: Naive UTC timestamp to describe
        now: Reference time; defaults to the current UTC time

    Returns:
        "Just now", "N minutes ago", "N hours ago", "Yesterday",
        "N days ago", or the display date once a week has passed
    """
    reference = now if now is not None else utc_now()
    difference = reference - date

    if difference.days == 0:
        hours = difference.seconds // 3600
        minutes = difference.seconds // 60
        if hours == 0:
            if minutes == 0:
                return "Just now"
            return _plural(minutes, "minute") + " ago"
        return _plural(hours, "hour") + " ago"
    if difference.days == 1:
        return "Yesterday"
    if 1 < difference.days < 7:
        return f"{difference.days} days ago"
    return format_for_display(date)
