"""Shared utilities used across the scheduling engine.

Time helpers work on local wall-clock minutes since midnight with no
date or timezone component.
"""

from datetime import date, datetime


def time_to_minutes(value: str) -> int:
    """Convert an ``HH:mm`` string to minutes since midnight.

    Only the first five characters are read, so database ``HH:mm:ss``
    values work too. Raises ``ValueError`` on malformed input.

    Examples:
        >>> time_to_minutes("09:30")
        570
        >>> time_to_minutes("10:00:00")
        600
    """
    hours, minutes = value.strip()[:5].split(":")
    return int(hours) * 60 + int(minutes)


def minutes_to_time(minutes: int) -> str:
    """Convert minutes since midnight to a zero-padded ``HH:mm`` string.

    Examples:
        >>> minutes_to_time(570)
        '09:30'
        >>> minutes_to_time(0)
        '00:00'
    """
    hours, mins = divmod(minutes, 60)
    return f"{hours:02d}:{mins:02d}"


def coerce_date(value) -> date:
    """Accept a ``date``, a ``datetime`` or an ISO ``yyyy-MM-dd`` string."""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    return date.fromisoformat(value.strip())
