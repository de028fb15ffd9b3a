"""
Slot suggestion for a professional's day.

Walks a fixed grid of candidate start times inside the business-hours
window, keeps those that do not overlap a booking or a time block, and
ranks them by distance from the time the client asked for.
"""

from datetime import date, datetime
from typing import Any, Iterable, Mapping, Optional, Union

from barbershop_scheduling.config import settings
from barbershop_scheduling.logging_context import get_request_logger
from barbershop_scheduling.scheduling.validation import is_time_in_past
from barbershop_scheduling.schemas.appointment_schema import (
    BusinessHours,
    ExistingBooking,
    TimeBlock,
)
from barbershop_scheduling.utils import coerce_date, minutes_to_time, time_to_minutes

logger = get_request_logger(__name__)

BookingInput = Union[ExistingBooking, Mapping[str, Any]]
BlockInput = Union[TimeBlock, Mapping[str, Any]]


def as_existing_bookings(bookings: Iterable[BookingInput]) -> list[ExistingBooking]:
    """Accept storage rows or ready-made snapshots; keeps input order."""
    return [
        b if isinstance(b, ExistingBooking) else ExistingBooking.model_validate(b)
        for b in bookings
    ]


def booking_interval(
    booking: ExistingBooking, default_duration: Optional[int] = None
) -> tuple[int, int, bool]:
    """
    Occupied ``[start, end)`` minutes of a booking.

    The third element is True when the joined service duration was missing
    and ``default_duration`` was used instead.
    """
    if default_duration is None:
        default_duration = settings.scheduling.default_duration_minutes
    start = time_to_minutes(booking.start_time)
    duration = booking.joined_duration
    if duration is None:
        return start, start + default_duration, True
    return start, start + duration, False


def overlaps(start_a: int, end_a: int, start_b: int, end_b: int) -> bool:
    """Half-open overlap: touching intervals do not overlap."""
    return start_a < end_b and end_a > start_b


def _occupied_intervals(
    bookings: list[ExistingBooking],
    target_date: date,
    blocked_intervals: Iterable[BlockInput],
) -> list[tuple[int, int]]:
    occupied = []
    for booking in bookings:
        if booking.booking_date != target_date or booking.is_cancelled:
            continue
        try:
            occupied.append(booking_interval(booking)[:2])
        except ValueError:
            # Cannot block anything without a readable start time.
            logger.warning(
                "Booking %s has unreadable time %r, ignored for slot search",
                booking.id, booking.booking_time,
            )
    for block in blocked_intervals:
        if not isinstance(block, TimeBlock):
            block = TimeBlock.model_validate(block)
        occupied.append(block.interval)
    return sorted(occupied)


def find_available_slots(
    existing_bookings: Iterable[BookingInput],
    date: Union[date, str],
    duration_minutes: int,
    preferred_time: str,
    open_hour: Optional[int] = None,
    close_hour: Optional[int] = None,
    business_hours: Optional[BusinessHours] = None,
    max_results: Optional[int] = None,
    blocked_intervals: Optional[Iterable[BlockInput]] = None,
    skip_past: bool = False,
    now: Optional[datetime] = None,
) -> list[str]:
    """
    Find open start times on ``date`` closest to ``preferred_time``.

    Candidates sit on the business-hours grid (every 30 minutes by
    default) and must end by closing time. Cancelled bookings never occupy
    time. Ties in distance keep the earlier candidate first.

    Args:
        existing_bookings: snapshots (or storage rows) for the professional.
        date: day to search.
        duration_minutes: length of the appointment to place.
        preferred_time: ``HH:mm`` the client asked for.
        open_hour / close_hour: window override when ``business_hours`` is
            not given; configured defaults otherwise.
        business_hours: the barbershop's hours; wins over open/close_hour.
        max_results: suggestion cap, configured default otherwise.
        blocked_intervals: the professional's time blocks on ``date``
            (``TimeBlock`` or mappings with ``start_time``/``end_time``);
            they occupy time like bookings.
        skip_past: when ``date`` is today, drop start times that have
            already passed.
        now: clock used by ``skip_past``; local time by default.

    Returns:
        Up to ``max_results`` ``HH:mm`` strings ordered by proximity.
    """
    target_date = coerce_date(date)
    if business_hours is None:
        business_hours = BusinessHours(
            open_hour=settings.scheduling.open_hour if open_hour is None else open_hour,
            close_hour=settings.scheduling.close_hour if close_hour is None else close_hour,
        )
    if max_results is None:
        max_results = settings.scheduling.max_suggestions

    occupied = _occupied_intervals(
        as_existing_bookings(existing_bookings), target_date, blocked_intervals or ()
    )

    window_start = business_hours.open_hour * 60
    last_start = business_hours.close_hour * 60 - duration_minutes
    available = [
        minutes
        for minutes in range(window_start, last_start + 1, business_hours.slot_increment_minutes)
        if not any(
            overlaps(minutes, minutes + duration_minutes, start, end)
            for start, end in occupied
        )
    ]
    if skip_past:
        available = [
            minutes
            for minutes in available
            if not is_time_in_past(target_date, minutes_to_time(minutes), now)
        ]

    preferred = time_to_minutes(preferred_time)
    available.sort(key=lambda minutes: abs(minutes - preferred))

    logger.debug(
        "Slot search on %s: %d occupied, %d open, preferred %s",
        target_date, len(occupied), len(available), preferred_time,
    )
    return [minutes_to_time(m) for m in available[:max_results]]
