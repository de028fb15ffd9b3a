"""
Conflict detection for a proposed appointment.

Checks the requested interval against a professional's existing bookings
for the day. The first overlapping booking in input order is reported,
together with alternative start times; callers that want the earliest
conflict must pass bookings sorted by start time.

The check is pure. It does not protect against two concurrent bookings
reading the same stale snapshot; storage has to serialize
read-check-write per professional and day.
"""

from datetime import date, datetime
from typing import Iterable, Optional, Union

from barbershop_scheduling.config import settings
from barbershop_scheduling.logging_context import get_request_logger
from barbershop_scheduling.scheduling.slots import (
    BlockInput,
    BookingInput,
    as_existing_bookings,
    booking_interval,
    find_available_slots,
    overlaps,
)
from barbershop_scheduling.schemas.appointment_schema import (
    BookingWarning,
    BusinessHours,
    ConflictingAppointment,
    ConflictResult,
)
from barbershop_scheduling.utils import coerce_date, minutes_to_time, time_to_minutes

logger = get_request_logger(__name__)


def check_conflicts(
    professional_id: str,
    date: Union[date, str],
    start_time: str,
    duration_minutes: int,
    existing_bookings: Iterable[BookingInput],
    exclude_booking_id: Optional[str] = None,
    business_hours: Optional[BusinessHours] = None,
    blocked_intervals: Optional[Iterable[BlockInput]] = None,
    skip_past: bool = False,
    now: Optional[datetime] = None,
) -> ConflictResult:
    """
    Check whether ``start_time`` + ``duration_minutes`` collides with an
    existing booking on ``date``.

    Cancelled bookings and ``exclude_booking_id`` (the booking being
    edited) are ignored. Bookings without a joined service duration count
    as the configured default and are reported in ``warnings``.
    ``blocked_intervals``, ``skip_past`` and ``now`` only shape the
    suggested slots (see ``find_available_slots``).

    ``start_time`` must already be validated; malformed values raise
    ``ValueError``. Rows after the first conflict are never read.
    """
    target_date = coerce_date(date)
    bookings = as_existing_bookings(existing_bookings)
    default_duration = settings.scheduling.default_duration_minutes

    new_start = time_to_minutes(start_time)
    new_end = new_start + duration_minutes

    checked = 0
    warnings: list[BookingWarning] = []
    for booking in bookings:
        if (
            booking.booking_date != target_date
            or booking.is_cancelled
            or booking.id == exclude_booking_id
        ):
            continue
        start, end, fell_back = booking_interval(booking, default_duration)
        if fell_back:
            logger.warning(
                "Booking %s has no service duration, assuming %d minutes",
                booking.id, default_duration,
            )
            warnings.append(
                BookingWarning(
                    booking_id=booking.id,
                    message=f"Service duration missing, assumed {default_duration} minutes",
                )
            )
        checked += 1
        if not overlaps(new_start, new_end, start, end):
            continue

        logger.info(
            "Conflict for professional %s on %s at %s: overlaps booking %s (%s-%s)",
            professional_id, target_date, start_time,
            booking.id, booking.start_time, minutes_to_time(end),
        )
        suggested = find_available_slots(
            bookings,
            target_date,
            duration_minutes,
            start_time,
            business_hours=business_hours,
            blocked_intervals=blocked_intervals,
            skip_past=skip_past,
            now=now,
        )
        return ConflictResult(
            has_conflict=True,
            conflicting_appointment=ConflictingAppointment(
                id=booking.id,
                start_time=booking.start_time,
                end_time=minutes_to_time(end),
                client_name=(booking.client.name if booking.client else None) or None,
                service_name=(booking.service.name if booking.service else None) or None,
            ),
            suggested_slots=suggested,
            warnings=warnings,
        )

    logger.debug(
        "No conflict for professional %s on %s at %s (%d bookings checked)",
        professional_id, target_date, start_time, checked,
    )
    return ConflictResult(has_conflict=False, warnings=warnings)
