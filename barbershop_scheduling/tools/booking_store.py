"""
In-memory booking store.

Stands in for the bookings table: it composes validation and the
conflict check into create/reschedule operations. Each professional/day
is serialized by a lock held across read-check-write, so two concurrent
requests for the same slot cannot both pass the conflict check. Locks come
from a fixed pool keyed by hash, so memory stays flat however many days
are booked; unrelated days that share a lock only wait on each other. A real
database needs the equivalent (a uniqueness constraint or a per-day
advisory lock).
"""

import threading
import uuid
from contextlib import ExitStack, contextmanager
from datetime import date, datetime, timezone
from decimal import Decimal
from typing import Any, Iterator, Mapping, Optional, TypedDict, Union

from barbershop_scheduling.logging_context import booking_context, get_request_logger
from barbershop_scheduling.scheduling.conflicts import check_conflicts
from barbershop_scheduling.scheduling.validation import validate_appointment
from barbershop_scheduling.schemas.appointment_schema import (
    AppointmentDraft,
    AppointmentStatus,
    BookedClient,
    BookedService,
    BusinessHours,
    ConflictResult,
    ExistingBooking,
    ValidationError,
)
from barbershop_scheduling.tools.clients import lookup_client
from barbershop_scheduling.tools.services import get_service_details
from barbershop_scheduling.utils import coerce_date

logger = get_request_logger(__name__)

DAY_LOCK_POOL_SIZE = 64


class BookingRecord(TypedDict):
    """Full booking row stored in the system."""

    id: str
    client_id: str
    professional_id: str
    service_id: str
    booking_date: str
    booking_time: str
    duration_minutes: int
    price: Decimal
    notes: str
    status: str
    send_notification: bool
    created_at: str
    updated_at: str


class BookingResult(TypedDict, total=False):
    """Result from create_booking, cancel_booking or reschedule_booking."""

    success: bool
    message: str
    booking_id: str
    details: BookingRecord
    errors: list[ValidationError]
    conflict: ConflictResult

_bookings: dict[str, BookingRecord] = {}
_day_locks = [threading.Lock() for _ in range(DAY_LOCK_POOL_SIZE)]


def _day_lock_slots(professional_id: str, *days: str) -> list[int]:
    """Pool indexes guarding the given days, deduplicated and ascending."""
    return sorted({hash((professional_id, day)) % DAY_LOCK_POOL_SIZE for day in days})


@contextmanager
def _locked_days(professional_id: str, *days: str) -> Iterator[None]:
    # Ascending pool order prevents deadlock between two cross-day moves.
    with ExitStack() as stack:
        for slot in _day_lock_slots(professional_id, *days):
            stack.enter_context(_day_locks[slot])
        yield


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


def _snapshot(record: BookingRecord) -> ExistingBooking:
    """Join service and client display data onto a stored row."""
    service = get_service_details(record["service_id"])
    client = lookup_client(record["client_id"])
    return ExistingBooking(
        id=record["id"],
        booking_time=record["booking_time"],
        booking_date=record["booking_date"],
        status=record["status"],
        service=BookedService(
            duration_minutes=record["duration_minutes"],
            name=service["name"] if service else None,
        ),
        client=BookedClient(name=client["name"]) if client else None,
    )


def get_bookings_for_day(
    professional_id: str, booking_date: Union[date, str]
) -> list[ExistingBooking]:
    """All bookings of a professional on a day, in creation order."""
    day = coerce_date(booking_date).isoformat()
    return [
        _snapshot(record)
        for record in _bookings.values()
        if record["professional_id"] == professional_id and record["booking_date"] == day
    ]


def create_booking(
    draft: Union[AppointmentDraft, Mapping[str, Any]],
    business_hours: Optional[BusinessHours] = None,
) -> BookingResult:
    """Validate, conflict-check and store a new booking."""
    validation = validate_appointment(draft)
    if not validation.is_valid:
        return {
            "success": False,
            "message": "; ".join(e.message for e in validation.errors),
            "errors": validation.errors,
        }
    if not isinstance(draft, AppointmentDraft):
        draft = AppointmentDraft.model_validate(dict(draft))

    service = get_service_details(draft.service_id)
    if service is None:
        return {"success": False, "message": f"Serviço {draft.service_id} não encontrado"}

    duration = draft.duration or service["duration_minutes"]
    price = draft.price if draft.price is not None else service["price"]
    day = draft.date.isoformat()

    with booking_context(draft.professional_id, day), _locked_days(draft.professional_id, day):
        conflict = check_conflicts(
            draft.professional_id,
            draft.date,
            draft.start_time,
            duration,
            get_bookings_for_day(draft.professional_id, day),
            business_hours=business_hours,
        )
        if conflict.has_conflict:
            existing = conflict.conflicting_appointment
            return {
                "success": False,
                "message": (
                    f"Horário indisponível: conflito com agendamento das "
                    f"{existing.start_time} às {existing.end_time}"
                ),
                "conflict": conflict,
            }

        booking_id = f"BK-{uuid.uuid4().hex[:8].upper()}"
        timestamp = _now()
        record: BookingRecord = {
            "id": booking_id,
            "client_id": draft.client_id,
            "professional_id": draft.professional_id,
            "service_id": service["id"],
            "booking_date": day,
            "booking_time": draft.start_time,
            "duration_minutes": duration,
            "price": price,
            "notes": draft.notes or "",
            "status": (draft.status or AppointmentStatus.CONFIRMED).value,
            "send_notification": bool(draft.send_notification),
            "created_at": timestamp,
            "updated_at": timestamp,
        }
        _bookings[booking_id] = record
        logger.info(
            "Booking created: %s for professional %s on %s at %s",
            booking_id, draft.professional_id, day, draft.start_time,
        )

    return {
        "success": True,
        "booking_id": booking_id,
        "message": f"Agendamento confirmado para {day} às {draft.start_time}.",
        "details": record,
    }


def cancel_booking(booking_id: str) -> BookingResult:
    """Cancel a booking; its time becomes free immediately."""
    record = _bookings.get(booking_id)
    if record is None:
        return {"success": False, "message": f"Agendamento {booking_id} não encontrado."}
    with _locked_days(record["professional_id"], record["booking_date"]):
        record["status"] = AppointmentStatus.CANCELLED.value
        record["updated_at"] = _now()
    logger.info("Booking cancelled: %s", booking_id)
    return {"success": True, "booking_id": booking_id, "message": f"Agendamento {booking_id} cancelado."}


def _cancelled(booking_id: str) -> BookingResult:
    return {
        "success": False,
        "booking_id": booking_id,
        "message": f"Agendamento {booking_id} cancelado não pode ser reagendado.",
    }


def reschedule_booking(
    booking_id: str,
    new_date: Union[date, str],
    new_time: str,
    business_hours: Optional[BusinessHours] = None,
) -> BookingResult:
    """Move a booking; it never conflicts with its own previous slot."""
    record = _bookings.get(booking_id)
    if record is None:
        return {"success": False, "message": f"Agendamento {booking_id} não encontrado."}
    if record["status"] == AppointmentStatus.CANCELLED.value:
        return _cancelled(booking_id)

    validation = validate_appointment(
        {
            "client_id": record["client_id"],
            "professional_id": record["professional_id"],
            "service_id": record["service_id"],
            "date": new_date,
            "start_time": new_time,
            "duration": record["duration_minutes"],
            "price": record["price"],
        }
    )
    if not validation.is_valid:
        return {
            "success": False,
            "message": "; ".join(e.message for e in validation.errors),
            "errors": validation.errors,
        }

    professional_id = record["professional_id"]
    day = coerce_date(new_date).isoformat()
    with booking_context(professional_id, day), _locked_days(
        professional_id, record["booking_date"], day
    ):
        if record["status"] == AppointmentStatus.CANCELLED.value:
            return _cancelled(booking_id)
        conflict = check_conflicts(
            record["professional_id"],
            day,
            new_time,
            record["duration_minutes"],
            get_bookings_for_day(record["professional_id"], day),
            exclude_booking_id=booking_id,
            business_hours=business_hours,
        )
        if conflict.has_conflict:
            return {
                "success": False,
                "booking_id": booking_id,
                "message": "Horário indisponível para reagendamento.",
                "conflict": conflict,
            }
        record.update(booking_date=day, booking_time=new_time, updated_at=_now())
        logger.info("Booking rescheduled: %s to %s %s", booking_id, day, new_time)

    return {
        "success": True,
        "booking_id": booking_id,
        "message": f"Agendamento {booking_id} reagendado para {day} às {new_time}.",
        "details": record,
    }


def get_booking(booking_id: str) -> Optional[BookingRecord]:
    """Retrieve a booking by ID."""
    return _bookings.get(booking_id)


def reset() -> None:
    """Clear all bookings. Used by test fixtures for isolation."""
    _bookings.clear()
