"""Appointment, booking snapshot and scheduling result models."""

import datetime
from decimal import Decimal
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from pydantic.alias_generators import to_camel

from barbershop_scheduling.config import MINUTES_PER_DAY, settings
from barbershop_scheduling.utils import coerce_date, time_to_minutes


class AppointmentStatus(str, Enum):
    PENDING = "pending"
    CONFIRMED = "confirmed"
    CANCELLED = "cancelled"
    COMPLETED = "completed"


class AppointmentDraft(BaseModel):
    """
    Candidate appointment as filled in by a booking form.

    Every field is optional so a half-filled form can be validated.
    Accepts both snake_case names and the camelCase keys a web form sends.
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    client_id: Optional[str] = None
    professional_id: Optional[str] = None
    service_id: Optional[str] = None
    date: Optional[datetime.date] = None
    start_time: Optional[str] = None
    duration: Optional[int] = None
    price: Optional[Decimal] = None
    notes: Optional[str] = None
    status: Optional[AppointmentStatus] = None
    send_notification: Optional[bool] = None

    @field_validator("date", mode="before")
    @classmethod
    def _calendar_day(cls, value):
        # Forms may send a full timestamp; only the day matters.
        if isinstance(value, datetime.date):
            return coerce_date(value)
        return value


class BookedService(BaseModel):
    """Service columns joined onto an existing booking."""

    model_config = ConfigDict(frozen=True)

    duration_minutes: Optional[int] = None
    name: Optional[str] = None


class BookedClient(BaseModel):
    """Client columns joined onto an existing booking."""

    model_config = ConfigDict(frozen=True)

    name: Optional[str] = None


class ExistingBooking(BaseModel):
    """Read-only snapshot of a booking already recorded for a professional."""

    model_config = ConfigDict(frozen=True)

    id: str
    booking_time: str
    booking_date: datetime.date
    status: str
    service: Optional[BookedService] = None
    client: Optional[BookedClient] = None

    @field_validator("booking_date", mode="before")
    @classmethod
    def _calendar_day(cls, value):
        if isinstance(value, datetime.date):
            return coerce_date(value)
        return value

    @property
    def start_time(self) -> str:
        """Booking time truncated to ``HH:mm``."""
        return self.booking_time.strip()[:5]

    @property
    def is_cancelled(self) -> bool:
        return self.status == AppointmentStatus.CANCELLED.value

    @property
    def joined_duration(self) -> Optional[int]:
        """Service duration, or None when the join is missing or empty."""
        if self.service is None or not self.service.duration_minutes:
            return None
        return self.service.duration_minutes


class ValidationError(BaseModel):
    """A single field-level problem with an appointment draft."""

    field: str
    message: str


class ValidationResult(BaseModel):
    is_valid: bool
    errors: list[ValidationError] = Field(default_factory=list)


class ConflictingAppointment(BaseModel):
    """The existing booking that blocks the requested time."""

    id: str
    start_time: str
    end_time: str
    client_name: Optional[str] = None
    service_name: Optional[str] = None


class BookingWarning(BaseModel):
    """Data-quality notice about an existing booking, e.g. a missing duration."""

    booking_id: str
    message: str


class ConflictResult(BaseModel):
    """Outcome of a conflict check, with ranked alternatives on conflict."""

    has_conflict: bool
    conflicting_appointment: Optional[ConflictingAppointment] = None
    suggested_slots: list[str] = Field(default_factory=list)
    warnings: list[BookingWarning] = Field(default_factory=list)


class TimeBlock(BaseModel):
    """A professional's unavailable stretch on a day (lunch, break, day off).

    Times are ``HH:mm`` or ``HH:mm:ss`` as stored.
    """

    model_config = ConfigDict(frozen=True)

    start_time: str
    end_time: str
    title: Optional[str] = None

    @property
    def interval(self) -> tuple[int, int]:
        """Blocked ``[start, end)`` minutes."""
        return time_to_minutes(self.start_time), time_to_minutes(self.end_time)

    @model_validator(mode="after")
    def _check_order(self) -> "TimeBlock":
        start, end = self.interval
        if end <= start:
            raise ValueError(f"Time block ends before it starts: {self.start_time}-{self.end_time}")
        return self


class BusinessHours(BaseModel):
    """
    Daily window searched for open slots.

    Normally built from the barbershop's configured opening and closing
    times; falls back to the configured defaults.
    """

    model_config = ConfigDict(frozen=True)

    open_hour: int = Field(default_factory=lambda: settings.scheduling.open_hour)
    close_hour: int = Field(default_factory=lambda: settings.scheduling.close_hour)
    slot_increment_minutes: int = Field(
        default_factory=lambda: settings.scheduling.slot_increment_minutes
    )

    @model_validator(mode="after")
    def _check_window(self) -> "BusinessHours":
        if not 0 <= self.open_hour < self.close_hour <= 24:
            raise ValueError(
                f"Invalid business hours: open {self.open_hour}, close {self.close_hour}"
            )
        if not 0 < self.slot_increment_minutes <= MINUTES_PER_DAY:
            raise ValueError(
                f"Invalid slot increment: {self.slot_increment_minutes}"
            )
        return self

    @classmethod
    def from_opening_times(
        cls,
        opening_time: Optional[str],
        closing_time: Optional[str],
        slot_increment_minutes: Optional[int] = None,
    ) -> "BusinessHours":
        """Build from ``HH:mm`` strings as stored on a barbershop record.

        Only the hour part is used. Missing values fall back to 08:00 and 19:00.
        """
        open_hour = int((opening_time or "08:00").split(":")[0])
        close_hour = int((closing_time or "19:00").split(":")[0])
        if slot_increment_minutes is None:
            return cls(open_hour=open_hour, close_hour=close_hour)
        return cls(
            open_hour=open_hour,
            close_hour=close_hour,
            slot_increment_minutes=slot_increment_minutes,
        )
