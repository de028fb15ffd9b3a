"""Shared test fixtures and helpers."""

from datetime import date, timedelta
from typing import Optional

import pytest

from barbershop_scheduling.schemas.appointment_schema import (
    BookedClient,
    BookedService,
    ExistingBooking,
)
from barbershop_scheduling.tools import booking_store

DAY = date(2024, 6, 10)


@pytest.fixture
def day():
    return DAY


@pytest.fixture
def future_day():
    return date.today() + timedelta(days=7)


@pytest.fixture(autouse=True)
def clean_store():
    booking_store.reset()
    yield
    booking_store.reset()


def make_booking(
    booking_id: str = "bk-1",
    time: str = "10:00",
    duration: Optional[int] = 30,
    status: str = "confirmed",
    booking_date: date = DAY,
    client_name: Optional[str] = "João Silva",
    service_name: Optional[str] = "Corte de cabelo",
) -> ExistingBooking:
    """Helper to create an ExistingBooking snapshot with sensible defaults."""
    service = None
    if duration is not None or service_name is not None:
        service = BookedService(duration_minutes=duration, name=service_name)
    return ExistingBooking(
        id=booking_id,
        booking_time=time,
        booking_date=booking_date,
        status=status,
        service=service,
        client=BookedClient(name=client_name) if client_name is not None else None,
    )


def make_draft(day: date, **overrides) -> dict:
    """A complete, valid draft as a booking form would submit it."""
    draft = {
        "client_id": "cli-001",
        "professional_id": "prof-1",
        "service_id": "corte",
        "date": day,
        "start_time": "10:00",
        "duration": 30,
        "price": "45.00",
        "notes": "",
        "status": "confirmed",
        "send_notification": True,
    }
    draft.update(overrides)
    return draft
