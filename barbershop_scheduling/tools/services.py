"""Barbershop service catalog with prices and durations.

In production these rows come from the barbershop's ``services`` table;
the booking store joins them onto bookings for the conflict check.
"""

from decimal import Decimal
from typing import Optional, TypedDict


class ServiceRecord(TypedDict):
    """A bookable service."""

    name: str
    description: str
    price: Decimal
    duration_minutes: int


SERVICE_CATALOG: dict[str, ServiceRecord] = {
    "corte": {
        "name": "Corte de cabelo",
        "description": "Corte masculino na tesoura ou máquina, com lavagem.",
        "price": Decimal("45.00"),
        "duration_minutes": 30,
    },
    "barba": {
        "name": "Barba",
        "description": "Barba com toalha quente e navalha.",
        "price": Decimal("35.00"),
        "duration_minutes": 30,
    },
    "corte-barba": {
        "name": "Corte + Barba",
        "description": "Combo de corte de cabelo e barba.",
        "price": Decimal("70.00"),
        "duration_minutes": 60,
    },
    "sobrancelha": {
        "name": "Sobrancelha",
        "description": "Design de sobrancelha na navalha.",
        "price": Decimal("15.00"),
        "duration_minutes": 15,
    },
    "pigmentacao": {
        "name": "Pigmentação",
        "description": "Pigmentação de barba ou cabelo.",
        "price": Decimal("50.00"),
        "duration_minutes": 45,
    },
    "platinado": {
        "name": "Platinado",
        "description": "Descoloração completa com matização.",
        "price": Decimal("150.00"),
        "duration_minutes": 120,
    },
}


def get_service_details(service_id: str) -> Optional[dict]:
    """Get full details for a service by its exact ID."""
    info = SERVICE_CATALOG.get(service_id.lower().strip())
    if info is None:
        return None
    return {"id": service_id.lower().strip(), **info}
