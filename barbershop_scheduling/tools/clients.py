"""
Client directory.

In production this is the barbershop's ``clients`` table; the booking
store only needs it to join a display name onto booking snapshots.
"""

from typing import Optional, TypedDict


class ClientRecord(TypedDict):
    """Client record stored in the system."""

    id: str
    name: str
    phone: str
    email: str

_clients: dict[str, ClientRecord] = {
    "cli-001": {
        "id": "cli-001",
        "name": "João Silva",
        "phone": "11987654321",
        "email": "joao.silva@email.com",
    },
    "cli-002": {
        "id": "cli-002",
        "name": "Pedro Santos",
        "phone": "11912345678",
        "email": "",
    },
}


def lookup_client(client_id: str) -> Optional[ClientRecord]:
    """Look up a client by ID. Returns None if not found."""
    return _clients.get(client_id)
