"""Tests for import chains and module integrity.

Ensures all public modules can be imported without errors and
that re-exports from __init__.py files work correctly.
"""


class TestSchemaImports:
    def test_import_appointment_schema(self):
        from barbershop_scheduling.schemas.appointment_schema import (
            AppointmentDraft, AppointmentStatus, ConflictResult, ExistingBooking,
            ValidationResult,
        )
        assert AppointmentStatus.CANCELLED == "cancelled"
        assert ConflictResult(has_conflict=False).suggested_slots == []
        assert ValidationResult(is_valid=True).errors == []


class TestSchedulingImports:
    def test_package_reexports(self):
        from barbershop_scheduling.scheduling import (
            check_conflicts, find_available_slots, is_time_in_past, validate_appointment,
        )
        assert callable(check_conflicts)
        assert callable(find_available_slots)
        assert callable(validate_appointment)
        assert callable(is_time_in_past)


class TestToolImports:
    def test_import_services(self):
        from barbershop_scheduling.tools.services import (
            SERVICE_CATALOG, get_service_details,
        )
        assert len(SERVICE_CATALOG) >= 5
        assert get_service_details("corte")["duration_minutes"] == 30

    def test_import_booking_store(self):
        from barbershop_scheduling.tools.booking_store import (
            cancel_booking, create_booking, reschedule_booking,
        )
        assert callable(create_booking)

    def test_import_clients(self):
        from barbershop_scheduling.tools.clients import lookup_client
        assert lookup_client("cli-001")["name"] == "João Silva"
