from barbershop_scheduling.scheduling.conflicts import check_conflicts
from barbershop_scheduling.scheduling.slots import find_available_slots
from barbershop_scheduling.scheduling.validation import is_time_in_past, validate_appointment

__all__ = [
    "check_conflicts",
    "find_available_slots",
    "validate_appointment",
    "is_time_in_past",
]
