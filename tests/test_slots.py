"""Tests for open-slot suggestions."""

from datetime import datetime

import pytest

from barbershop_scheduling.scheduling.slots import (
    booking_interval,
    find_available_slots,
    overlaps,
)
from barbershop_scheduling.schemas.appointment_schema import BusinessHours, TimeBlock
from tests.conftest import DAY, make_booking


def _minutes(slot: str) -> int:
    hours, mins = slot.split(":")
    return int(hours) * 60 + int(mins)


class TestOverlaps:
    def test_touching_intervals_do_not_overlap(self):
        assert overlaps(600, 630, 630, 660) is False
        assert overlaps(630, 660, 600, 630) is False

    def test_partial_overlap(self):
        assert overlaps(600, 660, 630, 690) is True

    def test_containment(self):
        assert overlaps(600, 700, 620, 640) is True


class TestBookingInterval:
    def test_uses_service_duration(self):
        assert booking_interval(make_booking(time="09:00", duration=45)) == (540, 585, False)

    def test_falls_back_when_duration_missing(self):
        assert booking_interval(make_booking(time="09:00", duration=None)) == (540, 570, True)

    def test_zero_duration_treated_as_missing(self):
        assert booking_interval(make_booking(time="09:00", duration=0)) == (540, 570, True)

    def test_explicit_default(self):
        booking = make_booking(time="09:00", duration=None)
        assert booking_interval(booking, default_duration=60) == (540, 600, True)


class TestFindAvailableSlots:
    def test_hour_long_booking_blocks_its_grid_slots(self):
        existing = [make_booking(time="09:00", duration=60)]
        slots = find_available_slots(existing, DAY, 30, "09:30", open_hour=8, close_hour=19)
        assert "09:00" not in slots
        assert "09:30" not in slots
        assert slots == ["10:00", "08:30", "10:30", "08:00", "11:00"]

    def test_closest_before_blocked_range_is_half_past_eight(self):
        existing = [make_booking(time="09:00", duration=60)]
        slots = find_available_slots(existing, DAY, 30, "09:30", open_hour=8, close_hour=19)
        before = [s for s in slots if _minutes(s) < 600]
        assert before[0] == "08:30"

    def test_empty_day_returns_five_nearest(self):
        slots = find_available_slots([], DAY, 30, "12:00")
        assert slots == ["12:00", "11:30", "12:30", "11:00", "13:00"]

    def test_grid_not_aligned_to_bookings(self):
        existing = [make_booking(time="10:15", duration=30)]
        slots = find_available_slots(existing, DAY, 30, "10:00", max_results=20)
        assert "10:00" not in slots
        assert "10:30" not in slots
        assert "10:45" not in slots
        assert "11:00" in slots

    def test_last_slot_must_end_by_closing(self):
        slots = find_available_slots([], DAY, 60, "19:00", max_results=3)
        assert slots == ["18:00", "17:30", "17:00"]

    def test_duration_longer_than_window(self):
        hours = BusinessHours(open_hour=9, close_hour=10)
        assert find_available_slots([], DAY, 90, "09:00", business_hours=hours) == []

    def test_cancelled_bookings_free_time(self):
        existing = [make_booking(time="12:00", duration=60, status="cancelled")]
        assert find_available_slots(existing, DAY, 30, "12:00")[0] == "12:00"

    def test_other_days_ignored(self):
        from datetime import date

        existing = [make_booking(time="12:00", booking_date=date(2024, 6, 11))]
        assert find_available_slots(existing, DAY, 30, "12:00")[0] == "12:00"

    def test_fully_booked_day(self):
        existing = [make_booking(time="08:00", duration=11 * 60)]
        assert find_available_slots(existing, DAY, 30, "10:00") == []

    def test_business_hours_override_window(self):
        hours = BusinessHours(open_hour=9, close_hour=18, slot_increment_minutes=15)
        slots = find_available_slots([], DAY, 30, "08:00", business_hours=hours, max_results=3)
        assert slots == ["09:00", "09:15", "09:30"]

    def test_business_hours_win_over_open_close(self):
        hours = BusinessHours(open_hour=14, close_hour=16)
        slots = find_available_slots(
            [], DAY, 30, "08:00", open_hour=8, close_hour=19, business_hours=hours
        )
        assert slots[0] == "14:00"

    def test_max_results_cap(self):
        assert len(find_available_slots([], DAY, 30, "12:00", max_results=2)) == 2

    def test_ties_prefer_earlier_slot(self):
        slots = find_available_slots([], DAY, 30, "12:15", max_results=2)
        assert slots == ["12:00", "12:30"]

    def test_invalid_window_rejected(self):
        with pytest.raises(ValueError):
            find_available_slots([], DAY, 30, "12:00", open_hour=19, close_hour=8)


class TestTimeBlocks:
    def test_lunch_block_excluded(self):
        lunch = TimeBlock(start_time="12:00:00", end_time="13:00:00", title="Almoço")
        slots = find_available_slots([], DAY, 30, "12:00", blocked_intervals=[lunch])
        assert slots == ["11:30", "11:00", "13:00", "10:30", "13:30"]

    def test_block_mappings_accepted(self):
        slots = find_available_slots(
            [], DAY, 60, "11:00", blocked_intervals=[{"start_time": "12:00", "end_time": "13:00"}],
            max_results=3,
        )
        assert slots == ["11:00", "10:30", "10:00"]

    def test_blocks_and_bookings_combine(self):
        existing = [make_booking(time="11:30", duration=30)]
        lunch = TimeBlock(start_time="12:00", end_time="13:00")
        slots = find_available_slots(existing, DAY, 30, "12:00", blocked_intervals=[lunch])
        assert "11:30" not in slots
        assert slots[:2] == ["11:00", "13:00"]


class TestSkipPast:
    def test_today_drops_passed_start_times(self):
        now = datetime(2024, 6, 10, 10, 10)
        slots = find_available_slots([], DAY, 30, "09:00", skip_past=True, now=now)
        assert slots == ["10:30", "11:00", "11:30", "12:00", "12:30"]

    def test_other_days_unaffected(self):
        now = datetime(2024, 6, 9, 18, 0)
        slots = find_available_slots([], DAY, 30, "08:00", skip_past=True, now=now, max_results=1)
        assert slots == ["08:00"]

    def test_off_by_default(self):
        now = datetime(2024, 6, 10, 18, 0)
        slots = find_available_slots([], DAY, 30, "08:00", now=now, max_results=1)
        assert slots == ["08:00"]

    def test_late_evening_leaves_nothing(self):
        now = datetime(2024, 6, 10, 18, 45)
        assert find_available_slots([], DAY, 30, "18:30", skip_past=True, now=now) == []


class TestUnreadableRows:
    def test_unreadable_booking_time_ignored(self, caplog):
        existing = [make_booking(booking_id="bad", time="xx")]
        slots = find_available_slots(existing, DAY, 30, "10:00", max_results=1)
        assert slots == ["10:00"]
        assert any("bad" in r.getMessage() for r in caplog.records)
