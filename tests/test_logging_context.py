"""Tests for booking-attempt correlation IDs."""

import logging
from datetime import date

from barbershop_scheduling.logging_context import (
    NO_REQUEST_ID,
    RequestIdFilter,
    booking_context,
    get_request_id,
    get_request_logger,
    new_request_id,
)


class TestNewRequestId:
    def test_contains_professional_and_day(self):
        request_id = new_request_id("prof-1", date(2024, 6, 10))
        assert request_id.startswith("prof-1/2024-06-10/")
        assert len(request_id.rsplit("/", 1)[1]) == 6

    def test_unknown_parts(self):
        assert new_request_id(None, None).startswith("*/*/")

    def test_unique(self):
        assert new_request_id("prof-1", "2024-06-10") != new_request_id("prof-1", "2024-06-10")


class TestBookingContext:
    def test_sets_and_restores(self):
        assert get_request_id() == NO_REQUEST_ID
        with booking_context("prof-1", "2024-06-10") as request_id:
            assert get_request_id() == request_id
            assert request_id.startswith("prof-1/2024-06-10/")
        assert get_request_id() == NO_REQUEST_ID

    def test_restores_after_exception(self):
        try:
            with booking_context("prof-1", "2024-06-10"):
                raise RuntimeError("boom")
        except RuntimeError:
            pass
        assert get_request_id() == NO_REQUEST_ID

    def test_nested_keeps_outer_id(self):
        with booking_context("prof-1", "2024-06-10") as outer:
            with booking_context("prof-2", "2024-06-11") as inner:
                assert inner == outer
            assert get_request_id() == outer


class TestRequestLogger:
    def test_filter_attached_once(self):
        logger = get_request_logger("barbershop_scheduling.test")
        get_request_logger("barbershop_scheduling.test")
        assert sum(isinstance(f, RequestIdFilter) for f in logger.filters) == 1

    def test_records_carry_id(self, caplog):
        logger = get_request_logger("barbershop_scheduling.test")
        caplog.set_level(logging.INFO, logger="barbershop_scheduling.test")
        with booking_context("prof-1", "2024-06-10") as request_id:
            logger.info("Checking conflicts")
        assert caplog.records[-1].request_id == request_id
