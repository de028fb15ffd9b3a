"""Correlation IDs for booking attempts.

A booking attempt runs validation, the conflict check, the slot search
and a store write. ``booking_context`` tags every record logged during
one attempt with an ID built from the professional and the day, so a
log reader can grep one professional's day and see attempts in order.

Usage:
    from barbershop_scheduling.logging_context import booking_context, get_request_logger

    logger = get_request_logger(__name__)
    with booking_context("prof-1", "2024-06-10"):
        logger.info("Checking conflicts")  # request_id "prof-1/2024-06-10/3fa2c1"
"""

import logging
import uuid
from contextlib import contextmanager
from contextvars import ContextVar
from datetime import date
from typing import Iterator, Optional, Union

NO_REQUEST_ID = "-"

_request_id: ContextVar[str] = ContextVar("booking_request_id", default=NO_REQUEST_ID)


def new_request_id(
    professional_id: Optional[str] = None,
    day: Union[date, str, None] = None,
) -> str:
    """Build ``<professional>/<day>/<hex>``; unknown parts become ``*``.

    Examples:
        >>> new_request_id("prof-1", "2024-06-10").startswith("prof-1/2024-06-10/")
        True
        >>> new_request_id().startswith("*/*/")
        True
    """
    if isinstance(day, date):
        day = day.isoformat()
    return f"{professional_id or '*'}/{day or '*'}/{uuid.uuid4().hex[:6]}"


@contextmanager
def booking_context(
    professional_id: Optional[str] = None,
    day: Union[date, str, None] = None,
) -> Iterator[str]:
    """Tag logs of one booking attempt; yields the ID in use.

    Nested contexts keep the outer ID, so a store write that runs the
    conflict check logs under a single ID.
    """
    if _request_id.get() != NO_REQUEST_ID:
        yield _request_id.get()
        return
    token = _request_id.set(new_request_id(professional_id, day))
    try:
        yield _request_id.get()
    finally:
        _request_id.reset(token)


def get_request_id() -> str:
    """ID of the booking attempt in progress, ``NO_REQUEST_ID`` outside one."""
    return _request_id.get()


class RequestIdFilter(logging.Filter):
    """Stamps ``record.request_id`` for ``%(request_id)s`` formats."""

    def filter(self, record: logging.LogRecord) -> bool:
        record.request_id = _request_id.get()  # type: ignore[attr-defined]
        return True


def get_request_logger(name: str) -> logging.Logger:
    logger = logging.getLogger(name)
    if not any(isinstance(f, RequestIdFilter) for f in logger.filters):
        logger.addFilter(RequestIdFilter())
    return logger
