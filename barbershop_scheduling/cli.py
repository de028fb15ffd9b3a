"""
CLI entry point for validating drafts and checking schedules from JSON files.

Usage:
    barbershop-scheduling validate --draft draft.json
    barbershop-scheduling check --bookings day.json --professional prof-1 \\
        --date 2024-06-10 --time 10:15 --duration 30
    barbershop-scheduling slots --bookings day.json --date 2024-06-10 \\
        --time 09:30 --duration 30 --open-hour 9 --close-hour 18 --block 12:00-13:00
"""

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Any, Optional

from barbershop_scheduling.logging_context import RequestIdFilter, booking_context
from barbershop_scheduling.scheduling import (
    check_conflicts,
    find_available_slots,
    validate_appointment,
)
from barbershop_scheduling.schemas.appointment_schema import BusinessHours

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_REJECTED = 1
EXIT_BAD_INPUT = 2


def _load_json(path_str: str) -> Optional[Any]:
    path = Path(path_str)
    if not path.exists():
        logger.error("File not found: %s", path)
        return None
    try:
        return json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as exc:
        logger.error("Invalid JSON in %s: %s", path, exc)
        return None


def _business_hours(args: argparse.Namespace) -> Optional[BusinessHours]:
    if args.open_hour is None and args.close_hour is None:
        return None
    fields = {}
    if args.open_hour is not None:
        fields["open_hour"] = args.open_hour
    if args.close_hour is not None:
        fields["close_hour"] = args.close_hour
    return BusinessHours(**fields)


def _time_blocks(args: argparse.Namespace) -> list[dict]:
    blocks = []
    for spec in args.block or ():
        start, _, end = spec.partition("-")
        blocks.append({"start_time": start, "end_time": end})
    return blocks


def _emit(payload: Any) -> None:
    sys.stdout.write(json.dumps(payload, indent=2, ensure_ascii=False) + "\n")


def _cmd_validate(args: argparse.Namespace) -> int:
    draft = _load_json(args.draft)
    if not isinstance(draft, dict):
        return EXIT_BAD_INPUT
    result = validate_appointment(draft)
    _emit(result.model_dump(mode="json"))
    return EXIT_OK if result.is_valid else EXIT_REJECTED


def _cmd_check(args: argparse.Namespace) -> int:
    bookings = _load_json(args.bookings)
    if not isinstance(bookings, list):
        return EXIT_BAD_INPUT
    result = check_conflicts(
        args.professional,
        args.date,
        args.time,
        args.duration,
        bookings,
        exclude_booking_id=args.exclude,
        business_hours=_business_hours(args),
        blocked_intervals=_time_blocks(args),
        skip_past=args.skip_past,
    )
    _emit(result.model_dump(mode="json"))
    return EXIT_REJECTED if result.has_conflict else EXIT_OK


def _cmd_slots(args: argparse.Namespace) -> int:
    bookings = _load_json(args.bookings)
    if not isinstance(bookings, list):
        return EXIT_BAD_INPUT
    slots = find_available_slots(
        bookings,
        args.date,
        args.duration,
        args.time,
        business_hours=_business_hours(args),
        max_results=args.limit,
        blocked_intervals=_time_blocks(args),
        skip_past=args.skip_past,
    )
    _emit(slots)
    return EXIT_OK


def _add_window_args(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--open-hour", type=int, default=None, help="Opening hour (0-23).")
    parser.add_argument("--close-hour", type=int, default=None, help="Closing hour (1-24).")
    parser.add_argument(
        "--block",
        action="append",
        metavar="HH:MM-HH:MM",
        help="Time block kept free of suggestions, e.g. 12:00-13:00. Repeatable.",
    )
    parser.add_argument(
        "--skip-past",
        action="store_true",
        help="Do not suggest start times that already passed today.",
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Validate barbershop appointments and check schedule conflicts."
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Enable verbose logging output.",
    )
    commands = parser.add_subparsers(dest="command", required=True)

    validate = commands.add_parser("validate", help="Validate an appointment draft.")
    validate.add_argument("--draft", required=True, help="Path to a draft JSON object.")
    validate.set_defaults(handler=_cmd_validate)

    check = commands.add_parser("check", help="Check a requested time for conflicts.")
    check.add_argument("--bookings", required=True, help="Path to a JSON list of bookings.")
    check.add_argument("--professional", required=True, help="Professional ID.")
    check.add_argument("--date", required=True, help="Day as YYYY-MM-DD.")
    check.add_argument("--time", required=True, help="Start time as HH:MM.")
    check.add_argument("--duration", type=int, required=True, help="Duration in minutes.")
    check.add_argument("--exclude", default=None, help="Booking ID being edited.")
    _add_window_args(check)
    check.set_defaults(handler=_cmd_check)

    slots = commands.add_parser("slots", help="List open slots near a preferred time.")
    slots.add_argument("--bookings", required=True, help="Path to a JSON list of bookings.")
    slots.add_argument("--date", required=True, help="Day as YYYY-MM-DD.")
    slots.add_argument("--time", required=True, help="Preferred time as HH:MM.")
    slots.add_argument("--duration", type=int, required=True, help="Duration in minutes.")
    slots.add_argument("--limit", type=int, default=None, help="Maximum suggestions.")
    _add_window_args(slots)
    slots.set_defaults(handler=_cmd_slots)

    return parser


def main(argv: Optional[list[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    if args.verbose:
        logging.basicConfig(
            level=logging.DEBUG,
            format="%(asctime)s [%(request_id)s] [%(name)s] %(levelname)s: %(message)s",
            force=True,
        )
        for handler in logging.getLogger().handlers:
            handler.addFilter(RequestIdFilter())

    with booking_context(getattr(args, "professional", None), getattr(args, "date", None)):
        try:
            return args.handler(args)
        except ValueError as exc:
            # Malformed times, dates or booking rows.
            logger.error("Invalid input: %s", exc)
            return EXIT_BAD_INPUT


if __name__ == "__main__":
    sys.exit(main())
