"""
Field-level validation of appointment drafts.

Every check runs and all problems are returned together so a booking form
can mark each field at once. Messages are the pt-BR strings shown to
barbershop staff.
"""

import logging
import re
from datetime import date, datetime, timedelta
from typing import Any, Mapping, Optional, Union

from pydantic import ValidationError as PydanticValidationError

from barbershop_scheduling.schemas.appointment_schema import (
    AppointmentDraft,
    ValidationError,
    ValidationResult,
)
from barbershop_scheduling.utils import coerce_date, time_to_minutes

logger = logging.getLogger(__name__)

TIME_PATTERN = re.compile(r"^([01][0-9]|2[0-3]):[0-5][0-9]$")

INVALID_VALUE_MESSAGE = "Valor inválido"

REQUIRED_REFERENCES: list[tuple[str, str]] = [
    ("client_id", "Cliente é obrigatório"),
    ("professional_id", "Profissional é obrigatório"),
    ("service_id", "Serviço é obrigatório"),
]

_FIELD_BY_KEY: dict[str, str] = {
    key: name
    for name, info in AppointmentDraft.model_fields.items()
    for key in (name, info.alias or name)
}


def _coerce_draft(
    data: Mapping[str, Any],
) -> tuple[AppointmentDraft, list[ValidationError]]:
    """Parse a raw mapping, turning type errors into field errors.

    Fields that fail to parse are dropped so the remaining checks still run.
    """
    try:
        return AppointmentDraft.model_validate(data), []
    except PydanticValidationError as exc:
        bad_fields: list[str] = []
        for err in exc.errors():
            if not err["loc"]:
                continue
            name = _FIELD_BY_KEY.get(str(err["loc"][0]), str(err["loc"][0]))
            if name not in bad_fields:
                bad_fields.append(name)

    cleaned = {k: v for k, v in data.items() if _FIELD_BY_KEY.get(k, k) not in bad_fields}
    errors = [ValidationError(field=name, message=INVALID_VALUE_MESSAGE) for name in bad_fields]
    logger.debug("Draft fields with unparseable values: %s", bad_fields)
    return AppointmentDraft.model_validate(cleaned), errors


def validate_appointment(
    draft: Union[AppointmentDraft, Mapping[str, Any]],
    today: Optional[date] = None,
) -> ValidationResult:
    """
    Validate an appointment draft.

    Args:
        draft: the draft, or a mapping with snake_case or camelCase keys.
        today: reference day for the past-date check (defaults to today).

    Returns:
        ValidationResult with every error found, in field order.
    """
    if isinstance(draft, AppointmentDraft):
        coercion_errors: list[ValidationError] = []
    else:
        draft, coercion_errors = _coerce_draft(dict(draft))
    today = today or date.today()

    errors: list[ValidationError] = []

    for field_name, message in REQUIRED_REFERENCES:
        value = getattr(draft, field_name)
        if not value or not value.strip():
            errors.append(ValidationError(field=field_name, message=message))

    if draft.date is None:
        errors.append(ValidationError(field="date", message="Data é obrigatória"))
    elif draft.date < today:
        errors.append(ValidationError(field="date", message="Data não pode ser no passado"))

    if not draft.start_time or not draft.start_time.strip():
        errors.append(ValidationError(field="start_time", message="Horário é obrigatório"))
    elif not TIME_PATTERN.match(draft.start_time):
        errors.append(
            ValidationError(field="start_time", message="Formato de horário inválido")
        )

    if draft.duration is not None and draft.duration <= 0:
        errors.append(
            ValidationError(field="duration", message="Duração deve ser maior que zero")
        )

    if draft.price is not None and draft.price < 0:
        errors.append(ValidationError(field="price", message="Preço não pode ser negativo"))

    # A field that failed to parse already carries its error.
    bad_fields = {e.field for e in coercion_errors}
    errors = coercion_errors + [e for e in errors if e.field not in bad_fields]

    return ValidationResult(is_valid=not errors, errors=errors)


def is_time_in_past(
    day: Union[date, str], start_time: str, now: Optional[datetime] = None
) -> bool:
    """True when ``day`` is today and ``start_time`` has already passed.

    Any other day, past or future, returns False; use
    ``validate_appointment`` for past dates.
    """
    now = now or datetime.now()
    day = coerce_date(day)
    if day != now.date():
        return False
    selected = datetime.combine(day, datetime.min.time()) + timedelta(
        minutes=time_to_minutes(start_time)
    )
    return selected < now.replace(tzinfo=None)
