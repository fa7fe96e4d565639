from __future__ import annotations

import math
import re
from collections.abc import Mapping
from datetime import date
from functools import lru_cache
from typing import Any, assert_never

from dynform.schemas.form_schema import (
    TODAY,
    DateField,
    FormField,
    FormSchema,
    MultiSelectField,
    NumberField,
    SelectField,
    SwitchField,
    TextareaField,
    TextField,
    parse_calendar_date,
)
from dynform.schemas.validation import ValidationResult

# Same grammar a browser's Number() accepts: decimal, exponent, Infinity,
# and unsigned 0x/0o/0b literals. Python's float() is looser ("nan", "1_0").
_DECIMAL_RE = re.compile(r"[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?")
_RADIX_RE = re.compile(r"0[xX][0-9a-fA-F]+|0[oO][0-7]+|0[bB][01]+")
_INFINITY = {"Infinity": math.inf, "+Infinity": math.inf, "-Infinity": -math.inf}


def _is_empty(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, str) and value.strip() == "":
        return True
    return False


def _text_length(s: str) -> int:
    # UTF-16 code units, so lengths agree with browser-side checks
    return len(s.encode("utf-16-le", "surrogatepass")) // 2


def _fmt(n: int | float) -> str:
    if isinstance(n, float) and n.is_integer():
        return str(int(n))
    return str(n)


@lru_cache(maxsize=128)
def _compile(pattern: str) -> re.Pattern[str]:
    return re.compile(pattern)


def _to_number(value: Any) -> int | float | None:
    """
    Coerce a native number or a numeric string. bool is rejected even though
    it subclasses int.
    """
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return None if math.isnan(value) else value
    if isinstance(value, str):
        s = value.strip()
        if not s:
            return None
        if s in _INFINITY:
            return _INFINITY[s]
        if _DECIMAL_RE.fullmatch(s):
            return float(s)
        if _RADIX_RE.fullmatch(s):
            return int(s, 0)
    return None


def _resolve_min_date(min_date: str, today: date) -> date:
    if min_date == TODAY:
        return today
    resolved = parse_calendar_date(min_date)
    if resolved is None:
        raise ValueError(f"unresolvable minDate: {min_date!r}")
    return resolved


def _check_text(field: TextField | TextareaField, value: Any) -> str | None:
    label = field.label
    if not isinstance(value, str):
        return f"{label} must be a string."

    rules = field.validations
    if rules is None:
        return None

    n = _text_length(value)
    if rules.min_length is not None and n < rules.min_length:
        return f"{label} must be at least {rules.min_length} characters long."
    if rules.max_length is not None and n > rules.max_length:
        return f"{label} must be at most {rules.max_length} characters long."

    if isinstance(field, TextField) and rules.pattern is not None:
        if _compile(rules.pattern).fullmatch(value) is None:
            return f"{label} is invalid."
    return None


def _check_number(field: NumberField, value: Any) -> str | None:
    label = field.label
    x = _to_number(value)
    if x is None:
        return f"{label} must be a number."

    rules = field.validations
    if rules is None:
        return None
    if rules.min is not None and x < rules.min:
        return f"{label} must be at least {_fmt(rules.min)}."
    if rules.max is not None and x > rules.max:
        return f"{label} must be at most {_fmt(rules.max)}."
    return None


def _check_select(field: SelectField, value: Any) -> str | None:
    if not isinstance(value, str):
        return f"{field.label} must be a string."
    if value not in field.options:
        return f"{field.label} must be one of: {', '.join(field.options)}."
    return None


def _check_multi_select(field: MultiSelectField, value: Any) -> str | None:
    label = field.label
    if not isinstance(value, list):
        return f"{label} must be an array."

    # an empty selection is "empty" for this variant only
    if not value:
        return f"{label} is required." if field.required else None

    if not all(isinstance(v, str) for v in value):
        return f"{label} must contain only strings."
    if not all(v in field.options for v in value):
        return f"{label} contains invalid selection(s)."

    rules = field.validations
    if rules is None:
        return None
    if rules.min_selected is not None and len(value) < rules.min_selected:
        return f"{label} must have at least {rules.min_selected} selection(s)."
    if rules.max_selected is not None and len(value) > rules.max_selected:
        return f"{label} must have at most {rules.max_selected} selection(s)."
    return None


def _check_date(field: DateField, value: Any, today: date) -> str | None:
    label = field.label
    if not isinstance(value, str):
        return f"{label} must be a date string."

    d = parse_calendar_date(value)
    if d is None:
        return f"{label} must be a valid date."

    rules = field.validations
    if rules is not None and rules.min_date is not None:
        bound = _resolve_min_date(rules.min_date, today)
        if d < bound:
            return f"{label} cannot be earlier than {bound.isoformat()}."
    return None


def _check_switch(field: SwitchField, value: Any) -> str | None:
    if not isinstance(value, bool):
        return f"{field.label} must be a boolean."
    return None


def validate_field(field: FormField, value: Any, today: date) -> str | None:
    """
    Returns the single error message for one field, or None if it passes.

    Order: required gate, optional-empty short-circuit, then the variant's
    own checks where the first failing rule wins.
    """
    if field.required:
        if isinstance(field, SwitchField):
            if value is not True:
                return f"{field.label} must be accepted."
            return None
        if _is_empty(value):
            return f"{field.label} is required."
    elif _is_empty(value):
        return None

    if isinstance(field, (TextField, TextareaField)):
        return _check_text(field, value)
    elif isinstance(field, NumberField):
        return _check_number(field, value)
    elif isinstance(field, SelectField):
        return _check_select(field, value)
    elif isinstance(field, MultiSelectField):
        return _check_multi_select(field, value)
    elif isinstance(field, DateField):
        return _check_date(field, value, today)
    elif isinstance(field, SwitchField):
        return _check_switch(field, value)
    else:
        assert_never(field)


def validate_submission(
    schema: FormSchema,
    record: Any,
    *,
    today: date | None = None,
) -> ValidationResult:
    """
    Validate an untrusted record against a schema.

    Total for any well-formed schema: garbage values produce messages, never
    exceptions. A record that is not a mapping is treated as empty. `today`
    is sampled once so every date field in one call sees the same day.
    """
    if today is None:
        today = date.today()
    if not isinstance(record, Mapping):
        record = {}

    errors: dict[str, str] = {}
    for field in schema.fields:
        message = validate_field(field, record.get(field.name), today)
        if message is not None:
            errors[field.name] = message

    return ValidationResult(is_valid=not errors, errors=errors)
