from __future__ import annotations

import re
from datetime import date, datetime
from enum import Enum
from typing import Any, Type, TypeVar

from ..core.exceptions import ValidationError
from .datetime_utils import parse_iso_date

E = TypeVar("E", bound=Enum)

_INT_PATTERN = re.compile(r"-?[0-9]+")


def require_non_empty(value: Any, field_name: str) -> str:
    if not isinstance(value, str) or not value.strip():
        raise ValidationError(f"{field_name} is required")
    return value.strip()


def require_min_length(value: str, field_name: str, min_len: int) -> str:
    if value is None or len(value) < min_len:
        raise ValidationError(f"{field_name} must be at least {min_len} characters long")
    return value


def require_max_length(value: str, field_name: str, max_len: int) -> str:
    if len(value) > max_len:
        raise ValidationError(f"{field_name} must be at most {max_len} characters long")
    return value


def require_int(value: Any, field_name: str) -> int:
    """Accept ints and integer strings (form/query values); reject bools and fractions."""

    if isinstance(value, bool):
        raise ValidationError(f"{field_name} must be an integer")
    if isinstance(value, int):
        return value
    if isinstance(value, float) and value.is_integer():
        return int(value)
    if isinstance(value, str) and _INT_PATTERN.fullmatch(value.strip()):
        return int(value.strip())
    raise ValidationError(f"{field_name} must be an integer")


def require_int_range(value: Any, field_name: str, min_value: int, max_value: int) -> int:
    number = require_int(value, field_name)
    if number < min_value or number > max_value:
        raise ValidationError(f"{field_name} must be between {min_value} and {max_value}")
    return number


def require_id(value: Any, field_name: str) -> int:
    number = require_int(value, field_name)
    if number <= 0:
        raise ValidationError(f"{field_name} must be a positive integer")
    return number


def require_choice(value: Any, field_name: str, enum_cls: Type[E]) -> E:
    try:
        return enum_cls(value)
    except ValueError:
        allowed = ", ".join(str(member.value) for member in enum_cls)
        raise ValidationError(f"{field_name} must be one of [{allowed}]")


def require_date(value: Any, field_name: str) -> date:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if not isinstance(value, str) or not value.strip():
        raise ValidationError(f"{field_name} is required")
    try:
        return parse_iso_date(value.strip())
    except ValueError:
        raise ValidationError(f"{field_name} must be a valid date (YYYY-MM-DD)")


def require_not_future(value: date, field_name: str, *, today: date) -> date:
    if value > today:
        raise ValidationError(f"{field_name} must not be in the future")
    return value
