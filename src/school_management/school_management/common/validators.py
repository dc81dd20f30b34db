from __future__ import annotations

import re
from typing import Any, Iterable

from ..core.exceptions import ValidationError

_EMAIL_RE = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")


def require_non_empty(value: str, field_name: str) -> str:
    if not isinstance(value, str) or not value.strip():
        raise ValidationError(f"{field_name} is invalid")
    return value.strip()


def require_min_length(value: str, field_name: str, min_len: int) -> str:
    if value is None or len(value) < min_len:
        raise ValidationError(f"{field_name} must be at least {min_len} characters")
    return value


def require_email(value: str, field_name: str = "email") -> str:
    value = require_non_empty(value, field_name).lower()
    if not _EMAIL_RE.match(value):
        raise ValidationError(f"{field_name} is not a valid email address")
    return value


def require_id(value: Any, field_name: str) -> int:
    """Accept a positive integer id given as int or numeric string."""
    if isinstance(value, bool) or (isinstance(value, float) and not value.is_integer()):
        raise ValidationError(f"{field_name} must be an integer id")
    try:
        ident = int(value)
    except (TypeError, ValueError):
        raise ValidationError(f"{field_name} must be an integer id")
    if ident <= 0:
        raise ValidationError(f"{field_name} must be an integer id")
    return ident


def require_id_list(values: Any, field_name: str) -> list[int]:
    if not isinstance(values, (list, tuple)):
        raise ValidationError(f"{field_name} must be a list of ids")
    return [require_id(v, field_name) for v in values]


def require_str_list(values: Any, field_name: str) -> list[str]:
    if not isinstance(values, (list, tuple)):
        raise ValidationError(f"{field_name} must be a list of strings")
    return [require_non_empty(v, field_name) for v in values]


def require_int_between(value: Any, field_name: str, low: int, high: int) -> int:
    try:
        number = int(value)
    except (TypeError, ValueError):
        raise ValidationError(f"{field_name} must be an integer")
    if not low <= number <= high:
        raise ValidationError(f"{field_name} must be between {low} and {high}")
    return number


def missing_fields(payload: dict, names: Iterable[str]) -> list[str]:
    """Names whose value is absent or falsy in ``payload``."""
    return [n for n in names if not payload.get(n)]


def optional_text(value: Any, field_name: str) -> str:
    """Strip an optional free-text value; None becomes ""."""
    if value is None:
        return ""
    if not isinstance(value, str):
        raise ValidationError(f"{field_name} must be a string")
    return value.strip()
