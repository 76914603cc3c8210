from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal, InvalidOperation
from typing import Any

from techasset.time_utils import parse_iso_date, parse_iso_datetime


class ValidationError(ValueError):
    """400-level input problem."""


class NotFoundError(LookupError):
    """404-level: the addressed record does not exist."""


class ConflictError(ValueError):
    """409-level business rule conflict (e.g., a feedback link that was already used)."""


# Field coercion
#
# Request bodies come from a browser client that sends "" for cleared inputs,
# numbers as strings, and omits keys freely. Every helper maps "absent" to
# None so omitted optionals are stored as NULL.

# Bounds of a signed 64-bit INTEGER column
INT_MIN = -(2 ** 63)
INT_MAX = 2 ** 63 - 1


def to_body(value: Any) -> dict[str, Any]:
    """Parsed JSON request body. A missing body counts as an empty object."""
    if value is None:
        return {}
    if not isinstance(value, dict):
        raise ValidationError("Request body must be a JSON object")
    return value


def to_text(value: Any) -> str | None:
    if value is None:
        return None
    text = str(value).strip()
    return text if text else None


def to_raw_text(value: Any) -> str | None:
    """Like to_text but keeps surrounding whitespace (secrets, note bodies)."""
    if value is None:
        return None
    text = str(value)
    return text if text != "" else None


def to_int(value: Any, field: str) -> int | None:
    result = _parse_int(value, field)
    if result is not None and not INT_MIN <= result <= INT_MAX:
        raise ValidationError(f"{field} is out of range")
    return result


def _parse_int(value: Any, field: str) -> int | None:
    if value is None or value == "":
        return None
    if isinstance(value, bool):
        return int(value)
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        if not value.is_integer():
            raise ValidationError(f"{field} must be an integer")
        return int(value)
    text = str(value).strip()
    if not text:
        return None
    try:
        return int(text)
    except ValueError:
        try:
            as_float = float(text)
        except ValueError:
            raise ValidationError(f"{field} must be an integer")
        if not as_float.is_integer():
            raise ValidationError(f"{field} must be an integer")
        return int(as_float)


def to_decimal(value: Any, field: str) -> Decimal | None:
    if value is None or value == "":
        return None
    if isinstance(value, bool):
        raise ValidationError(f"{field} must be a number")
    if isinstance(value, Decimal):
        return value
    text = str(value).strip().replace(",", "")
    if not text:
        return None
    try:
        result = Decimal(text)
    except InvalidOperation:
        raise ValidationError(f"{field} must be a number")
    if not result.is_finite():
        raise ValidationError(f"{field} must be a number")
    return result


def to_float(value: Any, field: str) -> float | None:
    number = to_decimal(value, field)
    return float(number) if number is not None else None


def to_bool(value: Any, default: bool | None = None) -> bool | None:
    if value is None or value == "":
        return default
    if isinstance(value, bool):
        return value
    if isinstance(value, (int, float)):
        return bool(value)
    text = str(value).strip().lower()
    if text in ("1", "true", "yes", "on"):
        return True
    if text in ("0", "false", "no", "off"):
        return False
    return default


def to_date(value: Any, field: str) -> date | None:
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    try:
        return parse_iso_date(str(value))
    except ValueError:
        raise ValidationError(f"{field} must be a date (YYYY-MM-DD)")


def to_datetime(value: Any, field: str) -> datetime | None:
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return value
    try:
        return parse_iso_datetime(str(value))
    except ValueError:
        raise ValidationError(f"{field} must be an ISO-8601 timestamp")


def to_list(value: Any) -> list:
    """JSON list fields: anything that is not a list becomes []."""
    return list(value) if isinstance(value, (list, tuple)) else []


def to_dict_list(value: Any) -> list[dict]:
    return [item for item in to_list(value) if isinstance(item, dict)]
