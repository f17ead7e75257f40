"""Field checks applied at the boundary of every mutating operation.

Each function returns the normalized value or raises ``InvalidArgumentError``.
"""
import re
from datetime import date, datetime
from typing import Dict, Iterable, List, Optional

from .errors import InvalidArgumentError
from .time_ranges import parse_clock_range, merge, TimeRange

EMAIL_RE = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")
PHONE_RE = re.compile(r"^\d{10}$")

WEEKDAYS = ["monday", "tuesday", "wednesday", "thursday", "friday", "saturday", "sunday"]


def validate_length(field: str, value: Optional[str], min_len: int = 0, max_len: Optional[int] = None, required: bool = True) -> Optional[str]:
    if value is None:
        if required:
            raise InvalidArgumentError(f"{field} is required")
        return None
    value = value.strip()
    if len(value) < min_len:
        raise InvalidArgumentError(f"{field} must be at least {min_len} characters")
    if max_len is not None and len(value) > max_len:
        raise InvalidArgumentError(f"{field} must be at most {max_len} characters")
    return value


def validate_name(value: Optional[str], field: str = "name") -> str:
    return validate_length(field, value, 3, 100)


def validate_email(value: Optional[str]) -> str:
    value = validate_length("email", value, 3, 255)
    if not EMAIL_RE.match(value):
        raise InvalidArgumentError("Invalid email address")
    return value.lower()


def validate_password(value: Optional[str]) -> str:
    if value is None or len(value) < 6:
        raise InvalidArgumentError("password must be at least 6 characters")
    return value


def validate_phone(value: Optional[str]) -> str:
    value = (value or "").strip()
    if not PHONE_RE.match(value):
        raise InvalidArgumentError("phone must be exactly 10 digits")
    return value


def validate_address(value: Optional[str]) -> str:
    return validate_length("address", value, 1, 255)


def validate_working_hours(raw: Dict[object, Iterable[str]]) -> Dict[int, List[str]]:
    """Normalize a weekday -> ranges mapping.

    Keys may be weekday indexes (0 = Monday) or names; ranges are
    ``HH:MM-HH:MM`` strings and must not overlap within a day.
    """
    result: Dict[int, List[str]] = {}
    for key, ranges in (raw or {}).items():
        weekday = _weekday_index(key)
        parsed = []
        for value in ranges:
            try:
                start, end = parse_clock_range(value)
            except ValueError as e:
                raise InvalidArgumentError(str(e))
            anchor = date(2000, 1, 3)
            parsed.append(TimeRange(datetime.combine(anchor, start), datetime.combine(anchor, end)))
        parsed.sort()
        if any(a.end > b.start for a, b in zip(parsed, parsed[1:])):
            raise InvalidArgumentError(f"Overlapping working hours on {WEEKDAYS[weekday]}")
        if parsed:
            result[weekday] = [r.label() for r in merge(parsed)]
    return result


def _weekday_index(key: object) -> int:
    if isinstance(key, int) and 0 <= key <= 6:
        return key
    text = str(key).strip().lower()
    if text.isdigit() and 0 <= int(text) <= 6:
        return int(text)
    if text in WEEKDAYS:
        return WEEKDAYS.index(text)
    raise InvalidArgumentError(f"Invalid weekday '{key}'")


def parse_date(value: str) -> date:
    try:
        return datetime.strptime(value, "%Y-%m-%d").date()
    except (TypeError, ValueError):
        raise InvalidArgumentError("Invalid date format. Use YYYY-MM-DD")
