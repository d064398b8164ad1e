"""Date normalization to the canonical ``DD-MM-YYYY`` form."""
from __future__ import annotations

import math
import re
from datetime import date, datetime, timedelta
from typing import Any, List, Optional

from .cells import is_empty

CANONICAL_FORMAT = "%d-%m-%Y"

# Locale string shapes accepted for viewership date cells
DATE_FORMATS: List[str] = [
    "%d-%m-%Y",
    "%d/%m/%Y",
    "%d.%m.%Y",
    "%Y-%m-%d",
    "%Y-%m-%d %H:%M:%S",
]

# Spreadsheet serial 25569 is 1970-01-01
_SERIAL_EPOCH = date(1970, 1, 1)
_SERIAL_OFFSET = 25569
_SERIAL_STRING_RX = re.compile(r"^\d{5}(\.\d+)?$")

MONTH_ABBREVIATIONS = {
    "jan": 1, "feb": 2, "mrt": 3, "mar": 3, "apr": 4, "mei": 5, "may": 5,
    "jun": 6, "jul": 7, "aug": 8, "sep": 9, "okt": 10, "oct": 10, "nov": 11, "dec": 12,
}

WEEKDAYS = ["Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday", "Sunday"]
DUTCH_WEEKDAYS = {
    "maandag": "Monday",
    "dinsdag": "Tuesday",
    "woensdag": "Wednesday",
    "donderdag": "Thursday",
    "vrijdag": "Friday",
    "zaterdag": "Saturday",
    "zondag": "Sunday",
}

_CANONICAL_RX = re.compile(r"^(\d{1,2})-(\d{1,2})-(\d{4})$")
_DAY_MONTH_RX = re.compile(r"^(\d{1,2})[-/.](\d{1,2})$")
_DAY_MONTH_YEAR_RX = re.compile(r"^(\d{1,2})[-/.](\d{1,2})[-/.](\d{4})$")
_DAY_MONTH_NAME_RX = re.compile(r"^(\d{1,2})[-\s]([A-Za-z]{3,})(?:[-\s](\d{4}))?$")


def format_canonical(value: date) -> str:
    return value.strftime(CANONICAL_FORMAT)


def serial_to_date(serial: float) -> Optional[date]:
    """Convert a spreadsheet serial day number; the time fraction is dropped."""

    try:
        return _SERIAL_EPOCH + timedelta(days=math.floor(serial - _SERIAL_OFFSET))
    except (OverflowError, ValueError):
        return None


def _try_parse_date(text: str) -> Optional[date]:
    for fmt in DATE_FORMATS:
        try:
            return datetime.strptime(text, fmt).date()
        except ValueError:
            continue
    return None


def normalize_date_cell(value: Any) -> str:
    """Return ``DD-MM-YYYY`` for a viewership date cell.

    Serial numbers, date objects and the locale strings in ``DATE_FORMATS`` are
    converted. Other strings come back stripped but otherwise untouched;
    empties and a zero serial give ``""``.
    """

    if is_empty(value) or isinstance(value, bool):
        return ""
    if isinstance(value, datetime):
        return format_canonical(value.date())
    if isinstance(value, date):
        return format_canonical(value)
    if isinstance(value, (int, float)):
        if not value:
            return ""
        parsed = serial_to_date(float(value))
        return format_canonical(parsed) if parsed else ""
    text = str(value).strip()
    if _SERIAL_STRING_RX.match(text):
        parsed = serial_to_date(float(text))
        return format_canonical(parsed) if parsed else text
    parsed = _try_parse_date(text)
    if parsed is not None:
        return format_canonical(parsed)
    return text


def normalize_schedule_date(token: Any, year: int) -> Optional[str]:
    """Normalize a schedule dates-row cell ("25-12", "25-Dec", "3-1-2025").

    Returns ``None`` when the token has no recognizable date shape.
    """

    if is_empty(token):
        return None
    if isinstance(token, datetime):
        return format_canonical(token.date())
    if isinstance(token, date):
        return format_canonical(token)
    text = str(token).strip()

    m = _DAY_MONTH_YEAR_RX.match(text)
    if m:
        return _build(int(m.group(1)), int(m.group(2)), int(m.group(3)))
    m = _DAY_MONTH_RX.match(text)
    if m:
        return _build(int(m.group(1)), int(m.group(2)), year)
    m = _DAY_MONTH_NAME_RX.match(text)
    if m:
        month = MONTH_ABBREVIATIONS.get(m.group(2).lower()[:3])
        if month is None:
            return None
        return _build(int(m.group(1)), month, int(m.group(3)) if m.group(3) else year)
    return None


def _build(day: int, month: int, year: int) -> Optional[str]:
    try:
        return format_canonical(date(year, month, day))
    except ValueError:
        return None


def parse_canonical_date(text: Any) -> Optional[date]:
    m = _CANONICAL_RX.match(str(text or "").strip())
    if not m:
        return None
    try:
        return date(int(m.group(3)), int(m.group(2)), int(m.group(1)))
    except ValueError:
        return None


def day_of_week(text: str) -> str:
    """English weekday name for a canonical date, ``""`` when unparsable."""

    parsed = parse_canonical_date(text)
    return WEEKDAYS[parsed.weekday()] if parsed else ""


def translate_weekday(name: str) -> str:
    return DUTCH_WEEKDAYS.get(str(name).strip().lower(), name)
