"""Time-slot and clock-time parsing.

Viewership exports label hours in several shapes ("02:00-02:59", "26-00",
"2:00"). Slots 24, 25 and 26 belong to the tail of the broadcast day and
collapse onto hours 0, 1 and 2; every other hour passes through unchanged.
"""
from __future__ import annotations

import math
import numbers
import re
from datetime import time
from typing import Any, Optional

from .cells import cell_text

NOT_FOUND = -1
MINUTES_PER_DAY = 24 * 60

# Checked in order; first match wins.
_HOUR_PATTERNS = [
    re.compile(r"^(\d{2}):00-\d{2}:59$"),
    re.compile(r"^(\d{2})-\d{2}$"),
    re.compile(r"^(\d{1,2}):00$"),
    re.compile(r"^(\d{1,2})$"),
    re.compile(r"^(\d{1,2})[,.]\d{2}$"),
]

TIME_TOKEN_RX = re.compile(r"^\d{1,2}[,.:]\d{2}$")
_CLOCK_RX = re.compile(r"^(\d{1,2})(?:[,.:](\d{1,2}))?$")


def parse_hour(token: Any) -> int:
    """Return the hour index 0-23 for a time-slot token, or ``NOT_FOUND``."""

    text = cell_text(token)
    if not text:
        return NOT_FOUND
    hour = NOT_FOUND
    for pattern in _HOUR_PATTERNS:
        m = pattern.match(text)
        if m:
            hour = int(m.group(1))
            break
    if hour < 0 or hour > 26:
        return NOT_FOUND
    if hour >= 24:
        hour = hour % 24
    return hour


def is_time_token(value: Any) -> bool:
    return bool(TIME_TOKEN_RX.match(cell_text(value)))


def time_cell_text(value: Any) -> str:
    """Text form of a time cell a spreadsheet stored as a number or clock value.

    Excel keeps "20.30" as the float 20.3 and "20.00" as 20; both come back
    as "20.30" / "20.00". ``datetime.time`` values render as "H:MM". Anything
    else gives "".
    """

    if isinstance(value, time):
        return f"{value.hour}:{value.minute:02d}"
    if isinstance(value, bool) or not isinstance(value, numbers.Real) or not math.isfinite(value):
        return ""
    hours = math.floor(value)
    minutes = int(round((value - hours) * 100))
    if hours < 0 or minutes >= 60:
        return ""
    return f"{hours}.{minutes:02d}"


def normalize_time_token(token: Any) -> Optional[str]:
    """Normalize "8,00" / "8.00" / "8:00" / "8" to "08:00"; hours >= 24 wrap."""

    m = _CLOCK_RX.match(cell_text(token))
    if not m:
        return None
    hours = int(m.group(1))
    if hours >= 24:
        hours = hours % 24
    minutes = (m.group(2) or "00").rjust(2, "0")
    return f"{hours:02d}:{minutes}"


def clock_to_minutes(hhmm: str) -> int:
    hours, _, minutes = hhmm.partition(":")
    return int(hours or 0) * 60 + int(minutes or 0)


def add_minutes(hhmm: str, minutes: int) -> str:
    total = (clock_to_minutes(hhmm) + int(minutes)) % MINUTES_PER_DAY
    return f"{total // 60:02d}:{total % 60:02d}"


def minutes_between(start: str, end: str) -> int:
    """Minutes from ``start`` to ``end``, rolling over midnight when negative."""

    diff = clock_to_minutes(end) - clock_to_minutes(start)
    if diff < 0:
        diff += MINUTES_PER_DAY
    return diff
