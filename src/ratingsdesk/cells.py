"""Coercion helpers for heterogeneous spreadsheet cells."""
from __future__ import annotations

import math
from typing import Any, Sequence

import numpy as np
import pandas as pd


def is_empty(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, str):
        return value.strip() == ""
    try:
        return bool(pd.isna(value))
    except (TypeError, ValueError):
        return False


def cell_text(value: Any) -> str:
    """Return a stripped string form; integral floats lose their ``.0``."""

    if is_empty(value):
        return ""
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value).strip()


def cell_at(row: Sequence[Any], index: int) -> Any:
    if index < 0 or index >= len(row):
        return None
    return row[index]


def to_number(value: Any) -> float:
    """Convert a cell to float, treating empties and garbage as 0.

    Strings may carry thousands separators, a comma decimal mark or a
    trailing ``%`` (the sign is dropped, not applied).
    """

    if is_empty(value):
        return 0.0
    if isinstance(value, bool):
        return float(value)
    if isinstance(value, (int, float, np.number)):
        val = float(value)
        return 0.0 if math.isnan(val) else val
    t = str(value).strip().replace("%", "").replace(" ", "")
    if "," in t and "." in t:
        # 1.234,5 or 1,234.5: the right-most mark is the decimal one
        if t.rfind(",") > t.rfind("."):
            t = t.replace(".", "").replace(",", ".")
        else:
            t = t.replace(",", "")
    elif "," in t:
        t = t.replace(",", ".")
    try:
        val = float(t)
    except ValueError:
        return 0.0
    if math.isnan(val):
        return 0.0
    return val


def round_half_up(value: float) -> int:
    """Round .5 away from zero for non-negative values (spreadsheet rounding)."""

    return int(math.floor(value + 0.5))
