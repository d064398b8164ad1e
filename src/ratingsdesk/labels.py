"""Period labels derived from source filenames, and chronological ordering."""
from __future__ import annotations

import re
from typing import List, Sequence, Tuple

from .models import PeriodSummary

UNKNOWN_LABEL = "Unknown Month"

# Substring -> display name; checked in order, first hit wins
MONTH_NAMES = {
    "jan": "Januari",
    "feb": "Februari",
    "maart": "Maart",
    "march": "Maart",
    "april": "April",
    "mei": "Mei",
    "may": "Mei",
    "juni": "Juni",
    "june": "Juni",
    "juli": "Juli",
    "july": "Juli",
    "augustus": "Augustus",
    "august": "Augustus",
    "september": "September",
    "oktober": "Oktober",
    "october": "Oktober",
    "november": "November",
    "december": "December",
    "dec": "December",
}

MONTH_ORDER = {
    "Januari": 1, "Februari": 2, "Maart": 3, "April": 4, "Mei": 5, "Juni": 6,
    "Juli": 7, "Augustus": 8, "September": 9, "Oktober": 10, "November": 11, "December": 12,
}

_NOISE = ("kopie van ", "kijkcijfers ", "berekening ")
_YEAR_RX = re.compile(r"\d{4}")
_LABEL_RX = re.compile(r"([A-Za-z]+)\s+(\d{4})")


def label_from_filename(filename: str) -> str:
    """Map e.g. "Kijkcijfers berekening NOVEMBER2024.xlsx" to "November 2024"."""

    clean = str(filename).lower()
    for noise in _NOISE:
        clean = clean.replace(noise, "", 1)
    for needle, month in MONTH_NAMES.items():
        if needle in clean:
            m = _YEAR_RX.search(clean)
            return f"{month} {m.group(0)}" if m else month
    return UNKNOWN_LABEL


def label_sort_key(label: str) -> Tuple[int, int]:
    """(year, month) of a "Month YYYY" label; (0, 0) when unrecognized."""

    m = _LABEL_RX.search(label or "")
    if not m:
        return (0, 0)
    return (int(m.group(2)), MONTH_ORDER.get(m.group(1), 0))


def is_combined_label(label: str) -> bool:
    return " - " in (label or "")


def sort_periods_chronologically(periods: Sequence[PeriodSummary]) -> List[PeriodSummary]:
    return sorted(periods, key=lambda p: label_sort_key(p.label))


def upsert_period(periods: Sequence[PeriodSummary], summary: PeriodSummary) -> List[PeriodSummary]:
    """Replace the period with the same label (or append), then sort."""

    out = [p for p in periods if p.label != summary.label]
    out.append(summary)
    return sort_periods_chronologically(out)
