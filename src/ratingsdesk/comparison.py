"""Month-over-month comparison of single-period summaries."""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional, Sequence

import pandas as pd

from .labels import is_combined_label, sort_periods_chronologically
from .models import PeriodSummary

LOGGER = logging.getLogger("ratingsdesk.comparison")

COMPARISON_COLUMNS = [
    "label",
    "days",
    "total_viewers",
    "average_viewers_per_day",
    "peak_hour",
    "peak_day",
]


@dataclass(frozen=True)
class ComparisonHighlights:
    highest_total: Optional[str]
    highest_daily_average: Optional[str]


def average_viewers_per_day(summary: PeriodSummary) -> float:
    if summary.day_count == 0:
        return 0.0
    return float(summary.total_viewers) / summary.day_count


def compare_periods(summaries: Sequence[PeriodSummary]) -> pd.DataFrame:
    """Return one row per single-period summary, in chronological order.

    Combined summaries (labels of the form ``"A - B"``) are left out.
    """

    singles = [s for s in summaries if not is_combined_label(s.label)]
    rows = [
        {
            "label": s.label,
            "days": s.day_count,
            "total_viewers": s.total_viewers,
            "average_viewers_per_day": average_viewers_per_day(s),
            "peak_hour": s.peak_hour,
            "peak_day": s.peak_day,
        }
        for s in sort_periods_chronologically(singles)
    ]
    return pd.DataFrame(rows, columns=COMPARISON_COLUMNS)


def comparison_highlights(table: pd.DataFrame) -> ComparisonHighlights:
    """Labels with the highest total and the highest daily average.

    On ties the earliest period in the table wins.
    """

    if table is None or table.empty:
        return ComparisonHighlights(None, None)
    best_total = table.loc[table["total_viewers"].idxmax(), "label"]
    best_average = table.loc[table["average_viewers_per_day"].idxmax(), "label"]
    LOGGER.info("Highest total: %s; highest daily average: %s", best_total, best_average)
    return ComparisonHighlights(highest_total=str(best_total), highest_daily_average=str(best_average))
