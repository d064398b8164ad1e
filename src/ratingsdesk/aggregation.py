"""Per-hour aggregation of DailyRecords into PeriodSummaries.

Both the single-period and the multi-period paths derive every per-hour figure
from the day records themselves; combined periods never average the already
aggregated numbers of their inputs. Age-group averages are the exception: only
the per-period averages survive, so they are recombined weighted by day count.
"""
from __future__ import annotations

import logging
from typing import Dict, Iterable, List, Optional, Sequence, Tuple

import numpy as np

from .dates import parse_canonical_date
from .errors import EmptyInput
from .models import HOURS_PER_DAY, AgeGroupEntry, DailyRecord, PeriodSummary

LOGGER = logging.getLogger("ratingsdesk.aggregation")

EVENING_HOURS = range(18, 24)


def sort_records_by_date(records: Iterable[DailyRecord]) -> List[DailyRecord]:
    """Chronological order; records with an unparsable date keep their position."""

    out = list(records)
    dated = [(i, parse_canonical_date(r.date)) for i, r in enumerate(out)]
    slots = [i for i, d in dated if d is not None]
    ordered = sorted((d, i) for i, d in dated if d is not None)
    source = list(out)
    for slot, (_, i) in zip(slots, ordered):
        out[slot] = source[i]
    return out


def _to_list(values: np.ndarray) -> List[float]:
    out: List[float] = []
    for v in values.tolist():
        out.append(int(v) if float(v).is_integer() else float(v))
    return out


def _round_half_up(values: np.ndarray) -> np.ndarray:
    return np.floor(values + 0.5)


def hourly_statistics(days: Sequence[DailyRecord]) -> Tuple[List[float], List[float], List[int]]:
    """Return (totals, maxima, rounded averages) per hour over ``days``."""

    if not days:
        zeros = [0] * HOURS_PER_DAY
        return list(zeros), list(zeros), list(zeros)
    matrix = np.asarray([d.hourly_viewers for d in days], dtype=float)
    totals = matrix.sum(axis=0)
    maxima = np.maximum(matrix.max(axis=0), 0)
    averages = _round_half_up(totals / len(days))
    return _to_list(totals), _to_list(maxima), [int(v) for v in averages.tolist()]


def select_peak_hour(totals_per_hour: Sequence[float]) -> int:
    """Pick the peak hour from cumulative per-hour totals.

    Among the hours tied at the maximum, the latest evening hour (18-23) wins;
    without an evening tie the latest tied hour wins. No data gives 0.
    """

    if len(totals_per_hour) == 0:
        return 0
    max_total = max(totals_per_hour)
    if max_total <= 0:
        return 0
    tied = [h for h, v in enumerate(totals_per_hour) if v == max_total]
    evening = [h for h in tied if h in EVENING_HOURS]
    peak = evening[-1] if evening else tied[-1]
    return peak if 0 <= peak < HOURS_PER_DAY else 0


def select_peak_day(days: Sequence[DailyRecord]) -> str:
    """Date of the first day with the largest total; ``""`` when none is positive."""

    best_date = ""
    best_total = 0
    for day in days:
        if day.total_viewers > best_total:
            best_total = day.total_viewers
            best_date = day.date
    return best_date


def _age_matrix(entries: Sequence[AgeGroupEntry]) -> np.ndarray:
    return np.asarray(
        [[e.viewers_13_plus, e.viewers_50_plus, e.viewers_65_plus] for e in entries],
        dtype=float,
    )


def _age_entries(matrix: np.ndarray) -> List[AgeGroupEntry]:
    return [
        AgeGroupEntry(viewers_13_plus=int(a), viewers_50_plus=int(b), viewers_65_plus=int(c))
        for a, b, c in matrix.tolist()
    ]


def _age_group_totals(days: Sequence[DailyRecord]) -> Optional[np.ndarray]:
    carrying = [d.age_groups for d in days if d.age_groups is not None]
    if not carrying:
        return None
    total = np.zeros((HOURS_PER_DAY, 3))
    for groups in carrying:
        total += _age_matrix(groups)
    return total


def aggregate_period(days: Sequence[DailyRecord], label: str) -> PeriodSummary:
    """Reduce a sorted list of DailyRecords into one PeriodSummary."""

    day_list = list(days)
    totals, maxima, averages = hourly_statistics(day_list)
    peak_hour = select_peak_hour(totals)
    total_viewers = sum(d.total_viewers for d in day_list)

    average_age = None
    total_age = None
    age_sum = _age_group_totals(day_list)
    if age_sum is not None:
        total_age = _age_entries(age_sum)
        average_age = _age_entries(_round_half_up(age_sum / len(day_list)))

    summary = PeriodSummary(
        label=label,
        days=day_list,
        average_hourly_viewers=averages,
        max_viewers_per_hour=maxima,
        total_viewers_per_hour=totals,
        peak_day=select_peak_day(day_list),
        peak_hour=peak_hour,
        total_viewers=total_viewers,
        average_age_groups=average_age,
        total_age_groups=total_age,
    )
    LOGGER.info(
        "%s: %d day(s), %s total viewers, peak day %s, peak hour %02d:00",
        label,
        len(day_list),
        total_viewers,
        summary.peak_day or "-",
        peak_hour,
    )
    return summary


def _union_days(summaries: Sequence[PeriodSummary]) -> List[DailyRecord]:
    union: Dict[str, DailyRecord] = {}
    for summary in summaries:
        for day in summary.days:
            if day.date in union:
                LOGGER.warning("Day %s appears in more than one period; keeping the one from %s", day.date, summary.label)
            union[day.date] = day.copy()
    return sort_records_by_date(union.values())


def aggregate_periods(summaries: Sequence[PeriodSummary]) -> PeriodSummary:
    """Combine several PeriodSummaries into one.

    Days are unioned by date (a later period overwrites an earlier one for the
    same date) and every per-hour figure is recomputed from the union.
    """

    if not summaries:
        raise EmptyInput("No data provided for aggregation")
    if len(summaries) == 1:
        return summaries[0]

    all_days = _union_days(summaries)
    totals, maxima, averages = hourly_statistics(all_days)
    peak_hour = select_peak_hour(totals)
    total_viewers = sum(d.total_viewers for d in all_days)
    label = f"{summaries[0].label} - {summaries[-1].label}"

    has_age_data = False
    age_total = np.zeros((HOURS_PER_DAY, 3))
    age_weighted = np.zeros((HOURS_PER_DAY, 3))
    for summary in summaries:
        if summary.total_age_groups:
            has_age_data = True
            age_total += _age_matrix(summary.total_age_groups)
        if summary.average_age_groups:
            has_age_data = True
            age_weighted += _age_matrix(summary.average_age_groups) * summary.day_count
    if has_age_data and all_days:
        age_weighted = _round_half_up(age_weighted / len(all_days))

    LOGGER.info("Combined %d period(s) into %d unique day(s) for %s", len(summaries), len(all_days), label)
    return PeriodSummary(
        label=label,
        days=all_days,
        average_hourly_viewers=averages,
        max_viewers_per_hour=maxima,
        total_viewers_per_hour=totals,
        peak_day=select_peak_day(all_days),
        peak_hour=peak_hour,
        total_viewers=total_viewers,
        average_age_groups=_age_entries(age_weighted) if has_age_data else None,
        total_age_groups=_age_entries(age_total) if has_age_data else None,
    )
