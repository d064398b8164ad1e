"""Attach parsed program schedules to viewership days by canonical date."""
from __future__ import annotations

import logging
from dataclasses import replace
from typing import Dict, List, Mapping, Optional, Sequence

from .models import DailyRecord, PeriodSummary, ProgramEntry, ScheduleSet

LOGGER = logging.getLogger("ratingsdesk.schedule")


def merge_schedule(
    records: Sequence[DailyRecord],
    days_to_programs: Optional[Mapping[str, List[ProgramEntry]]],
) -> List[DailyRecord]:
    """Return copies of ``records`` with ``programs`` set where the date matches.

    Records without a matching date keep ``programs`` unset. A missing or empty
    schedule returns plain copies.
    """

    merged: List[DailyRecord] = []
    matched = 0
    for record in records:
        copy = record.copy()
        if days_to_programs and record.date in days_to_programs:
            copy.programs = [replace(p) for p in days_to_programs[record.date]]
            matched += 1
        merged.append(copy)
    if days_to_programs:
        LOGGER.info("Attached programs to %d of %d day(s)", matched, len(merged))
    return merged


def merge_schedule_into_periods(
    summaries: Sequence[PeriodSummary],
    schedule: Optional[ScheduleSet],
) -> List[PeriodSummary]:
    """Apply :func:`merge_schedule` to every summary, returning new summaries."""

    days: Dict[str, List[ProgramEntry]] = schedule.days_to_programs if schedule else {}
    return [replace(s, days=merge_schedule(s.days, days)) for s in summaries]
