"""Reporting frames and workbook export.

Every period gets its own sheet (hourly profile followed by the daily table),
plus a comparison sheet over the single-month periods and, when a schedule is
supplied, a sheet listing its programs.
"""
from __future__ import annotations

import logging
from dataclasses import asdict
from pathlib import Path
from typing import Optional, Sequence

import pandas as pd
from openpyxl import Workbook

from .comparison import compare_periods, comparison_highlights
from .models import HOURS_PER_DAY, PeriodSummary, ScheduleSet

LOGGER = logging.getLogger("ratingsdesk.export")

DEFAULT_WORKBOOK_NAME = "Ratings_Summary.xlsx"


def _safe_sheet_name(name: str, taken: Sequence[str] = ()) -> str:
    """Return a sheet-safe, unique string (openpyxl constraints)."""
    sanitized = "".join(ch if ch not in '[]:*?/\\' else '_' for ch in str(name))
    base = sanitized[:31] if sanitized else "Sheet"
    candidate = base
    n = 2
    while candidate in taken:
        suffix = f"_{n}"
        candidate = base[: 31 - len(suffix)] + suffix
        n += 1
    return candidate


def hourly_frame(summary: PeriodSummary) -> pd.DataFrame:
    """One row per hour of day with totals, maxima and averages."""

    df = pd.DataFrame(
        {
            "hour": list(range(HOURS_PER_DAY)),
            "slot": [f"{h:02d}:00" for h in range(HOURS_PER_DAY)],
            "total_viewers": summary.total_viewers_per_hour,
            "max_viewers": summary.max_viewers_per_hour,
            "average_viewers": summary.average_hourly_viewers,
        }
    )
    if summary.average_age_groups:
        df["average_13_plus"] = [a.viewers_13_plus for a in summary.average_age_groups]
        df["average_50_plus"] = [a.viewers_50_plus for a in summary.average_age_groups]
        df["average_65_plus"] = [a.viewers_65_plus for a in summary.average_age_groups]
    df["is_peak"] = df["hour"] == summary.peak_hour
    return df


def daily_frame(summary: PeriodSummary) -> pd.DataFrame:
    """One row per day: date, weekday, daily total and the 24 hourly figures."""

    hour_cols = [f"h{h:02d}" for h in range(HOURS_PER_DAY)]
    rows = []
    for day in summary.days:
        row = {"date": day.date, "day_of_week": day.day_of_week, "total_viewers": day.total_viewers}
        row.update(dict(zip(hour_cols, day.hourly_viewers)))
        row["programs"] = len(day.programs) if day.programs else 0
        rows.append(row)
    return pd.DataFrame(rows, columns=["date", "day_of_week", "total_viewers", *hour_cols, "programs"])


def program_frame(schedule: Optional[ScheduleSet]) -> pd.DataFrame:
    columns = ["date", "start_time", "end_time", "duration", "title", "category", "is_repeat", "sequence", "week", "notes"]
    if schedule is None:
        return pd.DataFrame(columns=columns)
    rows = []
    for day, entries in schedule.days_to_programs.items():
        for entry in entries:
            data = asdict(entry)
            data["date"] = day
            rows.append({c: data.get(c) for c in columns})
    return pd.DataFrame(rows, columns=columns)


def _write_sheet(ws, df: pd.DataFrame) -> None:
    if df.empty:
        ws.append(["No data available"])
        return
    ws.append(list(df.columns))
    for row in df.itertuples(index=False, name=None):
        ws.append([None if (isinstance(v, float) and pd.isna(v)) else (v.item() if hasattr(v, "item") else v) for v in row])


def export_summaries_to_workbook(
    summaries: Sequence[PeriodSummary],
    output_path: str | Path,
    schedule: Optional[ScheduleSet] = None,
) -> Optional[Path]:
    """Write one sheet per period plus a comparison sheet.

    ``output_path`` may be a directory, in which case the workbook is named
    ``Ratings_Summary.xlsx``. Returns ``None`` when there is nothing to export.
    """

    if not summaries:
        LOGGER.info("Export: nothing to export (no periods).")
        return None

    file_path = Path(output_path)
    if file_path.suffix.lower() != ".xlsx":
        file_path = file_path / DEFAULT_WORKBOOK_NAME
    file_path.parent.mkdir(parents=True, exist_ok=True)

    wb = Workbook()
    titles = []
    for idx, summary in enumerate(summaries):
        ws = wb.active if idx == 0 else wb.create_sheet()
        ws.title = _safe_sheet_name(summary.label, titles)
        titles.append(ws.title)
        _write_sheet(ws, hourly_frame(summary))
        ws.append([])
        _write_sheet(ws, daily_frame(summary))
        LOGGER.info("Export: sheet '%s' days=%d", ws.title, summary.day_count)

    ws = wb.create_sheet(_safe_sheet_name("Comparison", titles))
    titles.append(ws.title)
    table = compare_periods(summaries)
    _write_sheet(ws, table)
    highlights = comparison_highlights(table)
    if highlights.highest_total is not None:
        ws.append([])
        ws.append(["Highest total", highlights.highest_total])
        ws.append(["Highest daily average", highlights.highest_daily_average])

    if schedule is not None:
        ws = wb.create_sheet(_safe_sheet_name("Programs", titles))
        _write_sheet(ws, program_frame(schedule))

    wb.save(file_path)
    LOGGER.info("Export saved: %s | periods=%d", str(file_path), len(summaries))
    return file_path
