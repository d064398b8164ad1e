from __future__ import annotations

import sys
from pathlib import Path

from openpyxl import load_workbook

sys.path.append(str(Path(__file__).resolve().parents[1] / "src"))

from ratingsdesk.aggregation import aggregate_period, aggregate_periods
from ratingsdesk.comparison import compare_periods, comparison_highlights
from ratingsdesk.export import daily_frame, export_summaries_to_workbook, hourly_frame, program_frame
from ratingsdesk.models import DailyRecord, ProgramEntry, ScheduleSet


def _day(date: str, total: int, hour: int = 20) -> DailyRecord:
    hourly = [0] * 24
    hourly[hour] = total // 4
    return DailyRecord(date=date, day_of_week="", total_viewers=total, hourly_viewers=hourly)


def _periods():
    november = aggregate_period([_day("01-11-2024", 1000), _day("02-11-2024", 1000)], "November 2024")
    december = aggregate_period([_day("01-12-2024", 1500, hour=21)], "December 2024")
    return november, december


def test_comparison_excludes_combined_and_sorts():
    november, december = _periods()
    combined = aggregate_periods([november, december])

    table = compare_periods([december, combined, november])

    assert table["label"].tolist() == ["November 2024", "December 2024"]
    assert table["days"].tolist() == [2, 1]
    assert table["average_viewers_per_day"].tolist() == [1000.0, 1500.0]
    assert table["peak_hour"].tolist() == [20, 21]


def test_comparison_highlights():
    november, december = _periods()

    highlights = comparison_highlights(compare_periods([november, december]))

    assert highlights.highest_total == "November 2024"
    assert highlights.highest_daily_average == "December 2024"
    assert comparison_highlights(compare_periods([])).highest_total is None


def test_reporting_frames():
    november, _ = _periods()
    schedule = ScheduleSet(
        week_numbers=[44],
        reference_year=2024,
        days_to_programs={"01-11-2024": [ProgramEntry(title="Journaal", start_time="20:00", end_time="20:30")]},
    )

    hourly = hourly_frame(november)
    daily = daily_frame(november)
    programs = program_frame(schedule)

    assert len(hourly) == 24
    assert hourly.loc[20, "total_viewers"] == 500
    assert bool(hourly.loc[20, "is_peak"]) is True
    assert daily["date"].tolist() == ["01-11-2024", "02-11-2024"]
    assert daily.loc[0, "h20"] == 250
    assert programs.loc[0, "date"] == "01-11-2024"
    assert programs.loc[0, "title"] == "Journaal"
    assert program_frame(None).empty


def test_export_workbook_has_sheet_per_period(tmp_path):
    november, december = _periods()
    combined = aggregate_periods([november, december])
    schedule = ScheduleSet(week_numbers=[44], reference_year=2024, days_to_programs={})

    path = export_summaries_to_workbook([november, december, combined], tmp_path / "out", schedule=schedule)

    assert path == tmp_path / "out" / "Ratings_Summary.xlsx"
    wb = load_workbook(path)
    assert wb.sheetnames == [
        "November 2024",
        "December 2024",
        "November 2024 - December 2024",
        "Comparison",
        "Programs",
    ]
    ws = wb["November 2024"]
    assert ws["A1"].value == "hour"
    assert ws.cell(row=27, column=1).value == "date"
    comparison = wb["Comparison"]
    assert comparison.max_row == 6
    assert [comparison["A2"].value, comparison["A3"].value] == ["November 2024", "December 2024"]
    assert [comparison["A5"].value, comparison["B5"].value] == ["Highest total", "November 2024"]
    assert [comparison["A6"].value, comparison["B6"].value] == ["Highest daily average", "December 2024"]
    assert wb["Programs"]["A1"].value == "No data available"


def test_export_nothing_returns_none(tmp_path):
    assert export_summaries_to_workbook([], tmp_path / "empty.xlsx") is None
    assert not (tmp_path / "empty.xlsx").exists()
