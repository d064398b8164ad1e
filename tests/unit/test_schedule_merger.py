"""Unit tests for attaching schedules to viewership days."""
import sys
from pathlib import Path

sys.path.append(str(Path(__file__).resolve().parents[2] / "src"))

from ratingsdesk.aggregation import aggregate_period
from ratingsdesk.models import DailyRecord, ProgramEntry, ScheduleSet
from ratingsdesk.schedule_merger import merge_schedule, merge_schedule_into_periods


def _days():
    return [DailyRecord(date="04-11-2024", total_viewers=10), DailyRecord(date="05-11-2024", total_viewers=20)]


def _schedule():
    return ScheduleSet(
        week_numbers=[45],
        reference_year=2024,
        days_to_programs={"04-11-2024": [ProgramEntry(title="Journaal", start_time="20:00")]},
    )


def test_programs_attach_by_date_only():
    days = _days()
    schedule = _schedule()

    merged = merge_schedule(days, schedule.days_to_programs)

    assert [p.title for p in merged[0].programs] == ["Journaal"]
    assert merged[1].programs is None
    assert days[0].programs is None

    merged[0].programs[0].title = "Gewijzigd"
    assert schedule.days_to_programs["04-11-2024"][0].title == "Journaal"


def test_missing_schedule_is_a_no_op():
    days = _days()

    merged = merge_schedule(days, None)

    assert merged == days
    assert merged[0] is not days[0]


def test_merge_into_periods_returns_new_summaries():
    summary = aggregate_period(_days(), "November 2024")

    merged = merge_schedule_into_periods([summary], _schedule())

    assert merged[0] is not summary
    assert merged[0].days[0].programs[0].title == "Journaal"
    assert summary.days[0].programs is None
    assert merge_schedule_into_periods([summary], None)[0].days == summary.days
