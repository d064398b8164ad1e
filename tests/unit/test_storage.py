"""Unit tests for the JSON store and (de)serialization."""
import sys
from pathlib import Path

sys.path.append(str(Path(__file__).resolve().parents[2] / "src"))

from ratingsdesk.aggregation import aggregate_period
from ratingsdesk.models import AgeGroupEntry, DailyRecord, ProgramEntry, ScheduleSet, empty_age_groups
from ratingsdesk.storage import (
    JsonStore,
    clear_all,
    load_periods,
    load_schedule,
    save_periods,
    save_schedule,
    schedule_from_dict,
    schedule_to_dict,
)


def _schedule() -> ScheduleSet:
    return ScheduleSet(
        week_numbers=[51, 52],
        reference_year=2024,
        week_number=51,
        days_to_programs={
            "31-12-2024": [
                ProgramEntry(title="Oudejaarsconference", start_time="22:00", end_time="23:30", duration=90, week=52),
            ],
            "23-12-2024": [
                ProgramEntry(title="Journaal", start_time="20:00", end_time="20:30", duration=30, sequence=1, notes="a"),
                ProgramEntry(title="Weer", start_time="20:00", id="23-12-2024-2000-2", sequence=2, is_repeat=True),
            ],
        },
    )


def test_schedule_round_trip_keeps_key_and_entry_order():
    schedule = _schedule()

    restored = schedule_from_dict(schedule_to_dict(schedule))

    assert restored == schedule
    assert list(restored.days_to_programs) == ["31-12-2024", "23-12-2024"]
    assert [p.title for p in restored.days_to_programs["23-12-2024"]] == ["Journaal", "Weer"]


def test_store_save_load_clear(tmp_path):
    store = JsonStore(tmp_path / "store")

    assert store.load("viewer_data") is None
    store.save("viewer_data", {"a": [1, 2]})
    assert store.load("viewer_data") == {"a": [1, 2]}
    store.clear("viewer_data")
    store.clear("viewer_data")
    assert store.load("viewer_data") is None


def test_unreadable_document_is_treated_as_absent(tmp_path):
    store = JsonStore(tmp_path)
    (tmp_path / "program_data.json").write_text("{not json", encoding="utf-8")

    assert store.load("program_data") is None
    assert load_schedule(store) is None


def test_periods_and_schedule_persist(tmp_path):
    store = JsonStore(tmp_path)
    ages = empty_age_groups()
    ages[20] = AgeGroupEntry(45, 35, 20)
    hourly = [0] * 24
    hourly[20] = 100
    day = DailyRecord(
        date="23-12-2024",
        day_of_week="maandag",
        total_viewers=400,
        hourly_viewers=hourly,
        age_groups=ages,
        programs=[ProgramEntry(title="Journaal", start_time="20:00")],
    )
    summary = aggregate_period([day], "December 2024")

    save_periods(store, [summary])
    save_schedule(store, _schedule())

    assert load_periods(store) == [summary]
    assert load_schedule(store) == _schedule()

    clear_all(store)
    assert load_periods(store) == []
    assert load_schedule(store) is None
