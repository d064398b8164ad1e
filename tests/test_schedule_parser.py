import sys
from pathlib import Path

import pytest

sys.path.append(str(Path(__file__).resolve().parents[1] / "src"))

from ratingsdesk.config import ScheduleConfig
from ratingsdesk.errors import InvalidRow, NoDayColumns
from ratingsdesk.models import ProgramEntry
from ratingsdesk.schedule_parser import build_program, calculate_end_times, parse_schedule


def _week_grid():
    return [
        ["45", "Programmering NL1 2024", ""],
        ["", "maandag", "dinsdag"],
        ["", "4-11", "5-11"],
        ["Opmerkingen", "", ""],
        ["20,00", "Journaal", "Film: De Tocht (90)"],
        ["20,30", "Sport", "x"],
        ["21,15", "Documentaire herhaling", ""],
    ]


def test_parse_schedule_maps_columns_to_dates():
    schedule = parse_schedule(_week_grid())

    assert schedule.week_number == 45
    assert schedule.week_numbers == [45]
    assert schedule.reference_year == 2024
    assert list(schedule.days_to_programs) == ["04-11-2024", "05-11-2024"]
    monday = schedule.days_to_programs["04-11-2024"]
    assert [p.title for p in monday] == ["Journaal", "Sport", "Documentaire herhaling"]
    assert all(p.day_of_week == "Monday" for p in monday)
    assert monday[0].original_time == "20,00"


def test_end_times_are_back_filled_from_next_start():
    monday = parse_schedule(_week_grid()).days_to_programs["04-11-2024"]

    assert [p.start_time for p in monday] == ["20:00", "20:30", "21:15"]
    assert [p.end_time for p in monday] == ["20:30", "21:15", "22:15"]
    assert [p.duration for p in monday] == [30, 45, 60]
    assert monday[2].is_repeat is True


def test_title_duration_and_category_are_extracted():
    tuesday = parse_schedule(_week_grid()).days_to_programs["05-11-2024"]

    assert len(tuesday) == 1
    film = tuesday[0]
    assert film.title == "Film: De Tocht"
    assert film.category == "Film"
    assert film.duration == 90
    assert film.end_time == "21:30"


def test_program_ids_are_unique_and_stable():
    first = parse_schedule(_week_grid())
    second = parse_schedule(_week_grid())

    ids = [p.id for p in first.programs]
    assert len(ids) == len(set(ids))
    assert ids == [p.id for p in second.programs]


def test_programs_sharing_a_start_time_are_sequenced():
    grid = [
        ["45", "2024", ""],
        ["", "maandag", ""],
        ["", "4-11", ""],
        ["20,00", "Nieuws", ""],
        ["20,00", "Weer", ""],
        ["20,30", "Sport", ""],
    ]

    monday = parse_schedule(grid).days_to_programs["04-11-2024"]

    assert [p.title for p in monday] == ["Nieuws", "Weer", "Sport"]
    assert [p.sequence for p in monday] == [1, 2, None]
    assert [p.end_time for p in monday] == ["20:15", "20:30", "21:30"]
    assert "Multiple programs" in monday[1].notes


def test_later_week_declarations_are_collected():
    grid = [
        ["51", "2024", ""],
        ["", "maandag", ""],
        ["", "23-12", ""],
        ["20,00", "A", ""],
        ["21,00", "B", ""],
        ["22,00", "C", ""],
        ["52", "", ""],
        ["20,00", "D", ""],
    ]

    schedule = parse_schedule(grid)

    assert schedule.week_numbers == [51, 52]
    weeks = {p.title: p.week for p in schedule.programs}
    assert weeks == {"A": 51, "B": 51, "C": 51, "D": 52}


def test_reference_year_comes_from_config_when_sheet_has_none():
    grid = [
        ["", "monday", ""],
        ["", "6-1", ""],
        ["9.00", "Ochtendshow", ""],
    ]

    schedule = parse_schedule(grid, ScheduleConfig(reference_year=2025))

    assert list(schedule.days_to_programs) == ["06-01-2025"]
    assert schedule.programs[0].start_time == "09:00"


def test_unrecognized_date_column_is_skipped():
    grid = [
        ["45", "2024", ""],
        ["", "maandag", "dinsdag"],
        ["", "4-11", "morgen"],
        ["20,00", "Journaal", "Quiz"],
    ]

    schedule = parse_schedule(grid)

    assert list(schedule.days_to_programs) == ["04-11-2024"]


def test_missing_weekday_header_raises():
    with pytest.raises(NoDayColumns):
        parse_schedule([["45", "2024"], ["", "iets"], ["20,00", "Journaal", ""]])


def test_build_program_rejects_non_titles():
    for cell in ["", "x", "12", "12,5", "maandag", "25-12-2024"]:
        with pytest.raises(InvalidRow):
            build_program(cell, "20:00", "04-11-2024", 45, "20,00")


def test_build_program_reads_suffix_duration_and_time_point():
    series = build_program("Serie: Flikken 25 min", "20:00", "04-11-2024", 45, "20,00")
    news = build_program("Nieuws 8,00", "08:00", "04-11-2024", 45, "8,00")

    assert series.title == "Serie: Flikken"
    assert series.duration == 25
    assert series.category == "Series"
    assert news.duration is None
    assert news.time_point == "08:00"


def test_calculate_end_times_uses_configured_defaults():
    programs = [
        ProgramEntry(title="A", start_time="20:00", week=1),
        ProgramEntry(title="B", start_time="20:00", week=1),
    ]

    calculate_end_times(programs, shared_slot_minutes=10, last_program_minutes=45)

    assert [p.end_time for p in programs] == ["20:10", "20:45"]
    assert [p.duration for p in programs] == [10, 45]


def test_numeric_time_cells_from_workbooks_are_times():
    grid = [
        [45.0, "Programmering NL1 2024", None],
        [None, "maandag", "dinsdag"],
        [None, "4-11", "5-11"],
        [20.0, "Journaal", "Quiz"],
        [20.3, "Sport", None],
        [21.15, "Film: De Tocht (90)", None],
    ]

    schedule = parse_schedule(grid)

    assert schedule.week_numbers == [45]
    monday = schedule.days_to_programs["04-11-2024"]
    assert [p.start_time for p in monday] == ["20:00", "20:30", "21:15"]
    assert [p.original_time for p in monday] == ["20.00", "20.30", "21.15"]
    assert monday[2].end_time == "22:45"
    assert [p.title for p in schedule.days_to_programs["05-11-2024"]] == ["Quiz"]


def test_numeric_week_declaration_is_not_a_time_row():
    grid = [
        [51.0, "2024", None],
        [None, "maandag", None],
        [None, "23-12", None],
        [20.0, "A", None],
        [52.0, None, None],
        [21.0, "B", None],
    ]

    schedule = parse_schedule(grid)

    assert schedule.week_numbers == [51, 52]
    assert {p.title: p.week for p in schedule.programs} == {"A": 51, "B": 52}
