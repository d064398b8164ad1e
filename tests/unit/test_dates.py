"""Unit tests for date normalization."""
import sys
from datetime import date, datetime
from pathlib import Path

sys.path.append(str(Path(__file__).resolve().parents[2] / "src"))

from ratingsdesk.dates import (
    day_of_week,
    normalize_date_cell,
    normalize_schedule_date,
    parse_canonical_date,
    serial_to_date,
    translate_weekday,
)


def test_serial_numbers_convert_from_1970_offset():
    assert serial_to_date(25569) == date(1970, 1, 1)
    assert normalize_date_cell(45597) == "01-11-2024"
    assert normalize_date_cell(45597.75) == "01-11-2024"
    assert normalize_date_cell("45597") == "01-11-2024"


def test_locale_strings_and_date_objects():
    assert normalize_date_cell("1-11-2024") == "01-11-2024"
    assert normalize_date_cell("01/11/2024") == "01-11-2024"
    assert normalize_date_cell("2024-11-01") == "01-11-2024"
    assert normalize_date_cell(datetime(2024, 11, 1, 0, 0)) == "01-11-2024"
    assert normalize_date_cell(date(2024, 11, 1)) == "01-11-2024"


def test_unrecognized_cells():
    assert normalize_date_cell(None) == ""
    assert normalize_date_cell(0) == ""
    assert normalize_date_cell("  week 45 ") == "week 45"


def test_schedule_date_tokens():
    assert normalize_schedule_date("4-11", 2024) == "04-11-2024"
    assert normalize_schedule_date("25-Dec", 2024) == "25-12-2024"
    assert normalize_schedule_date("3-1-2025", 2024) == "03-01-2025"
    assert normalize_schedule_date("1 mei", 2025) == "01-05-2025"
    assert normalize_schedule_date("31-2", 2024) is None
    assert normalize_schedule_date("morgen", 2024) is None
    assert normalize_schedule_date("", 2024) is None


def test_weekday_helpers():
    assert parse_canonical_date("04-11-2024") == date(2024, 11, 4)
    assert parse_canonical_date("2024-11-04") is None
    assert day_of_week("04-11-2024") == "Monday"
    assert day_of_week("garbage") == ""
    assert translate_weekday("Zaterdag") == "Saturday"
    assert translate_weekday("Funday") == "Funday"
