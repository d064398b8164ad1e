"""Unit tests for reading files into raw cell grids."""
import sys
from datetime import datetime
from pathlib import Path

import pytest
from openpyxl import Workbook

sys.path.append(str(Path(__file__).resolve().parents[2] / "src"))

from ratingsdesk.dates import normalize_date_cell
from ratingsdesk.errors import EmptyInput
from ratingsdesk.extraction import extract_daily_records
from ratingsdesk.grid_reader import read_grid

CSV_TEXT = (
    "Kijkcijfers november\n"
    "\n"
    "Datum,Dag,Tijdvak,Zender,Dagcijfers,Opmerking,TOTAL\n"
    "01-11-2024,vrijdag,20:00-20:59,NL1,1000,,25%\n"
)


def test_csv_rows_are_ragged_and_trimmed(tmp_path):
    path = tmp_path / "november.csv"
    path.write_text(CSV_TEXT, encoding="utf-8")

    grid = read_grid(path)

    assert grid[0] == ["Kijkcijfers november"]
    assert grid[1] == []
    assert grid[2] == ["Datum", "Dag", "Tijdvak", "Zender", "Dagcijfers", "Opmerking", "TOTAL"]
    assert grid[3][5] is None
    assert grid[3][6] == "25%"
    assert extract_daily_records(grid)[0].hourly_viewers[20] == 250


def test_csv_without_trimming_keeps_width(tmp_path):
    path = tmp_path / "november.csv"
    path.write_text(CSV_TEXT, encoding="utf-8")

    grid = read_grid(path, trim=False)

    assert all(len(row) == 7 for row in grid)
    assert grid[0][1:] == [None] * 6


def test_excel_cells_keep_native_types(tmp_path):
    wb = Workbook()
    ws = wb.active
    ws.append(["Datum", "Dag", "Tijdvak", "Zender", "Dagcijfers", "Opmerking", "TOTAL"])
    ws.append([datetime(2024, 11, 1), "vrijdag", "20:00-20:59", "NL1", 1000, None, 0.25])
    path = tmp_path / "november.xlsx"
    wb.save(path)

    grid = read_grid(path)

    assert normalize_date_cell(grid[1][0]) == "01-11-2024"
    assert grid[1][4] == 1000
    assert extract_daily_records(grid)[0].hourly_viewers[20] == 250


def test_reader_rejections(tmp_path):
    unsupported = tmp_path / "notes.pdf"
    unsupported.write_text("x", encoding="utf-8")
    empty = tmp_path / "empty.csv"
    empty.write_text("\n\n", encoding="utf-8")

    with pytest.raises(ValueError):
        read_grid(unsupported)
    with pytest.raises(EmptyInput):
        read_grid(empty)
    with pytest.raises(FileNotFoundError):
        read_grid(tmp_path / "absent.csv")
