"""Program-schedule parsing: weekly grid -> programs per canonical date.

Layout of a schedule sheet::

    <preamble: channel name, week number in the first cell, a year somewhere>
    ,maandag,dinsdag,...          <- weekday header
    ,23-12,24-12,...              <- dates row
    <notes>
    0,00,Nachtprogramma,...       <- time rows: first cell is H,MM / H.MM / H:MM
    ...
    52                            <- optional further week declarations

Each non-empty cell of a time row under a weekday column is a program starting
at that time. End times are back-filled from the next program's start.
"""
from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from datetime import date
from typing import Any, Dict, List, Optional, Sequence

from .cells import cell_text
from .config import ScheduleConfig
from .dates import DUTCH_WEEKDAYS, WEEKDAYS, day_of_week, normalize_schedule_date
from .errors import InvalidRow, NoDayColumns
from .models import ProgramEntry, ScheduleSet
from .time_slots import add_minutes, is_time_token, minutes_between, normalize_time_token, time_cell_text

LOGGER = logging.getLogger("ratingsdesk.schedule")

Grid = Sequence[Sequence[Any]]

WEEKDAY_NAMES = list(DUTCH_WEEKDAYS) + [d.lower() for d in WEEKDAYS]

_PREAMBLE_WEEK_RX = re.compile(r"^(\d{1,2})$")
_WEEK_DECLARATION_RX = re.compile(r"^([1-9][0-9]?)$")
_MAX_SLOT_HOUR = 26
_YEAR_RX = re.compile(r"\b(20\d{2})\b")
_PURE_NUMBER_RX = re.compile(r"^\d+([,.]\d+)?$")
_PAREN_DURATION_RX = re.compile(r"\((\d+)\)")
_TRAILING_DURATION_RX = re.compile(r"(\d+)\s*(?:min|minutes|minuten)$", re.IGNORECASE)
_TIME_POINT_RX = re.compile(r"\b(\d+)[,.](\d{1,2})\b")
_TITLE_SUFFIX_RX = re.compile(r"\s*(?:\(\d+\)|\d+\s*(?:min|minutes|minuten))\s*$", re.IGNORECASE)
_FILM_RX = re.compile(r"^\s*film\s*:", re.IGNORECASE)
_SERIES_RX = re.compile(r"^\s*serie\s*:", re.IGNORECASE)
_REPEAT_MARKERS = ("herhaling", "herh", "repeat")

_DATE_PATTERNS = [
    re.compile(r"^\d{1,2}[-/.]\d{1,2}[-/.]\d{2,4}$"),
    re.compile(r"^\d{1,2}[-\s][A-Za-z]{3,}[-\s]\d{2,4}$"),
    re.compile(r"^[A-Za-z]{3,}[-\s]\d{1,2}[-\s]\d{2,4}$"),
    re.compile(r"^\d{4}[-/.]\d{1,2}[-/.]\d{1,2}$"),
    re.compile(r"^\d{1,2}$"),
]
_MONTH_NAMES = [
    "januari", "februari", "maart", "april", "mei", "juni",
    "juli", "augustus", "september", "oktober", "november", "december",
    "jan", "feb", "mrt", "apr", "jun", "jul", "aug", "sep", "okt", "nov", "dec",
]


@dataclass(frozen=True)
class DayColumn:
    name: str
    column_index: int
    canonical_date: Optional[str]


def is_likely_date(value: Any) -> bool:
    """True when a cell looks like a date or weekday rather than a program title."""

    text = cell_text(value)
    if not text:
        return False
    if any(p.match(text) for p in _DATE_PATTERNS):
        return True
    lower = text.lower()
    if any(month in lower for month in _MONTH_NAMES) and re.search(r"\d", lower):
        return True
    return lower in WEEKDAY_NAMES


def _row_cells(row: Optional[Sequence[Any]]) -> List[str]:
    return [cell_text(c) for c in (row or [])]


def _first_cell(row: Optional[Sequence[Any]]) -> str:
    return cell_text(row[0]) if row else ""


def _time_cell(row: Optional[Sequence[Any]]) -> str:
    """Start-time text of a time row, "" when the row is not one.

    A whole number read from a workbook is a time only when the row also holds
    programs; on its own it is a week declaration.
    """

    text = _first_cell(row)
    if not text or is_time_token(text):
        return text
    rendered = time_cell_text(row[0])
    if not is_time_token(rendered):
        return ""
    if int(re.split(r"[.:]", rendered)[0]) > _MAX_SLOT_HOUR:
        return ""
    if rendered.endswith(".00") and not any(_row_cells(row[1:])):
        return ""
    return rendered


def _header_row(grid: Grid, preamble_rows: int) -> int:
    for i in range(min(preamble_rows, len(grid))):
        lowered = " ".join(_row_cells(grid[i])).lower()
        if any(day in lowered for day in WEEKDAY_NAMES):
            return i
    return -1


def scan_preamble(grid: Grid, preamble_rows: int, default_year: int) -> tuple[int, int, List[int]]:
    """Return (preamble week number, reference year, de-duplicated week list)."""

    week_number = 0
    year = default_year
    weeks: List[int] = []
    scanned = min(preamble_rows, len(grid))
    header_idx = _header_row(grid, preamble_rows)
    # The preamble week sits above the weekday header; time rows follow it
    limit = header_idx if header_idx >= 0 else scanned
    for i in range(scanned):
        m = _PREAMBLE_WEEK_RX.match(_first_cell(grid[i])) if i < limit else None
        if m:
            week_number = int(m.group(1))
            if week_number not in weeks:
                weeks.append(week_number)
        for cell in _row_cells(grid[i]):
            y = _YEAR_RX.search(cell)
            if y:
                year = int(y.group(1))
    for i in range(limit, len(grid)):
        week = _week_declaration(grid[i])
        if week is not None and week not in weeks:
            weeks.append(week)
    return week_number, year, weeks


def _week_declaration(row: Optional[Sequence[Any]]) -> Optional[int]:
    if _time_cell(row):
        return None
    m = _WEEK_DECLARATION_RX.match(_first_cell(row))
    return int(m.group(1)) if m else None


def find_day_columns(grid: Grid, preamble_rows: int, year: int) -> tuple[int, List[DayColumn]]:
    """Locate the weekday header row and resolve each weekday column's date."""

    header_idx = _header_row(grid, preamble_rows)
    if header_idx == -1:
        raise NoDayColumns("Could not find day headers in schedule")

    header = _row_cells(grid[header_idx])
    dates_row = grid[header_idx + 1] if header_idx + 1 < len(grid) else []
    columns: List[DayColumn] = []
    for index, cell in enumerate(header):
        lower = cell.lower()
        for day in WEEKDAY_NAMES:
            if day in lower:
                raw = dates_row[index] if index < len(dates_row) else None
                columns.append(DayColumn(name=day, column_index=index, canonical_date=normalize_schedule_date(raw, year)))
                break
    if not columns:
        raise NoDayColumns("Could not identify day columns")
    return header_idx, columns


def _first_time_row(grid: Grid, start: int) -> int:
    idx = start
    while idx < len(grid):
        if _time_cell(grid[idx]):
            break
        idx += 1
    return idx


def _current_week(grid: Grid, row_index: int, default: int, multi_week: bool) -> int:
    if not multi_week:
        return default
    for w in range(row_index, -1, -1):
        week = _week_declaration(grid[w])
        if week is not None:
            return week
    return default


def build_program(title_cell: str, start_time: str, day: str, week: int, original_time: str) -> ProgramEntry:
    """Create a ProgramEntry from a raw schedule cell; raises InvalidRow for non-programs."""

    raw = title_cell.strip()
    if not raw or raw == "x" or _PURE_NUMBER_RX.match(raw):
        raise InvalidRow(f"not a program title: {raw!r}")
    if is_likely_date(raw):
        raise InvalidRow(f"date-like cell: {raw!r}")

    program = ProgramEntry(
        title=_TITLE_SUFFIX_RX.sub("", raw).strip() or raw,
        start_time=start_time,
        day=day,
        day_of_week=day_of_week(day),
        original_time=original_time,
        week=week,
    )

    m = _PAREN_DURATION_RX.search(raw)
    if m:
        program.duration = int(m.group(1))
    else:
        m = _TRAILING_DURATION_RX.search(raw)
        if m:
            program.duration = int(m.group(1))
    if program.duration is None:
        tp = _TIME_POINT_RX.search(raw)
        if tp:
            program.time_point = f"{tp.group(1).rjust(2, '0')}:{tp.group(2).rjust(2, '0')}"

    lower = raw.lower()
    if any(marker in lower for marker in _REPEAT_MARKERS):
        program.is_repeat = True
    if _FILM_RX.match(raw):
        program.category = "Film"
    elif _SERIES_RX.match(raw):
        program.category = "Series"
    return program


def calculate_end_times(
    programs: List[ProgramEntry],
    shared_slot_minutes: int = 15,
    last_program_minutes: int = 60,
) -> List[ProgramEntry]:
    """Number same-slot siblings, sort, and back-fill end times in place."""

    slots: Dict[tuple, List[ProgramEntry]] = {}
    for program in programs:
        slots.setdefault((program.week or 0, program.start_time), []).append(program)
    for siblings in slots.values():
        if len(siblings) > 1:
            for index, program in enumerate(siblings):
                program.sequence = index + 1
                program.add_note(f"Multiple programs ({index + 1}/{len(siblings)})")

    programs.sort(key=lambda p: (p.week or 0, p.start_time, p.sequence or 0))

    for current, following in zip(programs, programs[1:]):
        same_slot = (
            current.sequence is not None
            and current.start_time == following.start_time
            and following.sequence == current.sequence + 1
            and current.week == following.week
        )
        if same_slot:
            if current.duration is None:
                current.duration = shared_slot_minutes
            current.end_time = add_minutes(current.start_time, current.duration)
        else:
            current.end_time = following.start_time
            if current.duration is None:
                current.duration = minutes_between(current.start_time, current.end_time)

    if programs:
        last = programs[-1]
        if last.end_time is None:
            if last.duration is None:
                last.duration = last_program_minutes
            last.end_time = add_minutes(last.start_time, last.duration)
    return programs


def parse_schedule(grid: Grid, config: Optional[ScheduleConfig] = None) -> ScheduleSet:
    """Parse a (possibly multi-week) schedule grid into a ScheduleSet.

    Raises :class:`NoDayColumns` when no weekday header is present.
    """

    cfg = config or ScheduleConfig()
    default_year = cfg.reference_year or date.today().year
    week_number, year, weeks = scan_preamble(grid, cfg.preamble_rows, default_year)
    header_idx, columns = find_day_columns(grid, cfg.preamble_rows, year)
    LOGGER.info("Schedule: week %s, year %d, %d day column(s), weeks %s", week_number, year, len(columns), weeks)

    days: Dict[str, List[ProgramEntry]] = {}
    for column in columns:
        if column.canonical_date:
            days.setdefault(column.canonical_date, [])
        else:
            LOGGER.warning("Day column %s (index %d) has no recognizable date", column.name, column.column_index)

    multi_week = len(weeks) > 1
    skipped = 0
    start = _first_time_row(grid, header_idx + 2)
    for row_index in range(start, len(grid)):
        row = grid[row_index]
        if row is None or len(row) < 3:
            continue
        time_cell = _time_cell(row)
        if not time_cell:
            continue
        start_time = normalize_time_token(time_cell)
        week = _current_week(grid, row_index, week_number, multi_week)

        for column in columns:
            day = column.canonical_date
            if not day or column.column_index >= len(row):
                continue
            try:
                program = build_program(cell_text(row[column.column_index]), start_time, day, week, time_cell)
            except InvalidRow as exc:
                if cell_text(row[column.column_index]):
                    skipped += 1
                    LOGGER.debug("Row %d, %s: %s", row_index, column.name, exc)
                continue

            entries = days[day]
            program.id = f"{day}-{start_time.replace(':', '')}-{len(entries) + 1}"
            existing = [p for p in entries if p.start_time == start_time and p.week == week]
            if existing:
                program.sequence = len(existing) + 1
                program.add_note(f"Multiple programs at {start_time} (Week {week})")
            entries.append(program)

    for entries in days.values():
        calculate_end_times(entries, cfg.shared_slot_minutes, cfg.last_program_minutes)

    LOGGER.info(
        "Parsed %d program(s) over %d day(s); skipped %d cell(s)",
        sum(len(v) for v in days.values()),
        len(days),
        skipped,
    )
    return ScheduleSet(week_numbers=weeks, reference_year=year, days_to_programs=days, week_number=week_number)
