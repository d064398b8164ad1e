"""Viewership extraction: raw grid -> one DailyRecord per date.

The export is a loosely formatted sheet: a preamble of free text, then a header
row starting with the date / day / time-slot markers, then one row per date and
hour. Columns holding the daily total and the hour's share are located by
header phrase, falling back to fixed positions when no phrase matches. The
fallback is a best-effort heuristic and is kept exactly as configured.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional, Sequence, Tuple

from .aggregation import aggregate_period, sort_records_by_date
from .cells import cell_at, cell_text, is_empty, round_half_up, to_number
from .config import ExtractionConfig
from .dates import normalize_date_cell, translate_weekday
from .errors import HeaderNotFound, InvalidRow
from .models import AgeGroupEntry, DailyRecord, PeriodSummary, empty_age_groups
from .time_slots import NOT_FOUND, parse_hour

LOGGER = logging.getLogger("ratingsdesk.extraction")

Grid = Sequence[Sequence[Any]]
AgeShare = Tuple[float, float, float]
AgeDistribution = Callable[[int], AgeShare]


def simulated_age_distribution(hour: int) -> AgeShare:
    """Return (13+, 50+, 65+) shares of an hour's audience.

    Placeholder model keyed on hour-of-day only; swap in real demographic
    input by passing another callable to :func:`extract_daily_records`.
    """

    if 6 <= hour < 12:
        return (0.40, 0.35, 0.25)
    if 12 <= hour < 18:
        return (0.55, 0.30, 0.15)
    if 18 <= hour < 22:
        return (0.45, 0.35, 0.20)
    if hour >= 22 or hour < 2:
        return (0.65, 0.25, 0.10)
    return (0.35, 0.40, 0.25)


@dataclass(frozen=True)
class ColumnLayout:
    header_row: int
    total_viewers: int
    percentage: int
    calculated_viewers: Optional[int] = None

    @property
    def min_row_length(self) -> int:
        return max(self.total_viewers, self.percentage) + 1


@dataclass(frozen=True)
class ParsedRow:
    date: str
    day_of_week: str
    hour: int
    total_viewers: float
    percentage: float
    hourly_viewers: float


def find_header_row(grid: Grid, markers: Sequence[str]) -> int:
    """Index of the first row whose first three cells equal ``markers`` exactly."""

    for idx, row in enumerate(grid):
        if row is None or len(row) <= 2:
            continue
        if all(row[i] == markers[i] for i in range(3)):
            return idx
    raise HeaderNotFound(f"Could not find header row starting with {list(markers)}")


def resolve_columns(header: Sequence[Any], header_row: int, config: ExtractionConfig) -> ColumnLayout:
    """Locate the total, percentage and calculated-viewers columns of ``header``."""

    total_col = -1
    pct_col = -1
    calc_col = -1
    for index, cell in enumerate(header):
        if not isinstance(cell, str):
            continue
        if any(phrase in cell for phrase in config.total_viewers_phrases):
            total_col = index
        if any(phrase in cell for phrase in config.calculated_viewers_phrases):
            calc_col = index
        if cell in config.percentage_headers or any(phrase in cell for phrase in config.percentage_phrases):
            pct_col = index

    if total_col == -1:
        total_col = _first_in_bounds(config.total_viewers_positions, len(header), config.total_viewers_default)
        LOGGER.debug("Total viewers column not named; using position %d", total_col)
    if pct_col == -1:
        pct_col = _first_in_bounds(config.percentage_positions, len(header), config.percentage_default)
        LOGGER.debug("Percentage column not named; using position %d", pct_col)

    return ColumnLayout(
        header_row=header_row,
        total_viewers=total_col,
        percentage=pct_col,
        calculated_viewers=calc_col if calc_col != -1 else None,
    )


def _first_in_bounds(positions: Sequence[int], width: int, default: int) -> int:
    for pos in positions:
        if pos < width:
            return pos
    LOGGER.warning("No candidate column position in bounds (width=%d); falling back to %d", width, default)
    return default


def percentage_value(cell: Any) -> float:
    """Return the share as a fraction.

    Cells written as "12,5%" are divided by 100. Bare numbers above 1 are
    taken as whole-number percentages and divided by 100 as well; values up to
    1 are assumed to be fractions already.
    """

    value = to_number(cell)
    if isinstance(cell, str) and "%" in cell:
        return value / 100
    if value > 1:
        value = value / 100
    return value


def _as_count(value: float) -> float:
    if isinstance(value, float) and value.is_integer():
        return int(value)
    return value


def parse_row(row: Sequence[Any], layout: ColumnLayout) -> ParsedRow:
    """Parse one data row; raises :class:`InvalidRow` for anything unusable."""

    if row is None or len(row) < layout.min_row_length:
        raise InvalidRow("row shorter than required columns")
    date_cell = row[0]
    time_slot = cell_text(cell_at(row, 2))
    if is_empty(date_cell) or not time_slot:
        raise InvalidRow("missing date or time slot")

    hour = parse_hour(time_slot)
    if hour == NOT_FOUND:
        raise InvalidRow(f"unparsable time slot {time_slot!r}")

    date = normalize_date_cell(date_cell)
    if not date:
        raise InvalidRow(f"unparsable date {date_cell!r}")

    total = to_number(row[layout.total_viewers])
    percentage = percentage_value(row[layout.percentage])

    hourly = 0.0
    if layout.calculated_viewers is not None:
        calculated = cell_at(row, layout.calculated_viewers)
        if not is_empty(calculated):
            hourly = to_number(calculated)
    if hourly == 0 and total > 0 and percentage > 0:
        hourly = round_half_up(percentage * total)

    return ParsedRow(
        date=date,
        day_of_week=translate_weekday(cell_text(cell_at(row, 1))),
        hour=hour,
        total_viewers=_as_count(max(total, 0.0)),
        percentage=percentage,
        hourly_viewers=_as_count(hourly),
    )


def _age_entry(viewers: float, share: AgeShare) -> AgeGroupEntry:
    return AgeGroupEntry(
        viewers_13_plus=round_half_up(viewers * share[0]),
        viewers_50_plus=round_half_up(viewers * share[1]),
        viewers_65_plus=round_half_up(viewers * share[2]),
    )


def extract_daily_records(
    grid: Grid,
    config: Optional[ExtractionConfig] = None,
    age_distribution: Optional[AgeDistribution] = simulated_age_distribution,
) -> List[DailyRecord]:
    """Build sorted DailyRecords from a viewership grid.

    Raises :class:`HeaderNotFound` when the header row is missing. Rows that
    cannot be parsed are skipped. A later row for an already-seen date and hour
    overwrites the earlier figures. Days without a positive total are dropped.
    """

    cfg = config or ExtractionConfig()
    if not cfg.simulate_age_groups:
        age_distribution = None

    header_idx = find_header_row(grid, cfg.header_markers)
    layout = resolve_columns(grid[header_idx], header_idx, cfg)
    LOGGER.info(
        "Header row %d: total=%d percentage=%d calculated=%s",
        header_idx,
        layout.total_viewers,
        layout.percentage,
        layout.calculated_viewers,
    )

    days: Dict[str, DailyRecord] = {}
    skipped = 0
    for row_idx in range(header_idx + 1, len(grid)):
        try:
            parsed = parse_row(grid[row_idx], layout)
        except InvalidRow as exc:
            skipped += 1
            LOGGER.debug("Skipping row %d: %s", row_idx, exc)
            continue

        record = days.get(parsed.date)
        if record is None:
            record = DailyRecord(
                date=parsed.date,
                day_of_week=parsed.day_of_week,
                total_viewers=parsed.total_viewers,
            )
            days[parsed.date] = record

        record.hourly_viewers[parsed.hour] = parsed.hourly_viewers
        record.hourly_percentages[parsed.hour] = parsed.percentage

        if age_distribution is not None:
            if record.age_groups is None:
                record.age_groups = empty_age_groups()
            if parsed.hourly_viewers > 0:
                record.age_groups[parsed.hour] = _age_entry(parsed.hourly_viewers, age_distribution(parsed.hour))
            else:
                record.age_groups[parsed.hour] = AgeGroupEntry()

    kept = [r for r in days.values() if r.total_viewers > 0]
    if len(kept) < len(days):
        LOGGER.info("Dropped %d day(s) without a positive daily total", len(days) - len(kept))
    LOGGER.info("Extracted %d day(s); skipped %d row(s)", len(kept), skipped)
    return sort_records_by_date(kept)


def process_viewership_grid(
    grid: Grid,
    label: str,
    config: Optional[ExtractionConfig] = None,
    age_distribution: Optional[AgeDistribution] = simulated_age_distribution,
) -> PeriodSummary:
    """Extract and aggregate one viewership file into a PeriodSummary."""

    records = extract_daily_records(grid, config=config, age_distribution=age_distribution)
    return aggregate_period(records, label)
