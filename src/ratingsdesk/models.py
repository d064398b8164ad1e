"""Normalized data structures shared by extraction, aggregation and schedules."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Optional

HOURS_PER_DAY = 24


def _zero_hours() -> List[float]:
    return [0] * HOURS_PER_DAY


@dataclass
class AgeGroupEntry:
    """Cumulative viewer counts for one hour (13+ includes 50+ includes 65+)."""

    viewers_13_plus: int = 0
    viewers_50_plus: int = 0
    viewers_65_plus: int = 0


def empty_age_groups() -> List[AgeGroupEntry]:
    return [AgeGroupEntry() for _ in range(HOURS_PER_DAY)]


@dataclass
class ProgramEntry:
    title: str
    start_time: str
    id: Optional[str] = None
    end_time: Optional[str] = None
    duration: Optional[int] = None
    day: Optional[str] = None
    day_of_week: Optional[str] = None
    category: Optional[str] = None
    is_repeat: Optional[bool] = None
    notes: Optional[str] = None
    sequence: Optional[int] = None
    original_time: Optional[str] = None
    time_point: Optional[str] = None
    week: Optional[int] = None

    def add_note(self, note: str) -> None:
        self.notes = f"{self.notes}, {note}" if self.notes else note


@dataclass
class DailyRecord:
    """Per-day viewer figures; ``date`` is always canonical ``DD-MM-YYYY``."""

    date: str
    day_of_week: str = ""
    total_viewers: float = 0
    hourly_viewers: List[float] = field(default_factory=_zero_hours)
    hourly_percentages: List[float] = field(default_factory=_zero_hours)
    age_groups: Optional[List[AgeGroupEntry]] = None
    programs: Optional[List[ProgramEntry]] = None

    def __post_init__(self) -> None:
        if len(self.hourly_viewers) != HOURS_PER_DAY or len(self.hourly_percentages) != HOURS_PER_DAY:
            raise ValueError(f"DailyRecord {self.date} must carry exactly {HOURS_PER_DAY} hourly slots")
        if self.total_viewers < 0:
            raise ValueError(f"DailyRecord {self.date} has negative total_viewers")

    def copy(self) -> "DailyRecord":
        """Return an independent copy (hour lists, age groups and programs included)."""
        return DailyRecord(
            date=self.date,
            day_of_week=self.day_of_week,
            total_viewers=self.total_viewers,
            hourly_viewers=list(self.hourly_viewers),
            hourly_percentages=list(self.hourly_percentages),
            age_groups=[AgeGroupEntry(**vars(a)) for a in self.age_groups] if self.age_groups is not None else None,
            programs=[ProgramEntry(**vars(p)) for p in self.programs] if self.programs is not None else None,
        )


@dataclass(frozen=True)
class PeriodSummary:
    """Aggregated view over the days of one period (a month, or several combined)."""

    label: str
    days: List[DailyRecord]
    average_hourly_viewers: List[int]
    max_viewers_per_hour: List[float]
    total_viewers_per_hour: List[float]
    peak_day: str
    peak_hour: int
    total_viewers: float
    average_age_groups: Optional[List[AgeGroupEntry]] = None
    total_age_groups: Optional[List[AgeGroupEntry]] = None

    @property
    def day_count(self) -> int:
        return len(self.days)


@dataclass
class ScheduleSet:
    """Programs of one schedule file keyed by canonical date."""

    week_numbers: List[int]
    reference_year: int
    days_to_programs: Dict[str, List[ProgramEntry]]
    week_number: int = 0

    @property
    def programs(self) -> List[ProgramEntry]:
        return [p for entries in self.days_to_programs.values() for p in entries]
