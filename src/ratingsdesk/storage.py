"""Persistence collaborator: a JSON-file key-value store plus (de)serializers.

The store offers ``save``/``load``/``clear`` per key without transactional
guarantees. Schedules serialize their date mapping as an explicit list of
``[date, entries]`` pairs so key order survives the round trip.
"""
from __future__ import annotations

import json
import logging
from dataclasses import asdict
from pathlib import Path
from typing import Any, Dict, List, Optional

from .models import AgeGroupEntry, DailyRecord, PeriodSummary, ProgramEntry, ScheduleSet

LOGGER = logging.getLogger("ratingsdesk.storage")

VIEWER_DATA_KEY = "viewer_data"
PROGRAM_DATA_KEY = "program_data"


class JsonStore:
    """One JSON document per key under ``root``."""

    def __init__(self, root: str | Path):
        self.root = Path(root).expanduser()

    def _path(self, key: str) -> Path:
        safe = "".join(ch if ch.isalnum() or ch in "-_" else "_" for ch in key)
        return self.root / f"{safe}.json"

    def save(self, key: str, value: Any) -> Path:
        self.root.mkdir(parents=True, exist_ok=True)
        path = self._path(key)
        tmp = path.with_suffix(".json.tmp")
        with open(tmp, "w", encoding="utf-8") as stream:
            json.dump(value, stream, indent=2, ensure_ascii=False)
        tmp.replace(path)
        return path

    def load(self, key: str) -> Optional[Any]:
        path = self._path(key)
        if not path.exists():
            return None
        try:
            with open(path, "r", encoding="utf-8") as stream:
                return json.load(stream)
        except (OSError, json.JSONDecodeError) as exc:
            LOGGER.warning("Could not load %s (%s); treating as absent", path, exc)
            return None

    def clear(self, key: str) -> None:
        self._path(key).unlink(missing_ok=True)


def _age_groups(raw: Optional[List[Dict[str, Any]]]) -> Optional[List[AgeGroupEntry]]:
    if raw is None:
        return None
    return [AgeGroupEntry(**entry) for entry in raw]


def _programs(raw: Optional[List[Dict[str, Any]]]) -> Optional[List[ProgramEntry]]:
    if raw is None:
        return None
    return [ProgramEntry(**entry) for entry in raw]


def period_to_dict(summary: PeriodSummary) -> Dict[str, Any]:
    return asdict(summary)


def period_from_dict(data: Dict[str, Any]) -> PeriodSummary:
    days = [
        DailyRecord(
            date=d["date"],
            day_of_week=d.get("day_of_week", ""),
            total_viewers=d.get("total_viewers", 0),
            hourly_viewers=list(d["hourly_viewers"]),
            hourly_percentages=list(d["hourly_percentages"]),
            age_groups=_age_groups(d.get("age_groups")),
            programs=_programs(d.get("programs")),
        )
        for d in data.get("days", [])
    ]
    return PeriodSummary(
        label=data["label"],
        days=days,
        average_hourly_viewers=list(data["average_hourly_viewers"]),
        max_viewers_per_hour=list(data["max_viewers_per_hour"]),
        total_viewers_per_hour=list(data["total_viewers_per_hour"]),
        peak_day=data.get("peak_day", ""),
        peak_hour=int(data.get("peak_hour", 0)),
        total_viewers=data.get("total_viewers", 0),
        average_age_groups=_age_groups(data.get("average_age_groups")),
        total_age_groups=_age_groups(data.get("total_age_groups")),
    )


def schedule_to_dict(schedule: ScheduleSet) -> Dict[str, Any]:
    return {
        "week_number": schedule.week_number,
        "week_numbers": list(schedule.week_numbers),
        "reference_year": schedule.reference_year,
        "days": [[day, [asdict(p) for p in entries]] for day, entries in schedule.days_to_programs.items()],
    }


def schedule_from_dict(data: Dict[str, Any]) -> ScheduleSet:
    days: Dict[str, List[ProgramEntry]] = {}
    for day, entries in data.get("days", []):
        days[day] = [ProgramEntry(**entry) for entry in entries]
    return ScheduleSet(
        week_numbers=list(data.get("week_numbers", [])),
        reference_year=int(data["reference_year"]),
        days_to_programs=days,
        week_number=int(data.get("week_number", 0)),
    )


def save_periods(store: JsonStore, periods: List[PeriodSummary]) -> Path:
    path = store.save(VIEWER_DATA_KEY, [period_to_dict(p) for p in periods])
    LOGGER.info("Saved %d period(s) to %s", len(periods), path)
    return path


def load_periods(store: JsonStore) -> List[PeriodSummary]:
    raw = store.load(VIEWER_DATA_KEY)
    if not raw:
        return []
    periods = [period_from_dict(item) for item in raw]
    LOGGER.info("Loaded %d period(s)", len(periods))
    return periods


def save_schedule(store: JsonStore, schedule: ScheduleSet) -> Path:
    path = store.save(PROGRAM_DATA_KEY, schedule_to_dict(schedule))
    LOGGER.info("Saved schedule for week(s) %s/%d to %s", schedule.week_numbers, schedule.reference_year, path)
    return path


def load_schedule(store: JsonStore) -> Optional[ScheduleSet]:
    raw = store.load(PROGRAM_DATA_KEY)
    if not raw:
        return None
    return schedule_from_dict(raw)


def clear_all(store: JsonStore) -> None:
    store.clear(VIEWER_DATA_KEY)
    store.clear(PROGRAM_DATA_KEY)
    LOGGER.info("Cleared stored viewer and program data under %s", store.root)
