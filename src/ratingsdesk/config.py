"""Configuration loading and validation using Pydantic.

The YAML file is optional: every field has a default matching the export
layout the broadcaster currently delivers.
"""
from __future__ import annotations

from pathlib import Path
from typing import List, Literal, Optional

import yaml
from pydantic import BaseModel, Field, field_validator


class ExtractionConfig(BaseModel):
    """Header markers and column heuristics for viewership exports."""

    header_markers: List[str] = Field(
        ["Datum", "Dag", "Tijdvak"],
        description="Exact values of the first three header cells (date, day-of-week, time slot)",
    )
    total_viewers_phrases: List[str] = Field(
        ["Dagcijfers", "kijkdichtheid per dag", "dagcijfers", "Kijkers per dag"],
        description="Substrings identifying the total-daily-viewers column",
    )
    calculated_viewers_phrases: List[str] = Field(
        ["Kijkcijfers per programma", "kijkcijfers per programma", "Kijkcijfer per uur", "kijkcijfer per uur"],
        description="Substrings identifying a pre-calculated per-hour viewers column",
    )
    percentage_headers: List[str] = Field(
        ["TOTAL", "Total", "Totaal"],
        description="Exact header values of the percentage column",
    )
    percentage_phrases: List[str] = Field(
        ["percentage"],
        description="Substrings identifying the percentage column",
    )
    total_viewers_positions: List[int] = Field([3, 4, 5, 6], description="Fallback positions, first in-bounds wins")
    percentage_positions: List[int] = Field([4, 5, 6, 7], description="Fallback positions, first in-bounds wins")
    total_viewers_default: int = Field(4, ge=0)
    percentage_default: int = Field(6, ge=0)
    simulate_age_groups: bool = Field(True, description="Attach the time-of-day age-group simulation")

    @field_validator("header_markers")
    @classmethod
    def validate_markers(cls, v):
        if len(v) != 3:
            raise ValueError("header_markers must list exactly 3 values [date, day, time slot]")
        return v

    @field_validator("total_viewers_positions", "percentage_positions")
    @classmethod
    def validate_positions(cls, v, info):
        if any(p < 0 for p in v):
            raise ValueError(f"{info.field_name} must be non-negative column indexes")
        return v


class ScheduleConfig(BaseModel):
    """Program-schedule parsing parameters."""

    preamble_rows: int = Field(5, ge=1, description="Rows scanned for week number, year and weekday header")
    reference_year: Optional[int] = Field(None, description="Year used when the sheet carries none")
    shared_slot_minutes: int = Field(15, gt=0, description="Default duration of programs sharing a start time")
    last_program_minutes: int = Field(60, gt=0, description="Default duration of the last program of a day")


class StorageConfig(BaseModel):
    root: str = Field("data/store", description="Directory holding the JSON key-value store")


class LoggingConfig(BaseModel):
    level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"
    logs_dir: str = "logs"

    @field_validator("level", mode="before")
    @classmethod
    def upper_level(cls, v):
        return str(v).upper() if v is not None else "INFO"


class RatingsDeskConfig(BaseModel):
    extraction: ExtractionConfig = Field(default_factory=ExtractionConfig)
    schedule: ScheduleConfig = Field(default_factory=ScheduleConfig)
    storage: StorageConfig = Field(default_factory=StorageConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)


def load_config(path: str | Path | None) -> dict:
    """Load a YAML configuration file; a missing path yields an empty mapping."""

    if path is None:
        return {}
    p = Path(path)
    if not p.exists():
        raise FileNotFoundError(f"Config not found: {p}")
    with open(p, "r", encoding="utf-8") as stream:
        return yaml.safe_load(stream) or {}


def load_and_validate_config(config_dict: dict | None) -> RatingsDeskConfig:
    """
    Validate a raw configuration mapping.

    Args:
        config_dict: Mapping as loaded from YAML (may be empty)

    Returns:
        Validated RatingsDeskConfig object

    Raises:
        ValidationError: If configuration is invalid
    """
    return RatingsDeskConfig(**(config_dict or {}))
