"""
ratingsdesk: ingestion and aggregation of broadcaster viewership exports.

Reads loosely formatted hourly audience spreadsheets and weekly program
schedules, normalizes them into per-day, per-hour records and combines
months into weighted period summaries.
"""

from .aggregation import aggregate_period, aggregate_periods
from .extraction import extract_daily_records, process_viewership_grid
from .schedule_merger import merge_schedule
from .schedule_parser import parse_schedule
from .time_slots import parse_hour

__all__ = [
    "aggregate_period",
    "aggregate_periods",
    "extract_daily_records",
    "merge_schedule",
    "parse_hour",
    "parse_schedule",
    "process_viewership_grid",
]
