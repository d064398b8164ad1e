"""Batch orchestration and the ``ratingsdesk`` command line.

One run:
- loads the stored periods and schedule,
- ingests every viewership file (one period per file, replaced by label),
- ingests every schedule file and attaches programs to matching days,
- optionally combines all single periods into one summary,
- saves the result and optionally exports a workbook.

A file that cannot be ingested is recorded as failed; its siblings still run.
"""
from __future__ import annotations

import argparse
import logging
import sys
from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence

from .aggregation import aggregate_periods
from .config import RatingsDeskConfig, load_and_validate_config, load_config
from .errors import EmptyInput, RatingsDeskError
from .export import export_summaries_to_workbook
from .extraction import process_viewership_grid
from .grid_reader import read_grid
from .labels import is_combined_label, label_from_filename, upsert_period
from .logging_utils import (
    end_timer,
    get_logger,
    get_user_logger,
    log_error,
    log_system_event,
    log_warning,
    start_timer,
    write_timing_report,
)
from .models import PeriodSummary, ScheduleSet
from .schedule_merger import merge_schedule_into_periods
from .schedule_parser import parse_schedule
from .storage import JsonStore, clear_all, load_periods, load_schedule, save_periods, save_schedule

EXIT_OK = 0
EXIT_ALL_FAILED = 1
EXIT_PARTIAL = 2


@dataclass
class FileResult:
    """Outcome details for a single input file."""

    path: str
    kind: str
    status: str
    detail: str
    duration_seconds: float
    output: Any = None

    @property
    def ok(self) -> bool:
        return self.status == "success"


@dataclass
class BatchResult:
    """Aggregate summary returned by :func:`run_batch`."""

    started_at: datetime
    finished_at: datetime
    files: List[FileResult] = field(default_factory=list)
    periods: List[PeriodSummary] = field(default_factory=list)
    schedule: Optional[ScheduleSet] = None
    combined: Optional[PeriodSummary] = None
    export_path: Optional[Path] = None

    @property
    def success(self) -> bool:
        return all(f.ok for f in self.files)

    @property
    def exit_code(self) -> int:
        if self.success:
            return EXIT_OK
        if any(f.ok for f in self.files):
            return EXIT_PARTIAL
        return EXIT_ALL_FAILED


def process_viewership_file(path: str | Path, config: Optional[RatingsDeskConfig] = None) -> PeriodSummary:
    """Read, extract and aggregate one viewership export.

    The period label comes from the filename. Raises :class:`EmptyInput` when
    the file yields no days.
    """

    cfg = config or RatingsDeskConfig()
    p = Path(path)
    grid = read_grid(p, trim=True)
    summary = process_viewership_grid(grid, label_from_filename(p.name), config=cfg.extraction)
    if summary.day_count == 0:
        raise EmptyInput(f"No viewing data found in {p.name}")
    return summary


def process_schedule_file(path: str | Path, config: Optional[RatingsDeskConfig] = None) -> ScheduleSet:
    cfg = config or RatingsDeskConfig()
    p = Path(path)
    # Schedule grids are column-positional, keep the empty tail cells
    grid = read_grid(p, trim=False)
    schedule = parse_schedule(grid, config=cfg.schedule)
    if not schedule.programs:
        raise EmptyInput(f"No programs found in {p.name}")
    return schedule


def combine_schedules(existing: Optional[ScheduleSet], incoming: ScheduleSet) -> ScheduleSet:
    """Merge ``incoming`` into ``existing``; dates present in both take the incoming programs."""

    if existing is None:
        return incoming
    days = dict(existing.days_to_programs)
    days.update(incoming.days_to_programs)
    weeks = list(existing.week_numbers)
    weeks.extend(w for w in incoming.week_numbers if w not in weeks)
    return ScheduleSet(
        week_numbers=weeks,
        reference_year=incoming.reference_year,
        days_to_programs=days,
        week_number=incoming.week_number,
    )


def _failure(path: Path, kind: str, start: float, timings: Dict[str, float], user_logger: logging.Logger, exc: Exception) -> FileResult:
    elapsed = end_timer(path.name, start, timings, user_logger)
    return FileResult(path=str(path), kind=kind, status="failed", detail=str(exc), duration_seconds=elapsed)


def run_batch(
    viewership_files: Sequence[str | Path] = (),
    schedule_files: Sequence[str | Path] = (),
    config: Optional[RatingsDeskConfig] = None,
    aggregate: bool = False,
    export_path: Optional[str | Path] = None,
    clear: bool = False,
) -> BatchResult:
    cfg = config or RatingsDeskConfig()
    logger = get_logger(cfg)
    user_logger = get_user_logger(cfg)
    store = JsonStore(cfg.storage.root)
    started = datetime.now(timezone.utc)
    timings: Dict[str, float] = {}
    results: List[FileResult] = []

    if clear:
        clear_all(store)
        log_system_event(logger, f"Cleared stored data under {store.root}")

    # Combined summaries are derived on demand and never kept in the store
    periods = [p for p in load_periods(store) if not is_combined_label(p.label)]
    schedule = load_schedule(store)

    for raw_path in viewership_files:
        path = Path(raw_path)
        start = start_timer()
        try:
            summary = process_viewership_file(path, cfg)
        except RatingsDeskError as exc:
            log_warning(logger, f"{path.name} rejected: {exc}")
            results.append(_failure(path, "viewership", start, timings, user_logger, exc))
            continue
        except (ValueError, OSError) as exc:
            log_error(logger, f"{path.name} could not be read: {exc}")
            results.append(_failure(path, "viewership", start, timings, user_logger, exc))
            continue
        periods = upsert_period(periods, summary)
        elapsed = end_timer(path.name, start, timings, user_logger)
        user_logger.info(f"{summary.label}: {summary.day_count} day(s) loaded from {path.name}")
        results.append(
            FileResult(
                path=str(path),
                kind="viewership",
                status="success",
                detail=f"{summary.label}, {summary.day_count} day(s)",
                duration_seconds=elapsed,
                output=summary,
            )
        )

    for raw_path in schedule_files:
        path = Path(raw_path)
        start = start_timer()
        try:
            parsed = process_schedule_file(path, cfg)
        except RatingsDeskError as exc:
            log_warning(logger, f"{path.name} rejected: {exc}")
            results.append(_failure(path, "schedule", start, timings, user_logger, exc))
            continue
        except (ValueError, OSError) as exc:
            log_error(logger, f"{path.name} could not be read: {exc}")
            results.append(_failure(path, "schedule", start, timings, user_logger, exc))
            continue
        schedule = combine_schedules(schedule, parsed)
        elapsed = end_timer(path.name, start, timings, user_logger)
        user_logger.info(f"Schedule {path.name}: {len(parsed.programs)} program(s) over {len(parsed.days_to_programs)} day(s)")
        results.append(
            FileResult(
                path=str(path),
                kind="schedule",
                status="success",
                detail=f"week(s) {parsed.week_numbers}, {len(parsed.programs)} program(s)",
                duration_seconds=elapsed,
                output=parsed,
            )
        )

    if schedule is not None:
        periods = merge_schedule_into_periods(periods, schedule)

    combined = None
    if aggregate and periods:
        combined = aggregate_periods(periods)
        user_logger.info(f"Combined {len(periods)} period(s) into {combined.label}")

    save_periods(store, periods)
    if schedule is not None:
        save_schedule(store, schedule)

    exported = None
    if export_path is not None:
        reported = periods
        if combined is not None and len(periods) > 1:
            reported = [*periods, combined]
        exported = export_summaries_to_workbook(reported, export_path, schedule=schedule)

    write_timing_report(timings, cfg)
    finished = datetime.now(timezone.utc)
    log_system_event(
        logger,
        f"Batch finished: {sum(r.ok for r in results)}/{len(results)} file(s) succeeded, {len(periods)} period(s) stored",
    )
    return BatchResult(
        started_at=started,
        finished_at=finished,
        files=results,
        periods=periods,
        schedule=schedule,
        combined=combined,
        export_path=exported,
    )


def _print_summary(result: BatchResult) -> None:
    if not result.files:
        print("No files processed.")
        return

    lines = ["ratingsdesk summary:"]
    for item in result.files:
        lines.append(f"  - {Path(item.path).name} [{item.kind}]: {item.status.upper()} ({item.detail})")
    if result.combined is not None:
        lines.append(f"  Combined: {result.combined.label}")
    if result.export_path is not None:
        lines.append(f"  Exported: {result.export_path}")
    print("\n".join(lines))


def build_arg_parser() -> argparse.ArgumentParser:
    """Create an argument parser for the ratingsdesk CLI."""

    parser = argparse.ArgumentParser(description="Ingest viewership and program-schedule exports")
    parser.add_argument("--config", default=None, help="Path to a YAML configuration file")
    parser.add_argument("--viewership", nargs="+", default=[], metavar="FILE", help="Viewership exports (xlsx/csv)")
    parser.add_argument("--schedule", nargs="+", default=[], metavar="FILE", help="Program-schedule exports (xlsx/csv)")
    parser.add_argument("--aggregate", action="store_true", help="Combine all single periods into one summary")
    parser.add_argument("--export", default=None, metavar="PATH", help="Write an Excel workbook (file or directory)")
    parser.add_argument("--clear", action="store_true", help="Clear stored data before ingesting")
    parser.add_argument("--year", type=int, default=None, help="Reference year for schedules without one")
    return parser


def main(argv: Optional[Sequence[str]] = None) -> int:
    """CLI entry point; returns the process exit code."""

    parser = build_arg_parser()
    args = parser.parse_args(argv)
    cfg = load_and_validate_config(load_config(args.config))
    if args.year is not None:
        cfg = cfg.model_copy(update={"schedule": cfg.schedule.model_copy(update={"reference_year": args.year})})
    result = run_batch(
        viewership_files=args.viewership,
        schedule_files=args.schedule,
        config=cfg,
        aggregate=args.aggregate,
        export_path=args.export,
        clear=args.clear,
    )
    _print_summary(result)
    return result.exit_code


if __name__ == "__main__":  # pragma: no cover - CLI guard
    sys.exit(main())
