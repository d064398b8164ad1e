"""Logging setup and timing helpers for ratingsdesk runs.

Each run can emit:
  - system-readable logs (system.log)
  - user-readable logs (user_readable.log)
  - per-file timing breakdowns (timing.log)

If a file handler cannot be opened, logging continues on the console only.
"""
from __future__ import annotations

import logging
import time
from pathlib import Path
from typing import Dict, Optional

from .config import RatingsDeskConfig

SYSTEM_FMT = "[%(asctime)s] [%(levelname)s] [%(name)s] %(message)s"
HUMAN_FMT = "%(message)s"

ROOT_LOGGER = "ratingsdesk"
USER_LOGGER = "ratingsdesk.user"


def _ensure_logs_dir(config: Optional[RatingsDeskConfig]) -> Path:
    cfg = config or RatingsDeskConfig()
    logs_dir = Path(cfg.logging.logs_dir).expanduser().resolve()
    logs_dir.mkdir(parents=True, exist_ok=True)
    return logs_dir


def _safe_add_file_handler(logger: logging.Logger, path: Path, fmt: str, level: int) -> None:
    try:
        fh = logging.FileHandler(path, encoding="utf-8")
    except OSError as exc:
        logger.warning("[WARNING] Failed to attach file handler %s (%s)", str(path), exc)
        return
    fh.setLevel(level)
    fh.setFormatter(logging.Formatter(fmt))
    logger.addHandler(fh)


def get_logger(config: Optional[RatingsDeskConfig] = None, name: str = ROOT_LOGGER) -> logging.Logger:
    """Return the system logger with console + system.log handlers.

    Module loggers (``ratingsdesk.extraction`` and friends) propagate here, so
    configuring the root package logger once covers the whole run.
    """
    cfg = config or RatingsDeskConfig()
    level = getattr(logging, cfg.logging.level)
    logs_dir = _ensure_logs_dir(cfg)
    logger = logging.getLogger(name)
    logger.setLevel(level)
    # Reset handlers to avoid duplication across repeated initializations
    logger.handlers = []

    sh = logging.StreamHandler()
    sh.setLevel(level)
    sh.setFormatter(logging.Formatter(SYSTEM_FMT))
    logger.addHandler(sh)

    _safe_add_file_handler(logger, logs_dir / "system.log", SYSTEM_FMT, level)
    return logger


def get_user_logger(config: Optional[RatingsDeskConfig] = None) -> logging.Logger:
    """Return a plain-message logger writing to user_readable.log and the console."""
    logs_dir = _ensure_logs_dir(config)
    logger = logging.getLogger(USER_LOGGER)
    logger.setLevel(logging.INFO)
    logger.handlers = []
    logger.propagate = False

    sh = logging.StreamHandler()
    sh.setLevel(logging.INFO)
    sh.setFormatter(logging.Formatter(HUMAN_FMT))
    logger.addHandler(sh)

    _safe_add_file_handler(logger, logs_dir / "user_readable.log", HUMAN_FMT, logging.INFO)
    return logger


def start_timer() -> float:
    return time.perf_counter()


def end_timer(name: str, start_time: float, timing_dict: Dict[str, float], user_logger: logging.Logger) -> float:
    """Record the elapsed seconds under ``name`` and report them."""
    elapsed = time.perf_counter() - float(start_time)
    timing_dict[name] = float(elapsed)
    user_logger.info(f"{name} processed in {elapsed:.2f} seconds")
    return elapsed


def write_timing_report(timing_dict: Dict[str, float], config: Optional[RatingsDeskConfig] = None) -> Optional[Path]:
    """Write a timing breakdown to logs/timing.log.

    Returns the path to the written report, or None when it could not be written.
    """
    logs_dir = _ensure_logs_dir(config)
    out_path = logs_dir / "timing.log"
    lines = ["---- RATINGSDESK TIMING REPORT ----"]
    total = 0.0
    for key, val in timing_dict.items():
        total += float(val)
        lines.append(f"{key}: {float(val):.2f} seconds")
    lines.append(f"Total Duration: {total:.2f} seconds")
    try:
        out_path.write_text("\n".join(lines), encoding="utf-8")
    except OSError as exc:
        logging.getLogger(ROOT_LOGGER).warning("[WARNING] Failed to write timing report (%s): %s", str(out_path), exc)
        return None
    return out_path


def log_system_event(logger: logging.Logger, message: str):
    logger.info("[SYSTEM] %s", message)


def log_warning(logger: logging.Logger, message: str):
    logger.warning("[WARNING] %s", message)


def log_error(logger: logging.Logger, message: str):
    logger.error("[ERROR] %s", message)
