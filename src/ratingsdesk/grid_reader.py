"""Boundary: read a spreadsheet or delimited file into a raw cell grid.

Tokenization is delegated to pandas (openpyxl for xlsx). The grid keeps cells
as the reader produced them; only empties are unified to ``None``.
"""
from __future__ import annotations

import io
import logging
from pathlib import Path
from typing import Any, Iterable, List, Optional

import pandas as pd

from .cells import is_empty
from .errors import EmptyInput

LOGGER = logging.getLogger("ratingsdesk.grid")

EXCEL_EXTENSIONS = {".xlsx", ".xlsm", ".xls"}
TEXT_EXTENSIONS = {".csv", ".tsv", ".txt"}

Grid = List[List[Any]]


def validate_extension(path: Path, allowed: Iterable[str]) -> None:
    """Ensure the file extension is allowed."""

    suffix = path.suffix.lower()
    if suffix not in {ext.lower() for ext in allowed}:
        raise ValueError(f"Unsupported file extension: {suffix}. Allowed: {sorted(allowed)}")


def frame_to_grid(df: pd.DataFrame, trim: bool = True) -> Grid:
    """Convert a header-less DataFrame to a list of rows.

    With ``trim`` set, trailing empty cells are dropped from each row so row
    lengths reflect the last filled cell, as spreadsheet exports do.
    """

    grid: Grid = []
    for values in df.itertuples(index=False, name=None):
        row = [None if is_empty(v) else (v.to_pydatetime() if isinstance(v, pd.Timestamp) else v) for v in values]
        if trim:
            while row and row[-1] is None:
                row.pop()
        grid.append(row)
    return grid


def _read_delimited(path: Path, sep: Optional[str]) -> pd.DataFrame:
    text = path.read_text(encoding="utf-8-sig")
    if not text.strip():
        return pd.DataFrame()
    if sep is None:
        sep = "\t" if path.suffix.lower() == ".tsv" else ","
    lines = text.splitlines()
    # Upper bound on the widest row; quoted separators only over-count
    width = max(line.count(sep) for line in lines) + 1
    try:
        return pd.read_csv(
            io.StringIO(text),
            header=None,
            names=list(range(width)),
            sep=sep,
            dtype=str,
            keep_default_na=False,
            skip_blank_lines=False,
            engine="python",
        )
    except Exception as exc:
        raise ValueError(f"Failed to read delimited file {path}: {exc}") from exc


def read_grid(path: str | Path, sheet: int | str = 0, sep: Optional[str] = None, trim: bool = True) -> Grid:
    """Read ``path`` into a RawGrid.

    Supported formats: csv, tsv, txt, xlsx, xlsm, xls. Raises ``ValueError``
    for unsupported or unreadable files and :class:`EmptyInput` when the file
    holds no rows.
    """

    p = Path(path)
    if not p.exists():
        raise FileNotFoundError(f"Input not found: {p}")
    validate_extension(p, EXCEL_EXTENSIONS | TEXT_EXTENSIONS)

    if p.suffix.lower() in EXCEL_EXTENSIONS:
        try:
            df = pd.read_excel(p, sheet_name=sheet, header=None)
        except Exception as exc:
            raise ValueError(f"Failed to read Excel file {p}: {exc}") from exc
    else:
        df = _read_delimited(p, sep)

    grid = frame_to_grid(df, trim=trim)
    if not any(grid):
        raise EmptyInput(f"No data found in {p.name}")
    LOGGER.info("Read %d row(s) from %s", len(grid), p.name)
    return grid
