"""Error taxonomy for file- and row-level ingestion failures.

File-level errors (``HeaderNotFound``, ``NoDayColumns``, ``EmptyInput``) abort
the current file only; batch callers catch :class:`RatingsDeskError` and move
on to the next file. ``InvalidRow`` never leaves the parser that raised it.
"""
from __future__ import annotations


class RatingsDeskError(ValueError):
    """Base class for all ingestion failures."""


class HeaderNotFound(RatingsDeskError):
    """No row carries the date / day / time-slot header markers."""


class NoDayColumns(RatingsDeskError):
    """A schedule sheet has no recognizable weekday header."""


class EmptyInput(RatingsDeskError):
    """The input had no usable rows, or produced no days."""


class InvalidRow(RatingsDeskError):
    """A single data row is malformed; callers skip it."""
