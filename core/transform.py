"""
core/transform.py — Positional column copy between two grids.

The target grid is treated copy-on-write: callers get a new grid back and the
grid they passed in is left exactly as it was.
"""
from __future__ import annotations

import logging
from typing import Any, Optional, Sequence, Tuple

from .errors import AppError, COLUMN_NOT_FOUND
from .io import Grid

logger = logging.getLogger(__name__)


def _check_index(idx: int, side: str) -> None:
    if idx < 0:
        raise AppError(COLUMN_NOT_FOUND, f"Bad {side} column index: {idx}")


def copy_column(
    source_grid: Sequence[Optional[Sequence[Any]]],
    target_grid: Sequence[Optional[Sequence[Any]]],
    source_col: int,
    target_col: int,
) -> Tuple[Grid, int]:
    """
    Copy source_col of every data row into target_col of the same row index.

    Row 0 (header) is skipped on both sides. The target gains empty rows up to
    len(source_grid) - 1 when it is shorter; a source row that is absent or too
    short to reach source_col writes nothing and is not counted.

    Returns (new_target_grid, copied_row_count).
    """
    _check_index(source_col, "source")
    _check_index(target_col, "target")

    out: Grid = [list(row) if row is not None else None for row in target_grid]
    copied = 0

    for i in range(1, len(source_grid)):
        while i >= len(out):
            out.append([])

        src_row = source_grid[i]
        if src_row is None or source_col >= len(src_row):
            continue

        if not isinstance(out[i], list):
            out[i] = []
        dest_row = out[i]
        if target_col >= len(dest_row):
            dest_row.extend([None] * (target_col + 1 - len(dest_row)))
        dest_row[target_col] = src_row[source_col]
        copied += 1

    logger.debug(
        "copy_column: source_col=%d target_col=%d source_rows=%d target_rows=%d copied=%d",
        source_col, target_col, len(source_grid), len(target_grid), copied,
    )
    return out, copied
