"""
core/writer.py — Rebuilds a target sheet from an updated grid.

Critical rule: None values are NEVER written to cells. Writing None explicitly
via ws.cell(value=None) registers a phantom cell in openpyxl, inflating
ws.max_row and ws.max_column, which would widen the header range the next
time the file is loaded.

Layout metadata (merged ranges, column widths, row heights) is relocated from
the original sheet verbatim; this module never interprets it. Merged ranges are
re-attached without ws.merge_cells(), which would turn every non-anchor cell
into a read-only MergedCell and drop the values just written there.
"""
from __future__ import annotations

import logging
from typing import Any, List, Optional

from openpyxl import Workbook
from openpyxl.worksheet.merge import MergedCellRange
from openpyxl.worksheet.worksheet import Worksheet

from .errors import AppError, INVALID_SHEET_SELECTION

logger = logging.getLogger(__name__)


def write_grid(ws: Worksheet, grid: List[Optional[List[Any]]]) -> int:
    """
    Write grid values A1-anchored. Absent rows and None cells are skipped.

    Returns the number of rows in the grid.
    """
    for r_idx, row in enumerate(grid):
        if not row:
            continue
        for c_idx, value in enumerate(row):
            if value is None:
                continue          # gap cell
            ws.cell(row=r_idx + 1, column=c_idx + 1, value=value)
    return len(grid)


def copy_layout(original: Worksheet, ws: Worksheet) -> None:
    """Carry merged ranges, column widths and row heights over to ws."""
    for rng in list(original.merged_cells.ranges):
        ws.merged_cells.add(MergedCellRange(ws, rng.coord))

    for key, dim in original.column_dimensions.items():
        new_dim = ws.column_dimensions[key]
        new_dim.width = dim.width
        new_dim.hidden = dim.hidden
        new_dim.min = dim.min
        new_dim.max = dim.max

    for idx, dim in original.row_dimensions.items():
        new_dim = ws.row_dimensions[idx]
        new_dim.height = dim.height
        new_dim.hidden = dim.hidden


def reassemble(
    wb: Workbook,
    sheet_name: str,
    grid: List[Optional[List[Any]]],
    original: Worksheet,
) -> Workbook:
    """
    Replace sheet_name in wb with a fresh sheet built from grid, keeping the
    original's position in the tab order and its layout metadata. Other sheets
    are untouched.
    """
    if sheet_name not in wb.sheetnames:
        raise AppError(
            INVALID_SHEET_SELECTION,
            f"Sheet not found: {sheet_name}",
            {"sheet": sheet_name, "role": "target"},
        )

    index = wb.sheetnames.index(sheet_name)
    was_active = wb.active is not None and wb.active.title == sheet_name

    wb.remove(wb[sheet_name])
    ws = wb.create_sheet(title=sheet_name, index=index)

    rows = write_grid(ws, grid)
    copy_layout(original, ws)

    if was_active:
        wb.active = index

    logger.debug("Reassembled sheet %r (%d rows, %d merged ranges)",
                 sheet_name, rows, len(ws.merged_cells.ranges))
    return wb
