"""
core/io.py — Spreadsheet codec boundary.

Decodes workbook bytes into an openpyxl Workbook (XLSX natively, legacy XLS
through xlrd), encodes a Workbook back to XLSX bytes, and converts between
worksheets and row-major grids.

Every failure leaves this module as an AppError carrying the file role
(source/target) so the GUI can say which file was bad.
"""
from __future__ import annotations

import logging
import os
from io import BytesIO
from typing import Any, List, Optional

import xlrd
from openpyxl import Workbook, load_workbook
from openpyxl.worksheet.worksheet import Worksheet

from .config import ACCEPTED_EXTENSIONS
from .errors import AppError, DECODE_FAILED, ENCODE_FAILED, FILE_LOCKED
from .parsing import positional_code

logger = logging.getLogger(__name__)

Grid = List[Optional[List[Any]]]

# Compound-document header used by legacy .xls files.
_OLE_MAGIC = b"\xd0\xcf\x11\xe0\xa1\xb1\x1a\xe1"


def is_occupied(value: Any) -> bool:
    """
    Single occupancy definition for header fallback and used-range detection.
    """
    if value is None:
        return False
    if isinstance(value, str) and value == "":
        return False
    return True


def compute_used_range(rows: Grid) -> tuple[int, int]:
    """
    Returns (used_height, used_width).
    """
    if not rows:
        return 0, 0

    used_height = 0
    used_width = 0

    for r_idx, row in enumerate(rows):
        for c_idx, value in enumerate(row or []):
            if is_occupied(value):
                used_height = max(used_height, r_idx + 1)
                used_width = max(used_width, c_idx + 1)

    return used_height, used_width


# ── File access ───────────────────────────────────────────────────────────────

def read_file(path: str, role: str) -> bytes:
    try:
        with open(path, "rb") as f:
            return f.read()
    except PermissionError:
        raise AppError(
            FILE_LOCKED,
            f"{role.capitalize()} file is locked: {path}",
            {"path": path, "role": role},
        )
    except OSError as e:
        raise AppError(
            DECODE_FAILED,
            f"Could not open {role} file: {e}",
            {"path": path, "role": role},
        )


# ── Decode ────────────────────────────────────────────────────────────────────

def decode_workbook(data: bytes, filename: str, role: str) -> Workbook:
    """
    Parse workbook bytes. The extension gates what is accepted; the content
    decides the codec, so an .xls renamed to .xlsx (or the reverse) still opens.
    """
    ext = os.path.splitext(filename)[1].lower()
    details = {"path": filename, "role": role}
    if ext not in ACCEPTED_EXTENSIONS:
        raise AppError(DECODE_FAILED, f"Unsupported file type: {ext or '(none)'}", details)

    try:
        if data[:8] == _OLE_MAGIC:
            wb = _decode_xls(data)
        else:
            wb = load_workbook(BytesIO(data), data_only=True)
    except AppError:
        raise
    except Exception as e:
        raise AppError(DECODE_FAILED, f"Failed to read {role} workbook: {e}", details)

    logger.info("Decoded %s workbook %s (%d sheet(s))", role, os.path.basename(filename), len(wb.sheetnames))
    return wb


def _xls_value(book, cell) -> Any:
    ctype = cell.ctype
    if ctype in (xlrd.XL_CELL_EMPTY, xlrd.XL_CELL_BLANK):
        return None
    if ctype == xlrd.XL_CELL_DATE:
        return xlrd.xldate.xldate_as_datetime(cell.value, book.datemode)
    if ctype == xlrd.XL_CELL_BOOLEAN:
        return bool(cell.value)
    if ctype == xlrd.XL_CELL_NUMBER:
        value = cell.value
        if float(value).is_integer():
            return int(value)
        return value
    if ctype == xlrd.XL_CELL_ERROR:
        return xlrd.error_text_from_code.get(cell.value)
    return cell.value


def _decode_xls(data: bytes) -> Workbook:
    """Convert a legacy XLS book into an in-memory openpyxl Workbook."""
    book = xlrd.open_workbook(file_contents=data, formatting_info=True)
    wb = Workbook()
    wb.remove(wb.active)

    for sh in book.sheets():
        ws = wb.create_sheet(title=sh.name)
        for r in range(sh.nrows):
            for c in range(sh.ncols):
                value = _xls_value(book, sh.cell(r, c))
                if value is None:
                    continue
                ws.cell(row=r + 1, column=c + 1, value=value)

        # xlrd ranges are (rlo, rhi, clo, chi) with exclusive upper bounds.
        for rlo, rhi, clo, chi in sh.merged_cells:
            ws.merge_cells(start_row=rlo + 1, start_column=clo + 1, end_row=rhi, end_column=chi)

        for colx, info in sh.colinfo_map.items():
            dim = ws.column_dimensions[positional_code(colx)]
            dim.width = info.width / 256
            dim.hidden = bool(info.hidden)

        for rowx, info in sh.rowinfo_map.items():
            dim = ws.row_dimensions[rowx + 1]
            dim.height = info.height / 20
            dim.hidden = bool(info.hidden)

    return wb


# ── Encode ────────────────────────────────────────────────────────────────────

def encode_workbook(wb: Workbook) -> bytes:
    buf = BytesIO()
    try:
        wb.save(buf)
    except Exception as e:
        raise AppError(ENCODE_FAILED, f"Failed to write workbook: {e}")
    return buf.getvalue()


# ── Grid conversion ───────────────────────────────────────────────────────────

def sheet_to_grid(ws: Worksheet) -> Grid:
    """
    A1-anchored row-major values. Every row spans 1..max_column with None for
    empty cells; trailing rows holding nothing are dropped.
    """
    rows: Grid = []
    for row in ws.iter_rows(
        min_row=1, max_row=ws.max_row,
        min_col=1, max_col=ws.max_column,
        values_only=True,
    ):
        rows.append(list(row))

    used_h, _ = compute_used_range(rows)
    return rows[:used_h]
