\
from __future__ import annotations

from typing import List, Sequence

from openpyxl import Workbook
from openpyxl.worksheet.worksheet import Worksheet

from .errors import AppError, COLUMN_NOT_FOUND, EMPTY_WORKBOOK
from .io import is_occupied
from .models import SheetHeaders
from .parsing import positional_code


def extract_headers(ws: Worksheet) -> List[str]:
    """
    Column labels from row 1, one per column in A..max_column.
    Empty header cells fall back to the column letter (A, B, ... AA).
    An empty sheet reports max_column == 1, so it yields ["A"].
    """
    headers: List[str] = []
    for col in range(1, ws.max_column + 1):
        value = ws.cell(row=1, column=col).value
        if is_occupied(value):
            headers.append(str(value))
        else:
            headers.append(positional_code(col - 1))
    return headers


def resolve_column(headers: Sequence[str], label: str) -> int:
    """
    Zero-based index of label in headers.
    Duplicate labels resolve to the first (left-most) occurrence.
    """
    for idx, h in enumerate(headers):
        if h == label:
            return idx
    raise AppError(
        COLUMN_NOT_FOUND,
        f"Column not found: {label!r}",
        {"label": label},
    )


def workbook_headers(wb: Workbook, role: str = "") -> List[SheetHeaders]:
    """Headers for every sheet, in workbook order."""
    if not wb.worksheets:
        raise AppError(EMPTY_WORKBOOK, "Workbook has no sheets.", {"role": role})
    return [SheetHeaders(name=ws.title, headers=extract_headers(ws)) for ws in wb.worksheets]
