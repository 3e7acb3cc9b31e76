"""
core/engine.py — Load and copy pipeline.

Responsible for:
  - Reading + decoding a picked file into a LoadedFile (sheet/header summary)
  - Running one copy job: both workbooks are read and decoded concurrently
    and joined before any copying starts, then the copy, reassembly and
    encode steps run in order
  - Returning a CopyResult carrying the encoded target workbook

Blocking work (file reads, openpyxl/xlrd parsing, encoding) runs in worker
threads via asyncio.to_thread so the caller's loop is only suspended while
waiting on it. There are no retries and no timeouts.
"""
from __future__ import annotations

import asyncio
import logging
from dataclasses import replace
from typing import Optional, Tuple

from openpyxl import Workbook
from openpyxl.worksheet.worksheet import Worksheet

from .config import DEFAULT_SETTINGS, Settings
from .errors import AppError, INVALID_SHEET_SELECTION, ROLE_SOURCE, ROLE_TARGET
from .headers import extract_headers, resolve_column, workbook_headers
from .io import decode_workbook, encode_workbook, read_file, sheet_to_grid
from .models import CopyRequest, CopyResult, LoadedFile
from .transform import copy_column
from .writer import reassemble

logger = logging.getLogger(__name__)


# ── Private helpers ───────────────────────────────────────────────────────────

def _read_and_decode(path: str, role: str) -> Workbook:
    data = read_file(path, role)
    return decode_workbook(data, path, role)


def _get_worksheet(wb: Workbook, sheet_name: str, role: str) -> Worksheet:
    """Return the named worksheet. Chartsheets and missing names are rejected."""
    for ws in wb.worksheets:
        if ws.title == sheet_name:
            return ws
    raise AppError(
        INVALID_SHEET_SELECTION,
        f"Sheet not found in {role} workbook: {sheet_name}",
        {"sheet": sheet_name, "role": role},
    )


def _copy_into_workbook(
    request: CopyRequest,
    source_wb: Workbook,
    target_wb: Workbook,
    settings: Settings,
) -> Tuple[Workbook, CopyResult]:
    """
    In-memory part of a job: resolve selections, copy, reassemble.
    Nothing is mutated until both column labels have resolved.
    """
    source_ws = _get_worksheet(source_wb, request.source_sheet, ROLE_SOURCE)
    target_ws = _get_worksheet(target_wb, request.target_sheet, ROLE_TARGET)

    source_col = resolve_column(extract_headers(source_ws), request.source_column)
    target_col = resolve_column(extract_headers(target_ws), request.target_column)

    source_grid = sheet_to_grid(source_ws)
    target_grid = sheet_to_grid(target_ws)

    updated, copied = copy_column(source_grid, target_grid, source_col, target_col)
    reassemble(target_wb, request.target_sheet, updated, target_ws)

    logger.debug(
        "Copy diagnostics: source_col=%d target_col=%d source_rows=%d target_rows=%d",
        source_col, target_col, len(source_grid), len(target_grid),
    )

    result = CopyResult(
        data=b"",
        rows_copied=copied,
        source_column=request.source_column,
        target_column=request.target_column,
        source_column_index=source_col,
        target_column_index=target_col,
        source_row_count=len(source_grid),
        target_row_count=len(target_grid),
        filename=settings.output_filename,
    )
    return target_wb, result


# ── Public API ────────────────────────────────────────────────────────────────

async def load_file(path: str, role: str) -> LoadedFile:
    """Read a picked workbook and summarise its sheets and header labels."""
    wb = await asyncio.to_thread(_read_and_decode, path, role)
    sheets = workbook_headers(wb, role)
    logger.info("Loaded %s file %s: %s", role, path, ", ".join(s.name for s in sheets))
    return LoadedFile(role=role, path=path, sheets=sheets)


async def run_copy(
    request: CopyRequest,
    settings: Optional[Settings] = None,
) -> CopyResult:
    """
    Execute one copy job.

    Pipeline:
      1. Read + decode source and target concurrently; join on both
      2. Look up both sheets
      3. Resolve both column labels against the current header rows
      4. Convert sheets to grids and copy the column
      5. Reassemble the target sheet (layout metadata carried over)
      6. Encode the target workbook to XLSX bytes
    """
    settings = settings or DEFAULT_SETTINGS

    source_wb, target_wb = await asyncio.gather(
        asyncio.to_thread(_read_and_decode, request.source_path, ROLE_SOURCE),
        asyncio.to_thread(_read_and_decode, request.target_path, ROLE_TARGET),
    )

    target_wb, result = _copy_into_workbook(request, source_wb, target_wb, settings)
    data = await asyncio.to_thread(encode_workbook, target_wb)

    logger.info(
        "%s (%s:%s -> %s:%s)",
        result.message,
        request.source_sheet, request.source_column,
        request.target_sheet, request.target_column,
    )
    return replace(result, data=data)


def load_file_sync(path: str, role: str) -> LoadedFile:
    return asyncio.run(load_file(path, role))


def run_copy_sync(request: CopyRequest, settings: Optional[Settings] = None) -> CopyResult:
    return asyncio.run(run_copy(request, settings))
