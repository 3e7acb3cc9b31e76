from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Any, Dict, Optional


@dataclass
class AppError(Exception):
    """
    User-facing error with a short code and structured details.
    Raise AppError from core modules; GUI should display friendly_message(e).
    """
    code: str
    message: str
    details: Optional[Dict[str, Any]] = None

    def __str__(self) -> str:
        if self.details:
            return f"{self.code}: {self.message} ({self.details})"
        return f"{self.code}: {self.message}"


# ── Error codes (keep stable for tests and GUI) ───────────────────────────────

DECODE_FAILED           = "DECODE_FAILED"
ENCODE_FAILED           = "ENCODE_FAILED"
COLUMN_NOT_FOUND        = "COLUMN_NOT_FOUND"
INVALID_SHEET_SELECTION = "INVALID_SHEET_SELECTION"
EMPTY_WORKBOOK          = "EMPTY_WORKBOOK"
INCOMPLETE_SELECTION    = "INCOMPLETE_SELECTION"
FILE_LOCKED             = "FILE_LOCKED"
SAVE_FAILED             = "SAVE_FAILED"

ROLE_SOURCE = "source"
ROLE_TARGET = "target"


def _role_word(e: AppError) -> str:
    role = (e.details or {}).get("role", "")
    if role == ROLE_SOURCE:
        return "source"
    if role == ROLE_TARGET:
        return "target"
    return "spreadsheet"


def _file_suffix(e: AppError) -> str:
    if e.details and e.details.get("path"):
        return f" ({os.path.basename(e.details['path'])})"
    return ""


# ── Friendly message lookup ───────────────────────────────────────────────────

def friendly_message(e: AppError) -> str:
    """
    Return a plain-English one-liner suitable for display in the GUI.
    Never exposes raw tracebacks or internal code paths.
    """
    code = e.code
    msg  = e.message or ""

    if code == DECODE_FAILED:
        return (
            f"Could not read the {_role_word(e)} file{_file_suffix(e)}. "
            f"Check that it is a valid XLSX or XLS workbook.\n({msg})"
        )

    if code == FILE_LOCKED:
        return f"File is open in another program{_file_suffix(e)}. Close it and try again."

    if code == COLUMN_NOT_FOUND:
        return f"The selected column could not be found. Please select the columns again.\n({msg})"

    if code == INVALID_SHEET_SELECTION:
        return f"The selected sheet does not exist in the {_role_word(e)} file. Pick another sheet.\n({msg})"

    if code == EMPTY_WORKBOOK:
        return f"The {_role_word(e)} file contains no sheets."

    if code == INCOMPLETE_SELECTION:
        return "Please choose both files, a sheet and a column on each side before processing."

    if code == ENCODE_FAILED:
        return f"Could not build the output workbook.\n({msg})"

    if code == SAVE_FAILED:
        if "permission" in msg.lower() or "locked" in msg.lower() or "access" in msg.lower():
            return f"Could not save, the file is open in another program{_file_suffix(e)}. Close it and try again."
        return f"Could not save the output file{_file_suffix(e)}. Check that the folder exists."

    # Fallback: first line of the raw message only
    clean = msg.splitlines()[0] if msg else "An unexpected error occurred."
    return clean
