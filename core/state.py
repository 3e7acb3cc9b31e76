"""
core/state.py — Explicit UI state and its transitions.

CopierState is immutable; every transition returns a new record. The GUI keeps
exactly one current state and re-renders from it, so there is no set of
parallel variables to keep in lockstep.

Selection rules:
  - Picking a new file empties that side (file, sheet, column) until the
    load settles; a finished load starts with no sheet/column selected.
  - Picking a sheet clears that side's column selection.
  - Any file or selection change drops the produced result; a result is only
    ever shown for the selections that produced it.
"""
from __future__ import annotations

from dataclasses import dataclass, replace
from typing import List, Optional, Tuple

from .errors import (
    AppError,
    COLUMN_NOT_FOUND, INVALID_SHEET_SELECTION, INCOMPLETE_SELECTION,
    ROLE_SOURCE, ROLE_TARGET,
)
from .models import CopyRequest, CopyResult, LoadedFile


@dataclass(frozen=True)
class CopierState:
    source: Optional[LoadedFile] = None
    target: Optional[LoadedFile] = None
    source_sheet: str = ""
    source_column: str = ""
    target_sheet: str = ""
    target_column: str = ""
    processing: bool = False
    job_id: int = 0
    result: Optional[CopyResult] = None
    error: Optional[str] = None


def _invalidate(state: CopierState, **changes) -> CopierState:
    """
    Apply a file or selection change. The result is dropped, and a job still
    running for the old selections is superseded so its outcome is ignored.
    """
    if state.processing:
        changes.update(processing=False, job_id=state.job_id + 1)
    return replace(state, result=None, **changes)


def initial_state() -> CopierState:
    return CopierState()


def reset(state: CopierState) -> CopierState:
    # job_id keeps counting so an in-flight job finishing after a reset is stale.
    return replace(CopierState(), job_id=state.job_id + 1)


# ── Files ─────────────────────────────────────────────────────────────────────

def _check_role(role: str) -> None:
    if role not in (ROLE_SOURCE, ROLE_TARGET):
        raise ValueError(f"Unknown role: {role!r}")


def load_file(state: CopierState, loaded: LoadedFile) -> CopierState:
    _check_role(loaded.role)
    if loaded.role == ROLE_SOURCE:
        return _invalidate(state, source=loaded, source_sheet="", source_column="", error=None)
    return _invalidate(state, target=loaded, target_sheet="", target_column="", error=None)


def load_source(state: CopierState, loaded: LoadedFile) -> CopierState:
    return load_file(state, replace(loaded, role=ROLE_SOURCE))


def load_target(state: CopierState, loaded: LoadedFile) -> CopierState:
    return load_file(state, replace(loaded, role=ROLE_TARGET))


def begin_load(state: CopierState, role: str) -> CopierState:
    """
    A new file was picked for role. That side is emptied until the load
    settles, so nothing derived from the previous file stays usable.
    """
    _check_role(role)
    if role == ROLE_SOURCE:
        return _invalidate(state, source=None, source_sheet="", source_column="")
    return _invalidate(state, target=None, target_sheet="", target_column="")


def load_failed(state: CopierState, role: str, message: str) -> CopierState:
    """A failed load replaces that side with nothing; the other side is kept."""
    _check_role(role)
    if role == ROLE_SOURCE:
        return _invalidate(state, source=None, source_sheet="", source_column="", error=message)
    return _invalidate(state, target=None, target_sheet="", target_column="", error=message)


# ── Selections ────────────────────────────────────────────────────────────────

def _loaded(state: CopierState, role: str) -> Optional[LoadedFile]:
    _check_role(role)
    return state.source if role == ROLE_SOURCE else state.target


def sheet_names(state: CopierState, role: str) -> List[str]:
    loaded = _loaded(state, role)
    return loaded.sheet_names if loaded is not None else []


def column_labels(state: CopierState, role: str) -> List[str]:
    loaded = _loaded(state, role)
    sheet = state.source_sheet if role == ROLE_SOURCE else state.target_sheet
    if loaded is None or not sheet:
        return []
    return list(loaded.headers_for(sheet) or [])


def select_sheet(state: CopierState, role: str, sheet: str) -> CopierState:
    if sheet and sheet not in sheet_names(state, role):
        raise AppError(
            INVALID_SHEET_SELECTION,
            f"Sheet not found: {sheet}",
            {"sheet": sheet, "role": role},
        )
    if role == ROLE_SOURCE:
        return _invalidate(state, source_sheet=sheet, source_column="")
    return _invalidate(state, target_sheet=sheet, target_column="")


def select_column(state: CopierState, role: str, label: str) -> CopierState:
    if label and label not in column_labels(state, role):
        raise AppError(
            COLUMN_NOT_FOUND,
            f"Column not found: {label!r}",
            {"label": label, "role": role},
        )
    if role == ROLE_SOURCE:
        return _invalidate(state, source_column=label)
    return _invalidate(state, target_column=label)


def select_source_sheet(state: CopierState, sheet: str) -> CopierState:
    return select_sheet(state, ROLE_SOURCE, sheet)


def select_target_sheet(state: CopierState, sheet: str) -> CopierState:
    return select_sheet(state, ROLE_TARGET, sheet)


def select_source_column(state: CopierState, label: str) -> CopierState:
    return select_column(state, ROLE_SOURCE, label)


def select_target_column(state: CopierState, label: str) -> CopierState:
    return select_column(state, ROLE_TARGET, label)


# ── Processing ────────────────────────────────────────────────────────────────

def selections_complete(state: CopierState) -> bool:
    return bool(
        state.source is not None and state.target is not None
        and state.source_sheet and state.target_sheet
        and state.source_column and state.target_column
    )


def can_process(state: CopierState) -> bool:
    return selections_complete(state) and not state.processing


def begin_process(state: CopierState) -> Tuple[CopierState, CopyRequest]:
    """Start a copy job. Returns the running state and the job's request."""
    if not selections_complete(state):
        raise AppError(INCOMPLETE_SELECTION, "Select both files, sheets and columns.")
    request = CopyRequest(
        source_path=state.source.path,
        source_sheet=state.source_sheet,
        source_column=state.source_column,
        target_path=state.target.path,
        target_sheet=state.target_sheet,
        target_column=state.target_column,
    )
    new_state = replace(state, processing=True, job_id=state.job_id + 1, error=None)
    return new_state, request


def is_current_job(state: CopierState, job_id: int) -> bool:
    return state.processing and job_id == state.job_id


def finish_process(state: CopierState, job_id: int, result: CopyResult) -> CopierState:
    if not is_current_job(state, job_id):
        return state
    return replace(state, processing=False, result=result, error=None)


def fail_process(state: CopierState, job_id: int, message: str) -> CopierState:
    """The previous result (if still current) stays displayed next to the error."""
    if not is_current_job(state, job_id):
        return state
    return replace(state, processing=False, error=message)


def set_error(state: CopierState, message: str) -> CopierState:
    """Show an error without touching files, selections or the result."""
    return replace(state, error=message)
