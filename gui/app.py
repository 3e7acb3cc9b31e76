from __future__ import annotations

import asyncio
import logging
import os
import queue
import threading
import tkinter as tk
from tkinter import messagebox, filedialog
from typing import Any, Callable, Dict, Optional

from gui.ui_build import build_ui
from gui.mixins.report_mixin import ReportMixin
from gui.mixins.throbber_mixin import ThrobberMixin

from core import state as st
from core.config import DEFAULT_SETTINGS, Settings
from core.engine import load_file as engine_load_file, run_copy as engine_run_copy
from core.errors import AppError, friendly_message, ROLE_SOURCE, ROLE_TARGET
from core.models import CopyRequest
from core.output import save_result as output_save_result, suggested_filename

logger = logging.getLogger(__name__)

_POLL_MS = 50
_ROLES = (ROLE_SOURCE, ROLE_TARGET)


def error_text(e: BaseException) -> str:
    """One human-readable line for anything raised inside a background task."""
    if isinstance(e, AppError):
        return friendly_message(e)
    return f"Unexpected error: {e}".splitlines()[0]


class ColumnCopierApp(ThrobberMixin, ReportMixin, tk.Tk):
    """
    Column copier window.

    - CopierState is the single source of truth; every handler applies one
      transition from core.state and then calls _render().
    - File loads and copy jobs run on a worker thread (asyncio.run of the
      core coroutine). Outcomes come back through a queue drained on the Tk
      thread, so widgets are only touched from the main loop.
    - A load or job whose token is no longer current is dropped.
    """

    def __init__(self, settings: Optional[Settings] = None) -> None:
        super().__init__()
        self.settings: Settings = settings or DEFAULT_SETTINGS
        self.title(self.settings.window_title)
        self.minsize(760, 420)

        self.copier_state: st.CopierState = st.initial_state()
        self.last_request: Optional[CopyRequest] = None

        # Per-role load tokens; bumping one makes an in-flight load stale.
        self._load_tokens: Dict[str, int] = {role: 0 for role in _ROLES}
        self._loading: Dict[str, str] = {}

        self._jobs: "queue.Queue[Callable[[], None]]" = queue.Queue()
        self._worker: Optional[threading.Thread] = None
        self._poll_id: Optional[str] = None

        self._build_ui()
        self._render()
        self._schedule_poll()

        self.protocol("WM_DELETE_WINDOW", self._on_close)

    # ---------------- UI ----------------

    def _build_ui(self) -> None:
        build_ui(self)

    def _on_close(self) -> None:
        if self._poll_id is not None:
            try:
                self.after_cancel(self._poll_id)
            except tk.TclError:
                pass
            self._poll_id = None
        self.destroy()

    # ---------------- Background tasks ----------------

    def _schedule_poll(self) -> None:
        self._poll_id = self.after(_POLL_MS, self._poll_tick)

    def _poll_tick(self) -> None:
        self._drain_jobs()
        self._schedule_poll()

    def _drain_jobs(self) -> None:
        """Run completion callbacks posted by worker threads."""
        while True:
            try:
                callback = self._jobs.get_nowait()
            except queue.Empty:
                return
            callback()

    def _run_in_background(
        self,
        make_coro: Callable[[], Any],
        on_success: Callable[[Any], None],
        on_error: Callable[[BaseException], None],
    ) -> threading.Thread:
        """
        Run make_coro() to completion on a worker thread. Exactly one of the
        callbacks is queued for the Tk thread.
        """
        def worker() -> None:
            try:
                value = asyncio.run(make_coro())
            except AppError as e:
                logger.warning("Task failed: %s", e)
                self._jobs.put(lambda err=e: on_error(err))
                return
            except Exception as e:
                logger.exception("Task failed unexpectedly")
                self._jobs.put(lambda err=e: on_error(err))
                return
            self._jobs.put(lambda: on_success(value))

        t = threading.Thread(target=worker, daemon=True)
        self._worker = t
        t.start()
        return t

    # ---------------- Files ----------------

    def choose_file(self, role: str) -> None:
        path = filedialog.askopenfilename(
            title=f"Choose {role} workbook",
            filetypes=self.settings.file_dialog_types(),
        )
        if path:
            self.load_path(role, path)

    def load_path(self, role: str, path: str) -> None:
        self._load_tokens[role] += 1
        token = self._load_tokens[role]
        self._loading[role] = path
        self.copier_state = st.begin_load(self.copier_state, role)
        self._render()

        self._run_in_background(
            lambda: engine_load_file(path, role),
            lambda loaded: self._on_loaded(role, token, loaded),
            lambda e: self._on_load_failed(role, token, e),
        )

    def _on_loaded(self, role: str, token: int, loaded) -> None:
        if token != self._load_tokens[role]:
            logger.warning("Dropping stale %s load of %s", role, loaded.path)
            return
        self._loading.pop(role, None)
        self.copier_state = st.load_file(self.copier_state, loaded)
        self._render()

    def _on_load_failed(self, role: str, token: int, e: BaseException) -> None:
        if token != self._load_tokens[role]:
            return
        self._loading.pop(role, None)
        self.copier_state = st.load_failed(self.copier_state, role, error_text(e))
        self._render()

    # ---------------- Selection ----------------

    def _apply(self, transition: Callable[[], st.CopierState]) -> None:
        try:
            self.copier_state = transition()
        except AppError as e:
            self.copier_state = st.set_error(self.copier_state, friendly_message(e))
        self._render()

    def _on_sheet_selected(self, role: str) -> None:
        sheet = self.sheet_vars[role].get()
        self._apply(lambda: st.select_sheet(self.copier_state, role, sheet))

    def _on_column_selected(self, role: str) -> None:
        label = self.column_vars[role].get()
        self._apply(lambda: st.select_column(self.copier_state, role, label))

    def reset_all(self) -> None:
        for role in _ROLES:
            self._load_tokens[role] += 1
        self._loading.clear()
        self.last_request = None
        self.copier_state = st.reset(self.copier_state)
        self._render()

    # ---------------- Processing ----------------

    def process(self) -> None:
        try:
            new_state, request = st.begin_process(self.copier_state)
        except AppError as e:
            self.copier_state = st.set_error(self.copier_state, friendly_message(e))
            self._render()
            return

        self.copier_state = new_state
        self.last_request = request
        job_id = new_state.job_id
        self._render()

        settings = self.settings
        self._run_in_background(
            lambda: engine_run_copy(request, settings),
            lambda result: self._on_processed(job_id, result),
            lambda e: self._on_process_failed(job_id, e),
        )

    def _on_processed(self, job_id: int, result) -> None:
        if not st.is_current_job(self.copier_state, job_id):
            logger.warning("Dropping result of superseded job %d", job_id)
            return
        self.copier_state = st.finish_process(self.copier_state, job_id, result)
        self._render()

    def _on_process_failed(self, job_id: int, e: BaseException) -> None:
        self.copier_state = st.fail_process(self.copier_state, job_id, error_text(e))
        self._render()

    # ---------------- Output ----------------

    def save_result(self) -> None:
        result = self.copier_state.result
        if result is None:
            messagebox.showwarning("No result", "Process the files first.")
            return
        path = filedialog.asksaveasfilename(
            title="Save processed workbook",
            initialfile=suggested_filename(self.settings),
            defaultextension=".xlsx",
            filetypes=[("Excel workbook", "*.xlsx")],
        )
        if not path:
            return
        try:
            output_save_result(result, path)
        except AppError as e:
            messagebox.showerror("Save failed", friendly_message(e))
            return
        messagebox.showinfo("Saved", f"Saved to {path}")

    def show_details(self) -> None:
        s = self.copier_state
        text = self._format_copy_report(s.result, self.last_request, s.error)
        self._show_report_dialog("Copy details", text)

    # ---------------- Rendering ----------------

    def _status_text(self) -> str:
        s = self.copier_state
        if s.processing:
            return "Processing..."
        if self._loading:
            names = ", ".join(f"{role} file" for role in _ROLES if role in self._loading)
            return f"Loading {names}..."
        parts = []
        if s.error:
            parts.append(f"✗ {s.error}")
        if s.result is not None:
            parts.append(f"✓ File processed successfully. {s.result.message}.")
        return "\n".join(parts) if parts else "Idle"

    def _render_side(self, role: str) -> None:
        s = self.copier_state
        loaded = s.source if role == ROLE_SOURCE else s.target
        sheet = s.source_sheet if role == ROLE_SOURCE else s.target_sheet
        column = s.source_column if role == ROLE_SOURCE else s.target_column

        if role in self._loading:
            file_text = f"Loading {os.path.basename(self._loading[role])}..."
        elif loaded is not None:
            file_text = loaded.name
        else:
            file_text = "No file selected"
        self.file_vars[role].set(file_text)

        sheets = st.sheet_names(s, role)
        self.sheet_combos[role].configure(
            values=sheets,
            state="readonly" if sheets else "disabled",
        )
        self.sheet_vars[role].set(sheet)

        labels = st.column_labels(s, role)
        self.column_combos[role].configure(
            values=labels,
            state="readonly" if labels else "disabled",
        )
        self.column_vars[role].set(column)

    def _render(self) -> None:
        s = self.copier_state
        for role in _ROLES:
            self._render_side(role)

        self.process_btn.configure(state="normal" if st.can_process(s) else "disabled")
        self.save_btn.configure(state="normal" if s.result is not None else "disabled")
        self.details_btn.configure(
            state="normal" if (s.result is not None or s.error) else "disabled"
        )
        self.status_var.set(self._status_text())

        self.throbber_set(bool(s.processing or self._loading))


def main(settings: Optional[Settings] = None) -> None:
    settings = settings or DEFAULT_SETTINGS
    logging.basicConfig(
        level=getattr(logging, settings.log_level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    app = ColumnCopierApp(settings)
    app.mainloop()


if __name__ == "__main__":
    main()
