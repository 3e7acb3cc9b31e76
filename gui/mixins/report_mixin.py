from __future__ import annotations

import os
import tkinter as tk
from tkinter import ttk


class ReportMixin:
    """
    Mixin for ColumnCopierApp: copy report formatting and dialog display.

    Methods
    -------
    _format_copy_report(result, request, error) -> str
    _line_tag(line) -> str               [static]
    _show_report_dialog(title, text) -> None
    """

    def _format_copy_report(self, result, request=None, error=None) -> str:
        """
        Plain-text summary of one copy job, including the column indices and
        row counts the job worked with.
        """
        import datetime as _dt

        _SEP_HDR = "═" * 72
        _SEP     = "─" * 72

        if result is None and not error:
            return "No result."

        ts = _dt.datetime.now().strftime("%Y-%m-%d  %H:%M:%S")

        lines = []
        lines.append(_SEP_HDR)
        lines.append("  COLUMN COPIER  —  Copy Summary")
        lines.append(f"  {ts}")
        lines.append(_SEP_HDR)
        if error:
            lines.append(f"  ✗  {error.splitlines()[0]}")
        if result is None:
            lines.append(_SEP_HDR)
            return "\n".join(lines)
        lines.append(f"  ✓  {result.message}")

        if request is not None:
            lines.append(
                f"     Source : {os.path.basename(request.source_path)} "
                f"→ {request.source_sheet} / {request.source_column}"
            )
            lines.append(
                f"     Target : {os.path.basename(request.target_path)} "
                f"→ {request.target_sheet} / {request.target_column}"
            )

        lines.append(_SEP)
        lines.append(f"     Source column index : {result.source_column_index}")
        lines.append(f"     Target column index : {result.target_column_index}")
        lines.append(f"     Source rows         : {result.source_row_count}")
        lines.append(f"     Target rows         : {result.target_row_count}")
        lines.append(f"     Output file         : {result.filename}")
        lines.append(_SEP_HDR)

        return "\n".join(lines)

    @staticmethod
    def _line_tag(line: str) -> str:
        s = line.strip()
        if s.startswith("✓"):
            return "ok"
        if s.startswith("✗"):
            return "err"
        return ""

    def _show_report_dialog(self, title: str, text: str) -> None:
        """Read-only report window; opening a new one closes the previous."""
        old = getattr(self, "_report_dialog", None)
        if old is not None and old.winfo_exists():
            old.destroy()

        lines = text.splitlines()
        win = tk.Toplevel(self)
        self._report_dialog = win
        win.title(title)
        win.transient(self)

        txt = tk.Text(win, wrap="none", height=len(lines) + 1, width=76,
                      font=("Courier", 9), padx=8, pady=6)
        txt.tag_configure("ok", foreground="#1a6b1a")
        txt.tag_configure("err", foreground="#8b0000")
        for line in lines:
            txt.insert("end", line + "\n", self._line_tag(line))
        txt.configure(state="disabled")
        txt.pack(fill="both", expand=True, padx=10, pady=(10, 0))

        ttk.Button(win, text="Close", command=win.destroy).pack(anchor="e", padx=10, pady=10)
