"""
gui/mixins/throbber_mixin.py — Busy indicator shown next to the Process button.

Throbber(tk.Canvas):
  - Idle: one grey dot in the centre
  - Busy: a ring of dots with a highlighted dot stepping round it

ThrobberMixin:
  - throbber_set(busy) — driven by ColumnCopierApp._render from the current state
  - no-op when self.throbber does not exist yet
"""
from __future__ import annotations

import math
import tkinter as tk


_SIZE = 22
_DOTS = 8
_DOT_R = 2
_RING_R = 7
_IDLE = "#cccccc"
_DIM = "#d6e4ff"
_LIT = "#1f76ff"
_STEP_MS = 90


class Throbber(tk.Canvas):

    def __init__(self, master, **kw):
        kw.setdefault("width", _SIZE)
        kw.setdefault("height", _SIZE)
        kw.setdefault("highlightthickness", 0)
        super().__init__(master, **kw)
        self._busy = False
        self._lit = 0
        self._after_id = None
        self._draw()

    @property
    def running(self) -> bool:
        return self._busy

    def set_running(self, busy: bool) -> None:
        """Switch between busy and idle. Repeating the current mode is a no-op."""
        if busy == self._busy:
            return
        self._busy = busy
        if busy:
            self._lit = 0
            self._advance()
            return
        if self._after_id is not None:
            self.after_cancel(self._after_id)
            self._after_id = None
        self._draw()

    def _dot(self, x: float, y: float, color: str) -> None:
        self.create_oval(x - _DOT_R, y - _DOT_R, x + _DOT_R, y + _DOT_R,
                         fill=color, outline=color)

    def _draw(self) -> None:
        self.delete("all")
        c = _SIZE / 2
        if not self._busy:
            self._dot(c, c, _IDLE)
            return
        for i in range(_DOTS):
            angle = 2 * math.pi * i / _DOTS
            self._dot(c + _RING_R * math.cos(angle), c + _RING_R * math.sin(angle),
                      _LIT if i == self._lit else _DIM)

    def _advance(self) -> None:
        self._draw()
        self._lit = (self._lit + 1) % _DOTS
        self._after_id = self.after(_STEP_MS, self._advance)


class ThrobberMixin:
    """Mixin for ColumnCopierApp: forwards busy/idle to self.throbber."""

    def throbber_set(self, busy: bool) -> None:
        throbber = getattr(self, "throbber", None)
        if throbber is not None:
            throbber.set_running(busy)
