"""
test_throbber.py — Unit tests for Throbber widget and ThrobberMixin.

Tests:
  - test_throbber_starts_idle
  - test_throbber_set_running_true_spins
  - test_throbber_back_to_idle
  - test_throbber_set_running_is_idempotent
  - test_throbber_mixin_no_widget (graceful no-op)
"""
from __future__ import annotations

import pytest

try:
    import tkinter as tk
    _root = tk.Tk()
    tk.Frame(_root)
    _root.destroy()
    _TCL_OK = True
except Exception:
    _TCL_OK = False

pytestmark = pytest.mark.skipif(not _TCL_OK, reason="Tcl/Tk not available")

from gui.mixins.throbber_mixin import Throbber, ThrobberMixin


def test_throbber_starts_idle():
    root = tk.Tk()
    t = Throbber(root)
    assert t.running is False
    root.update_idletasks()
    # Idle state draws a single small oval
    assert len(t.find_all()) == 1
    t.destroy()
    root.destroy()


def test_throbber_set_running_true_spins():
    root = tk.Tk()
    t = Throbber(root)
    t.set_running(True)
    assert t.running is True
    root.update_idletasks()
    # Busy state draws the ring of dots
    assert len(t.find_all()) >= 2
    assert t._after_id is not None
    t.set_running(False)
    t.destroy()
    root.destroy()


def test_throbber_back_to_idle():
    root = tk.Tk()
    t = Throbber(root)
    t.set_running(True)
    root.update_idletasks()
    t.set_running(False)
    assert t.running is False
    assert t._after_id is None
    root.update_idletasks()
    assert len(t.find_all()) == 1
    t.destroy()
    root.destroy()


def test_throbber_set_running_is_idempotent():
    root = tk.Tk()
    t = Throbber(root)
    t.set_running(True)
    first_after_id = t._after_id
    t.set_running(True)
    assert t._after_id == first_after_id
    t.set_running(False)
    t.set_running(False)
    assert t.running is False
    t.destroy()
    root.destroy()


def test_throbber_mixin_no_widget():
    """ThrobberMixin must not crash when self.throbber doesn't exist."""

    class FakeApp(ThrobberMixin):
        pass

    app = FakeApp()
    app.throbber_set(True)
    app.throbber_set(False)

    app.throbber = None
    app.throbber_set(True)


def test_throbber_mixin_forwards_to_widget():
    class FakeThrobber:
        def __init__(self):
            self.calls = []

        def set_running(self, busy):
            self.calls.append(busy)

    class FakeApp(ThrobberMixin):
        pass

    app = FakeApp()
    app.throbber = FakeThrobber()
    app.throbber_set(True)
    app.throbber_set(False)
    assert app.throbber.calls == [True, False]


def test_throbber_busy_highlight_moves():
    root = tk.Tk()
    t = Throbber(root)
    t.set_running(True)
    lit_before = t._lit
    t.after_cancel(t._after_id)
    t._advance()
    assert t._lit == (lit_before + 1) % 8
    assert len(t.find_all()) == 8
    t.set_running(False)
    t.destroy()
    root.destroy()
