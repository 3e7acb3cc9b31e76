from __future__ import annotations

import tkinter as tk
from tkinter import ttk

from gui.mixins.throbber_mixin import Throbber

# NOTE: GUI-only module. No business logic here.


def _build_side(app, parent, role: str, step: str, title: str) -> ttk.LabelFrame:
    """One file panel: pick button + file label + sheet and column dropdowns."""
    box = ttk.LabelFrame(parent, text=f"{step}  {title}", padding=10)
    box.columnconfigure(1, weight=1)

    file_var = tk.StringVar(value="No file selected")
    ttk.Button(
        box,
        text="Choose file...",
        command=lambda: app.choose_file(role),
    ).grid(row=0, column=0, sticky="w")
    ttk.Label(box, textvariable=file_var).grid(row=0, column=1, sticky="w", padx=(10, 0))

    ttk.Label(box, text="Sheet:").grid(row=1, column=0, sticky="w", pady=(10, 0))
    sheet_var = tk.StringVar()
    sheet_combo = ttk.Combobox(
        box,
        textvariable=sheet_var,
        values=[],
        state="disabled",
        style="White.TCombobox",
    )
    sheet_combo.grid(row=1, column=1, sticky="ew", padx=(10, 0), pady=(10, 0))
    sheet_combo.bind("<<ComboboxSelected>>", lambda e: app._on_sheet_selected(role))

    ttk.Label(box, text="Column:").grid(row=2, column=0, sticky="w", pady=(6, 0))
    column_var = tk.StringVar()
    column_combo = ttk.Combobox(
        box,
        textvariable=column_var,
        values=[],
        state="disabled",
        style="White.TCombobox",
    )
    column_combo.grid(row=2, column=1, sticky="ew", padx=(10, 0), pady=(6, 0))
    column_combo.bind("<<ComboboxSelected>>", lambda e: app._on_column_selected(role))

    app.file_vars[role] = file_var
    app.sheet_vars[role] = sheet_var
    app.sheet_combos[role] = sheet_combo
    app.column_vars[role] = column_var
    app.column_combos[role] = column_combo
    return box


def build_ui(app) -> None:
    # Overall layout: source | target side by side, actions + status below
    app.columnconfigure(0, weight=1)
    app.rowconfigure(0, weight=1)

    root = ttk.Frame(app, padding=8)
    root.grid(row=0, column=0, sticky="nsew")
    root.columnconfigure(0, weight=1, uniform="cols")
    root.columnconfigure(1, weight=1, uniform="cols")
    root.rowconfigure(3, weight=1)

    # Apply theme + styles FIRST so all widgets pick them up correctly
    try:
        style = ttk.Style()
        if style.theme_use() != "clam":
            style.theme_use("clam")
        style.configure("RunAccent.TButton", padding=(16, 6))
        style.map(
            "RunAccent.TButton",
            background=[("active", "#1e6bd6"), ("!disabled", "#1f76ff")],
            foreground=[("!disabled", "white")],
        )
        style.configure(
            "White.TCombobox",
            fieldbackground="white",
            background="white",
            selectbackground="white",
            selectforeground="black",
        )
        style.map(
            "White.TCombobox",
            fieldbackground=[("readonly", "white"), ("disabled", "#f0f0f0")],
            selectbackground=[("readonly", "white")],
            selectforeground=[("readonly", "black")],
        )
    except tk.TclError:
        pass

    # ----- TOP BAR -----
    topbar = ttk.Frame(root)
    topbar.grid(row=0, column=0, columnspan=2, sticky="ew", pady=(0, 8))
    topbar.columnconfigure(0, weight=1)
    ttk.Label(
        topbar,
        text="Pick a source and a target workbook, then the columns to copy.",
    ).grid(row=0, column=0, sticky="w")
    ttk.Button(topbar, text="Reset", command=app.reset_all).grid(row=0, column=1, sticky="e")

    # ----- FILE PANELS -----
    app.file_vars = {}
    app.sheet_vars = {}
    app.sheet_combos = {}
    app.column_vars = {}
    app.column_combos = {}

    _build_side(app, root, "source", "1", "Source workbook").grid(
        row=1, column=0, sticky="nsew", padx=(0, 5))
    _build_side(app, root, "target", "2", "Target workbook").grid(
        row=1, column=1, sticky="nsew", padx=(5, 0))

    # ----- ACTIONS -----
    actions = ttk.Frame(root)
    actions.grid(row=2, column=0, columnspan=2, pady=(12, 8))

    app.process_btn = ttk.Button(
        actions, text="Process", style="RunAccent.TButton", command=app.process,
    )
    app.process_btn.pack(side="left")
    app.throbber = Throbber(actions)
    app.throbber.pack(side="left", padx=(8, 0))

    # ----- STATUS / RESULT -----
    result_box = ttk.LabelFrame(root, text="Result", padding=10)
    result_box.grid(row=3, column=0, columnspan=2, sticky="nsew")
    result_box.columnconfigure(0, weight=1)

    app.status_var = tk.StringVar(value="Idle")
    app.status_label = ttk.Label(result_box, textvariable=app.status_var, wraplength=640, justify="left")
    app.status_label.grid(row=0, column=0, sticky="w")

    btns = ttk.Frame(result_box)
    btns.grid(row=1, column=0, sticky="e", pady=(8, 0))
    app.details_btn = ttk.Button(btns, text="Details...", command=app.show_details)
    app.details_btn.pack(side="left", padx=(0, 6))
    app.save_btn = ttk.Button(btns, text="Save result...", style="RunAccent.TButton", command=app.save_result)
    app.save_btn.pack(side="left")
