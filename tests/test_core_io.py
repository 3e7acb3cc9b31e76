"""Tests for core.io — occupancy, used range, decode/encode, grid conversion."""
from __future__ import annotations

import datetime
import os
from io import BytesIO

import pytest
from openpyxl import Workbook, load_workbook

from core.errors import AppError, DECODE_FAILED, ENCODE_FAILED
from core.io import (
    compute_used_range,
    decode_workbook,
    encode_workbook,
    is_occupied,
    read_file,
    sheet_to_grid,
)


def _xlsx_bytes(rows, title="Sheet1"):
    wb = Workbook()
    ws = wb.active
    ws.title = title
    for row in rows:
        ws.append(row)
    buf = BytesIO()
    wb.save(buf)
    return buf.getvalue()


def test_is_occupied_none_and_empty_string():
    assert not is_occupied(None)
    assert not is_occupied("")


def test_is_occupied_truthy_values():
    assert is_occupied(" ")
    assert is_occupied(0)
    assert is_occupied(False)
    assert is_occupied("text")


def test_compute_used_range_handles_absent_rows():
    rows = [
        [None, None],
        None,
        [None, 5],
        [None, None],
    ]
    assert compute_used_range(rows) == (3, 2)


def test_compute_used_range_empty():
    assert compute_used_range([]) == (0, 0)


def test_decode_xlsx_round_trip_values():
    when = datetime.datetime(2024, 3, 1, 8, 30)
    data = _xlsx_bytes([["ID", "When"], [1, when]], title="Data")
    wb = decode_workbook(data, "book.xlsx", "source")
    assert wb.sheetnames == ["Data"]
    assert wb["Data"]["B2"].value == when


def test_decode_rejects_unsupported_extension():
    with pytest.raises(AppError) as ei:
        decode_workbook(b"a,b\n1,2\n", "table.csv", "source")
    assert ei.value.code == DECODE_FAILED
    assert ei.value.details["role"] == "source"


def test_decode_garbage_reports_role():
    with pytest.raises(AppError) as ei:
        decode_workbook(b"definitely not a workbook", "broken.xlsx", "target")
    assert ei.value.code == DECODE_FAILED
    assert ei.value.details["role"] == "target"


def test_decode_garbage_xls_reports_role():
    data = b"\xd0\xcf\x11\xe0\xa1\xb1\x1a\xe1" + b"\x00" * 64
    with pytest.raises(AppError) as ei:
        decode_workbook(data, "legacy.xls", "source")
    assert ei.value.code == DECODE_FAILED


def test_encode_produces_loadable_xlsx():
    wb = Workbook()
    wb.active["A1"] = "hello"
    data = encode_workbook(wb)
    assert data[:2] == b"PK"
    assert load_workbook(BytesIO(data)).active["A1"].value == "hello"


def test_sheet_to_grid_is_a1_anchored_and_rectangular():
    wb = Workbook()
    ws = wb.active
    ws["B2"] = "x"
    ws["C3"] = 3
    grid = sheet_to_grid(ws)
    assert grid == [
        [None, None, None],
        [None, "x", None],
        [None, None, 3],
    ]


def test_sheet_to_grid_drops_trailing_empty_rows():
    wb = Workbook()
    ws = wb.active
    ws.append(["h"])
    ws.append(["v"])
    ws.row_dimensions[10].height = 30
    ws["A10"].value = None
    assert sheet_to_grid(ws) == [["h"], ["v"]]


def test_sheet_to_grid_empty_sheet():
    wb = Workbook()
    assert sheet_to_grid(wb.active) == []


def test_read_file_missing_path():
    with pytest.raises(AppError) as ei:
        read_file(os.path.join("no", "such", "file.xlsx"), "source")
    assert ei.value.code == DECODE_FAILED
    assert ei.value.details["role"] == "source"


def test_read_file_returns_bytes(tmp_path):
    p = tmp_path / "a.xlsx"
    p.write_bytes(b"abc")
    assert read_file(str(p), "target") == b"abc"


def _legacy_xls(path):
    xlwt = pytest.importorskip("xlwt")
    book = xlwt.Workbook()
    sh = book.add_sheet("Legacy")
    date_style = xlwt.easyxf(num_format_str="YYYY-MM-DD")
    for c, label in enumerate(["ID", "When", "Flag", "Ratio"]):
        sh.write(0, c, label)
    sh.write(1, 0, 7.0)
    sh.write(1, 1, datetime.datetime(2023, 5, 17), date_style)
    sh.write(1, 2, True)
    sh.write(1, 3, 0.5)
    sh.write_merge(3, 3, 0, 2, "merged")
    sh.col(1).width = 256 * 20
    sh.col(2).hidden = True
    sh.row(0).height_mismatch = True
    sh.row(0).height = 20 * 30
    book.save(path)
    return path


def test_decode_xls_values_and_layout(tmp_path):
    path = _legacy_xls(str(tmp_path / "legacy.xls"))
    wb = decode_workbook(read_file(path, "source"), path, "source")

    assert wb.sheetnames == ["Legacy"]
    ws = wb["Legacy"]
    assert [c.value for c in ws[1]][:4] == ["ID", "When", "Flag", "Ratio"]

    ident = ws["A2"].value
    assert ident == 7 and isinstance(ident, int)
    assert ws["B2"].value == datetime.datetime(2023, 5, 17)
    assert ws["C2"].value is True
    assert ws["D2"].value == 0.5

    assert {r.coord for r in ws.merged_cells.ranges} == {"A4:C4"}
    assert ws["A4"].value == "merged"

    assert ws.column_dimensions["B"].width == 20
    assert ws.column_dimensions["C"].hidden is True
    assert ws.row_dimensions[1].height == 30


def test_decode_xls_headers_feed_grid(tmp_path):
    path = _legacy_xls(str(tmp_path / "legacy.xls"))
    wb = decode_workbook(read_file(path, "target"), path, "target")
    grid = sheet_to_grid(wb["Legacy"])
    assert grid[0] == ["ID", "When", "Flag", "Ratio"]
    assert len(grid) == 4


def test_encode_failure_is_reported(monkeypatch):
    wb = Workbook()

    def broken(filename):
        raise OSError("disk full")

    monkeypatch.setattr(wb, "save", broken)
    with pytest.raises(AppError) as ei:
        encode_workbook(wb)
    assert ei.value.code == ENCODE_FAILED
    assert "disk full" in ei.value.message
