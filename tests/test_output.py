"""Tests for core.output — suggested filename and saving results."""
from __future__ import annotations

import os

import pytest

import core.output as output
from core.config import Settings
from core.errors import AppError, FILE_LOCKED, SAVE_FAILED
from core.models import CopyResult
from core.output import atomic_write_bytes, save_result, suggested_filename


def _result(data=b"PK-data"):
    return CopyResult(data=data, rows_copied=1, source_column="A", target_column="B")


def test_suggested_filename_default():
    assert suggested_filename() == "processed_excel.xlsx"


def test_suggested_filename_from_settings():
    assert suggested_filename(Settings(output_filename="x.xlsx")) == "x.xlsx"


def test_atomic_write_creates_parent_dirs(tmp_path):
    p = tmp_path / "nested" / "dir" / "out.xlsx"
    atomic_write_bytes(str(p), b"abc")
    assert p.read_bytes() == b"abc"
    assert not (tmp_path / "nested" / "dir" / "out.xlsx.tmp").exists()


def test_atomic_write_overwrites(tmp_path):
    p = tmp_path / "out.xlsx"
    p.write_bytes(b"old")
    atomic_write_bytes(str(p), b"new")
    assert p.read_bytes() == b"new"


def test_save_result_writes_bytes(tmp_path):
    p = tmp_path / "processed_excel.xlsx"
    assert save_result(_result(b"payload"), str(p)) == str(p)
    assert p.read_bytes() == b"payload"


def test_save_result_locked_file(tmp_path, monkeypatch):
    def locked(path, data):
        raise PermissionError("denied")

    monkeypatch.setattr(output, "atomic_write_bytes", locked)
    with pytest.raises(AppError) as ei:
        save_result(_result(), str(tmp_path / "out.xlsx"))
    assert ei.value.code == FILE_LOCKED


def test_save_result_os_error(tmp_path, monkeypatch):
    def broken(path, data):
        raise OSError("disk full")

    monkeypatch.setattr(output, "atomic_write_bytes", broken)
    with pytest.raises(AppError) as ei:
        save_result(_result(), str(tmp_path / "out.xlsx"))
    assert ei.value.code == SAVE_FAILED
    assert ei.value.details["path"].endswith("out.xlsx")


def test_copy_result_message_singular():
    assert _result().message == "Copied 1 row from column A to column B"
    assert _result().filename == os.path.basename("processed_excel.xlsx")


def test_failed_replace_removes_temp_file(tmp_path, monkeypatch):
    def locked(src, dst):
        raise PermissionError("in use")

    monkeypatch.setattr(output.os, "replace", locked)
    target = tmp_path / "processed_excel.xlsx"
    with pytest.raises(AppError) as ei:
        save_result(_result(), str(target))
    assert ei.value.code == FILE_LOCKED
    assert not (tmp_path / "processed_excel.xlsx.tmp").exists()
    assert not target.exists()
