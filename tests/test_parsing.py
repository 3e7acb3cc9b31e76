"""Tests for core.parsing — positional column codes."""
import pytest

from core.errors import AppError, COLUMN_NOT_FOUND
from core.parsing import col_index_to_letters, positional_code


def test_col_index_to_letters_basic():
    assert col_index_to_letters(1) == "A"
    assert col_index_to_letters(26) == "Z"
    assert col_index_to_letters(27) == "AA"
    assert col_index_to_letters(52) == "AZ"
    assert col_index_to_letters(703) == "AAA"


def test_positional_code_is_zero_based():
    assert positional_code(0) == "A"
    assert positional_code(2) == "C"
    assert positional_code(25) == "Z"
    assert positional_code(26) == "AA"


def test_col_index_to_letters_rejects_zero():
    with pytest.raises(AppError) as ei:
        col_index_to_letters(0)
    assert ei.value.code == COLUMN_NOT_FOUND
