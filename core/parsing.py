\
from __future__ import annotations

from .errors import AppError, COLUMN_NOT_FOUND


def col_index_to_letters(n: int) -> str:
    """
    Convert 1-based index to Excel column letters (1->A).
    """
    if n <= 0:
        raise AppError(COLUMN_NOT_FOUND, f"Bad column index: {n}")
    out = []
    x = n
    while x:
        x, rem = divmod(x - 1, 26)
        out.append(chr(ord("A") + rem))
    return "".join(reversed(out))


def positional_code(col_idx: int) -> str:
    """Zero-based positional column code: 0->A, 25->Z, 26->AA."""
    return col_index_to_letters(col_idx + 1)
