\
from __future__ import annotations

import os
from dataclasses import dataclass, field
from typing import List, Optional

from .config import OUTPUT_FILENAME


# ---- Loaded workbook summaries (dropdown data) ----

@dataclass(frozen=True)
class SheetHeaders:
    """
    One sheet of a loaded workbook and its row-1 column labels, left to right.
    """
    name: str
    headers: List[str] = field(default_factory=list)


@dataclass(frozen=True)
class LoadedFile:
    """
    A workbook the user picked. Only the summary is kept; the copy pipeline
    re-reads the file so it never shares workbook objects with the UI.
    """
    role: str                             # "source" | "target"
    path: str
    sheets: List[SheetHeaders] = field(default_factory=list)

    @property
    def name(self) -> str:
        return os.path.basename(self.path)

    @property
    def sheet_names(self) -> List[str]:
        return [s.name for s in self.sheets]

    def headers_for(self, sheet_name: str) -> Optional[List[str]]:
        for s in self.sheets:
            if s.name == sheet_name:
                return s.headers
        return None


# ---- Copy job ----

@dataclass(frozen=True)
class CopyRequest:
    source_path: str
    source_sheet: str
    source_column: str                    # header label
    target_path: str
    target_sheet: str
    target_column: str                    # header label


@dataclass(frozen=True)
class CopyResult:
    """
    Returned by engine.run_copy. GUI renders message and offers data for saving.

    rows_copied counts data rows up to the last source row holding a value;
    blank rows trailing the source sheet are neither padded nor counted.
    """
    data: bytes
    rows_copied: int
    source_column: str
    target_column: str
    source_column_index: int = 0
    target_column_index: int = 0
    source_row_count: int = 0
    target_row_count: int = 0
    filename: str = OUTPUT_FILENAME

    @property
    def message(self) -> str:
        row_word = "row" if self.rows_copied == 1 else "rows"
        return (
            f"Copied {self.rows_copied} {row_word} from column "
            f"{self.source_column} to column {self.target_column}"
        )
