from __future__ import annotations

from dataclasses import dataclass
from typing import Tuple


OUTPUT_FILENAME = "processed_excel.xlsx"
ACCEPTED_EXTENSIONS: Tuple[str, ...] = (".xlsx", ".xlsm", ".xls")


@dataclass(frozen=True)
class Settings:
    """
    In-process defaults. Nothing is read from the environment or persisted.
    """
    output_filename: str = OUTPUT_FILENAME
    accepted_extensions: Tuple[str, ...] = ACCEPTED_EXTENSIONS
    log_level: str = "INFO"
    window_title: str = "Excel Column Copier"

    def file_dialog_types(self):
        patterns = " ".join(f"*{ext}" for ext in self.accepted_extensions)
        return [("Excel workbooks", patterns), ("All files", "*.*")]


DEFAULT_SETTINGS = Settings()
