from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Optional

from .config import DEFAULT_SETTINGS, Settings
from .errors import AppError, FILE_LOCKED, SAVE_FAILED
from .models import CopyResult

logger = logging.getLogger(__name__)


def suggested_filename(settings: Optional[Settings] = None) -> str:
    return (settings or DEFAULT_SETTINGS).output_filename


def atomic_write_bytes(path: str, data: bytes) -> None:
    p = Path(path)
    p.parent.mkdir(parents=True, exist_ok=True)
    tmp = p.with_suffix(p.suffix + ".tmp")
    tmp.write_bytes(data)
    try:
        os.replace(str(tmp), str(p))
    except OSError:
        tmp.unlink(missing_ok=True)
        raise


def save_result(result: CopyResult, path: str) -> str:
    """Write the produced workbook to path. Returns the path written."""
    try:
        atomic_write_bytes(path, result.data)
    except PermissionError:
        raise AppError(
            FILE_LOCKED,
            f"Output file is open in another program: {path}",
            {"path": path},
        )
    except OSError as e:
        raise AppError(SAVE_FAILED, str(e), {"path": path})
    logger.info("Saved result (%d bytes) to %s", len(result.data), path)
    return path
