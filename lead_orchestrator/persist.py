"""Write a retrieved record to ``lead-<timestamp>.json``."""
from __future__ import annotations

import json
import logging
import os
from datetime import datetime
from pathlib import Path
from typing import Any, Callable, Mapping

from common.datetime import file_stamp, utcnow
from common.errors import WriteError

__all__ = ["FILE_PREFIX", "output_filename", "persist"]

_LOG = logging.getLogger(__name__)

FILE_PREFIX = "lead-"


def output_filename(now: datetime) -> str:
    return f"{FILE_PREFIX}{file_stamp(now)}.json"


def persist(
    record: Mapping[str, Any],
    *,
    directory: str | Path | None = None,
    clock: Callable[[], datetime] = utcnow,
) -> Path:
    """Serialise *record* (2-space indent) into *directory*; returns the file path.

    An existing file with the same name is overwritten.
    """

    target_dir = Path(directory or os.getenv("CRM_OUTPUT_DIR") or Path.cwd())
    path = target_dir / output_filename(clock())
    try:
        path.write_text(json.dumps(record, indent=2, ensure_ascii=False), encoding="utf-8")
    except OSError as exc:
        _LOG.error("Error saving record to %s: %s", path, exc)
        raise WriteError(str(path), exc.strerror or str(exc)) from exc
    _LOG.info("Record details saved to file: %s", path.name)
    return path
