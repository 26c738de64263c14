from __future__ import annotations

import json
import logging
import os
import sys
from datetime import datetime, timezone
from typing import Any, Optional

# Attributes passed via ``extra=`` that make it into JSON lines.
_EXTRA_KEYS = ("service", "record_id", "endpoint", "status")


class JsonFormatter(logging.Formatter):
    """A minimal JSON formatter for structured logs."""

    def format(self, record: logging.LogRecord) -> str:  # type: ignore[override]
        payload: dict[str, Any] = {
            "ts": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        if record.exc_info:
            payload["exc_info"] = self.formatException(record.exc_info)

        for key in _EXTRA_KEYS:
            value = getattr(record, key, None)
            if value is not None:
                payload[key] = value
        return json.dumps(payload, separators=(",", ":"), ensure_ascii=False)


class _ServiceFilter(logging.Filter):
    """Stamp every record with a fixed service label."""

    def __init__(self, service_name: str) -> None:
        super().__init__()
        self._service = service_name

    def filter(self, record: logging.LogRecord) -> bool:
        if getattr(record, "service", None) is None:
            record.service = self._service
        return True


def configure_logging(
    fmt: str | None = None,
    *,
    level: str | int | None = None,
    service_name: Optional[str] = None,
) -> None:
    """Configure root logger with plain text or JSON output on stderr.

    Args:
        fmt: 'json' or 'text'. Defaults to LOG_FORMAT env or 'text'.
        level: level name or number. Defaults to LOG_LEVEL env or INFO.
        service_name: optional service label to inject into every log line.
    """

    fmt = (fmt or os.getenv("LOG_FORMAT", "text")).lower()
    level = level or os.getenv("LOG_LEVEL", "INFO")
    if isinstance(level, str):
        # unknown names (e.g. "verbose") fall back to INFO
        level = logging.getLevelName(level.upper())
        if not isinstance(level, int):
            level = logging.INFO
    root = logging.getLogger()
    root.setLevel(level)

    for h in list(root.handlers):
        root.removeHandler(h)

    handler = logging.StreamHandler(sys.stderr)
    if fmt == "json":
        handler.setFormatter(JsonFormatter())
    else:
        handler.setFormatter(
            logging.Formatter("[%(asctime)s] %(levelname)s %(name)s: %(message)s")
        )
    if service_name:
        handler.addFilter(_ServiceFilter(service_name))
    root.addHandler(handler)

    # httpx logs every request line at INFO; keep it for DEBUG runs only.
    logging.getLogger("httpx").setLevel(
        logging.DEBUG if root.level <= logging.DEBUG else logging.WARNING
    )
