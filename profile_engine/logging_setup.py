"""
Logging setup for profilebook entry points.

Engine modules log through ``logging.getLogger(__name__)`` and never configure
handlers themselves. The CLI and GUI call :func:`setup_logging` once at startup.

Invariants
----------
- JSON lines always include timestamp, level, logger name and message.
- Extra fields (storage_key, record_count) are included when present.
"""

from __future__ import annotations

import json
import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Final

from .errors import ConfigurationError

_EXTRA_FIELDS: Final[tuple[str, ...]] = ("storage_key", "record_count")

_HUMAN_FORMAT: Final[str] = "%(asctime)s %(levelname)s %(name)s: %(message)s"


class JSONFormatter(logging.Formatter):
    """Format log records as single-line JSON objects."""

    def format(self, record: logging.LogRecord) -> str:
        log = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        for key in _EXTRA_FIELDS:
            val = record.__dict__.get(key)
            if val is not None:
                log[key] = val
        if record.exc_info:
            log["exception"] = self.formatException(record.exc_info)
        return json.dumps(log, ensure_ascii=False)


def setup_logging(level: str = "WARNING", fmt: str = "text", log_file: Path | None = None) -> None:
    """
    Configure root logging.

    Parameters
    ----------
    level:
        Level name for the root logger.
    fmt:
        ``"json"`` for JSON lines on the stream handler, anything else for a
        human-readable format.
    log_file:
        Optional JSONL file that additionally receives every record.

    Raises
    ------
    ConfigurationError
        If the log file cannot be created.
    """
    root = logging.getLogger()
    for handler in list(root.handlers):
        if getattr(handler, "_profilebook", False):
            root.removeHandler(handler)
            handler.close()

    stream = logging.StreamHandler()
    stream.setFormatter(JSONFormatter() if fmt == "json" else logging.Formatter(_HUMAN_FORMAT))
    stream._profilebook = True  # type: ignore[attr-defined]
    root.addHandler(stream)

    if log_file is not None:
        try:
            log_file.parent.mkdir(parents=True, exist_ok=True)
            file_handler = logging.FileHandler(log_file, encoding="utf-8")
        except OSError as exc:
            raise ConfigurationError(f"Cannot open log file {log_file}: {exc}") from exc
        file_handler.setFormatter(JSONFormatter())
        file_handler._profilebook = True  # type: ignore[attr-defined]
        root.addHandler(file_handler)

    root.setLevel(getattr(logging, level.upper(), logging.WARNING))
