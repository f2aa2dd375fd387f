# Copyright (c) 2025 Henru Wang
# All rights reserved.

"""Logging setup for swift-context.

Two sinks, both on the root logger:
- an optional JSON-lines file under a log directory, one file per UTC day
- a console handler on stderr, since stdout carries the generated bundle

Per-file context travels with a record through `extra=`, e.g.
``logger.info("Analyzed", extra={"swift_file": "Main.swift"})``; the JSON
formatter lifts those keys into the entry.
"""

import json
import logging
import sys
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, Optional

LOG_FILE_PREFIX = "swift_context_"

CONSOLE_FORMAT = "swift-context: %(levelname)s: %(name)s: %(message)s"

# Keys lifted from `extra=` into the JSON entry when present
CONTEXT_KEYS = ("swift_file", "project_root", "dependency_count")


class StructuredFormatter(logging.Formatter):
    """Formats each record as one JSON object.

    The timestamp is the record's creation time in UTC. Records may carry an
    ``extra_fields`` dict, merged last, and any of CONTEXT_KEYS.
    """

    def __init__(self, include_location: bool = False) -> None:
        super().__init__()
        self.include_location = include_location

    def format(self, record: logging.LogRecord) -> str:
        created = datetime.fromtimestamp(record.created, tz=timezone.utc)
        entry: Dict[str, Any] = {
            "timestamp": created.isoformat(timespec="milliseconds").replace("+00:00", "Z"),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        if self.include_location:
            entry["location"] = f"{record.module}:{record.lineno}"

        for key in CONTEXT_KEYS:
            value = getattr(record, key, None)
            if value is not None:
                entry[key] = str(value) if isinstance(value, Path) else value

        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)

        extra_fields = getattr(record, "extra_fields", None)
        if isinstance(extra_fields, dict):
            entry.update(extra_fields)

        return json.dumps(entry, default=str)


def log_file_path(log_dir: Path, when: Optional[datetime] = None) -> Path:
    """Daily log file inside log_dir, named by UTC date."""
    moment = when if when is not None else datetime.now(timezone.utc)
    return log_dir / f"{LOG_FILE_PREFIX}{moment.strftime('%Y%m%d')}.log"


def setup_logging(
    log_dir: Optional[Path] = None,
    log_level: int = logging.INFO,
    console_output: bool = True,
) -> Optional[Path]:
    """Configure the root logger, replacing handlers from any earlier call.

    Args:
        log_dir: Directory for JSON log files. If None, no file is written.
        log_level: Logging level (default: INFO)
        console_output: Whether to also log to stderr (default: True)

    Returns:
        The log file in use, or None when only the console is configured.
    """
    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)
    for handler in list(root_logger.handlers):
        root_logger.removeHandler(handler)
        handler.close()

    log_file: Optional[Path] = None
    if log_dir is not None:
        log_dir.mkdir(parents=True, exist_ok=True)
        log_file = log_file_path(log_dir)
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setLevel(log_level)
        file_handler.setFormatter(StructuredFormatter(include_location=log_level <= logging.DEBUG))
        root_logger.addHandler(file_handler)

    if console_output:
        console_handler = logging.StreamHandler(sys.stderr)
        console_handler.setLevel(log_level)
        console_handler.setFormatter(logging.Formatter(CONSOLE_FORMAT))
        root_logger.addHandler(console_handler)

    if log_file is not None:
        logging.getLogger(__name__).debug(f"Logging to {log_file}")
    return log_file
