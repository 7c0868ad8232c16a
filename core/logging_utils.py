"""
Plum Health Profiler – Logging Utilities
=========================================
Logging setup plus a helper that records pipeline state transitions.

Every transition carries the run id of the request that produced it, so
interleaved logs from concurrent requests can be told apart. With
``LOG_FORMAT=json`` each record is one JSON object; transition records add
``run_id``, ``state`` and ``details`` keys.
"""

from __future__ import annotations

import json
import logging
import sys
import uuid
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional

_PIPELINE_ATTR = "pipeline_event"

_NOISY_LOGGERS = ("urllib3", "requests", "httpx", "httpcore", "groq", "PIL")


def setup_logging(
    level: str = "INFO",
    log_file: Optional[str] = None,
    json_format: bool = False,
) -> logging.Logger:
    """
    Configure root logging for the profiler.

    Parameters
    ----------
    level : str
        Logging level name (DEBUG, INFO, WARNING, ERROR).
    log_file : str, optional
        Also write to this file; parent directories are created.
    json_format : bool
        Emit one JSON object per record instead of pipe-separated text.
    """
    root_logger = logging.getLogger()
    root_logger.setLevel(getattr(logging, level.upper(), logging.INFO))
    root_logger.handlers.clear()

    formatter: logging.Formatter
    if json_format:
        formatter = JsonFormatter()
    else:
        formatter = logging.Formatter(
            fmt="%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )

    handlers = [logging.StreamHandler(sys.stderr)]
    if log_file:
        Path(log_file).parent.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(log_file))

    for handler in handlers:
        handler.setFormatter(formatter)
        root_logger.addHandler(handler)

    for name in _NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    return root_logger


class JsonFormatter(logging.Formatter):
    """One JSON object per record; pipeline transitions are flattened in."""

    def format(self, record: logging.LogRecord) -> str:
        entry = {
            "timestamp": datetime.fromtimestamp(record.created, timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        event = getattr(record, _PIPELINE_ATTR, None)
        if event:
            entry.update(event)
        if record.exc_info and record.exc_info[1]:
            entry["exception"] = repr(record.exc_info[1])
        return json.dumps(entry, default=str)


def new_run_id() -> str:
    """Short id tying together the log lines of one pipeline run."""
    return uuid.uuid4().hex[:8]


def log_pipeline_event(
    logger: logging.Logger,
    run_id: str,
    state: str,
    details: Optional[dict] = None,
):
    """Log a pipeline state transition for run ``run_id``."""
    msg = f"[run {run_id}] -> {state}"
    if details:
        msg += f" | {json.dumps(details, default=str)}"
    logger.info(
        msg,
        extra={_PIPELINE_ATTR: {"run_id": run_id, "state": state, "details": details or {}}},
    )
