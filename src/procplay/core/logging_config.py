"""Logging configuration for procplay.

Library modules only create loggers (``logging.getLogger(__name__)``); the
CLI calls ``configure_logging`` once at startup.

Environment Variables:
    PROCPLAY_LOG_LEVEL: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
    PROCPLAY_LOG_FORMAT: Output format ("text" or "json")
    PROCPLAY_LOG_FILE: Optional log file path
"""

from __future__ import annotations

import json
import logging
import os
import sys
from datetime import datetime
from typing import Any, Literal

TEXT_FORMAT = "%(asctime)s.%(msecs)03d - %(name)s - %(levelname)s - %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

# Attributes present on every LogRecord; anything else came in via extra=
_STANDARD_ATTRS = frozenset(
    logging.LogRecord("", 0, "", 0, "", (), None).__dict__.keys() | {"message", "taskName"}
)

_configured = False


class JsonFormatter(logging.Formatter):
    """One JSON object per record.

    {
        "timestamp": "2026-01-05T14:30:00.123000",
        "level": "DEBUG",
        "logger": "procplay.client.client",
        "message": "stage_completed: proc=echo name=a",
        "extra": {...}
    }
    """

    def format(self, record: logging.LogRecord) -> str:
        log_data: dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        extra = {k: v for k, v in record.__dict__.items() if k not in _STANDARD_ATTRS}
        if extra:
            log_data["extra"] = extra

        return json.dumps(log_data, default=str)


def configure_logging(
    level: str | None = None,
    format: Literal["text", "json"] | None = None,
    file_path: str | None = None,
    force: bool = False,
) -> None:
    """Configure the root logger.

    Subsequent calls are ignored unless force=True. Arguments that are None
    fall back to the PROCPLAY_LOG_* environment variables.

    Args:
        level: Log level. Defaults to PROCPLAY_LOG_LEVEL or "WARNING".
        format: Output format. Defaults to PROCPLAY_LOG_FORMAT or "text".
        file_path: Optional log file. Defaults to PROCPLAY_LOG_FILE.
        force: Reconfigure even if already configured.
    """
    global _configured
    if _configured and not force:
        return

    level = level or os.environ.get("PROCPLAY_LOG_LEVEL", "WARNING")
    format = format or os.environ.get("PROCPLAY_LOG_FORMAT", "text")  # type: ignore
    file_path = file_path or os.environ.get("PROCPLAY_LOG_FILE")

    root_logger = logging.getLogger()
    root_logger.setLevel(getattr(logging, level.upper()))
    root_logger.handlers.clear()

    if format == "json":
        formatter: logging.Formatter = JsonFormatter()
    else:
        formatter = logging.Formatter(TEXT_FORMAT, datefmt=DATE_FORMAT)

    # stderr so that printed results on stdout stay machine readable
    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setFormatter(formatter)
    root_logger.addHandler(console_handler)

    if file_path:
        file_handler = logging.FileHandler(file_path)
        file_handler.setFormatter(formatter)
        root_logger.addHandler(file_handler)

    _configured = True
