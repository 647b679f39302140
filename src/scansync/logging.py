"""
Logging setup for scansync.

All loggers live under the ``scansync`` namespace. Output goes either to a
rich console handler or, for unattended stations, to JSON lines on stderr.
"""

from __future__ import annotations

import json
import logging
import sys
from datetime import datetime, timezone

from rich.console import Console
from rich.logging import RichHandler

ROOT_LOGGER = "scansync"


class JsonFormatter(logging.Formatter):
    """One JSON object per record."""

    def format(self, record: logging.LogRecord) -> str:
        payload = {
            "ts": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "msg": record.getMessage(),
        }
        if record.exc_info:
            payload["exc"] = self.formatException(record.exc_info)
        return json.dumps(payload)


def get_logger(name: str) -> logging.Logger:
    """Get a logger inside the scansync namespace."""
    if name != ROOT_LOGGER and not name.startswith(ROOT_LOGGER + "."):
        name = f"{ROOT_LOGGER}.{name}"
    return logging.getLogger(name)


def setup_logging(level: str | None = None, json_output: bool | None = None) -> logging.Logger:
    """
    Configure the scansync root logger.

    Args:
        level: Log level name; defaults to settings.log_level.
        json_output: Emit JSON lines; defaults to settings.log_json.

    Returns:
        The configured root logger.
    """
    from scansync.config import get_settings

    settings = get_settings()
    level = level or settings.log_level
    if json_output is None:
        json_output = settings.log_json

    root = logging.getLogger(ROOT_LOGGER)
    for handler in list(root.handlers):
        root.removeHandler(handler)

    if json_output:
        handler: logging.Handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(JsonFormatter())
    else:
        handler = RichHandler(
            console=Console(stderr=True),
            show_path=False,
            rich_tracebacks=True,
        )
        handler.setFormatter(logging.Formatter("%(message)s"))

    root.addHandler(handler)
    root.setLevel(level)
    root.propagate = False
    return root


__all__ = ["JsonFormatter", "get_logger", "setup_logging"]
