"""
Root logger setup for the forecaster CLI.

Every command calls ``configure_logging(config.logging)`` before it touches
the engine. Engine modules only ever do ``logging.getLogger(__name__)``.

Console output goes to stderr so ``--json`` output on stdout stays
machine-readable. With ``json_format = true`` each record becomes one line::

    {"ts": "2026-07-20T09:15:00Z", "level": "INFO", "logger": "...", "msg": "..."}
"""

from __future__ import annotations

import json
import logging
import sys
import time
from pathlib import Path
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from commitment_forecaster.config import LoggingConfig

TEXT_FORMAT = "%(asctime)s %(levelname)-7s %(name)s | %(message)s"
UTC_TIMESTAMP = "%Y-%m-%dT%H:%M:%SZ"

# Transport chatter from the narrative client.
_QUIET_LOGGERS = ("httpx", "httpcore")


class JsonFormatter(logging.Formatter):
    """One JSON object per record; ``exc`` is added when a traceback is attached."""

    converter = time.gmtime

    def format(self, record: logging.LogRecord) -> str:
        entry = {
            "ts": self.formatTime(record, UTC_TIMESTAMP),
            "level": record.levelname,
            "logger": record.name,
            "msg": record.getMessage(),
        }
        if record.exc_info:
            entry["exc"] = self.formatException(record.exc_info)
        return json.dumps(entry)


def _formatter_for(config: "LoggingConfig") -> logging.Formatter:
    if config.json_format:
        return JsonFormatter()
    text = logging.Formatter(TEXT_FORMAT, datefmt=UTC_TIMESTAMP)
    text.converter = time.gmtime
    return text


def _open_log_file(log_file: str) -> logging.Handler:
    path = Path(log_file)
    path.parent.mkdir(parents=True, exist_ok=True)
    return logging.FileHandler(path, encoding="utf-8")


def configure_logging(config: "LoggingConfig") -> None:
    """Point the root logger at stderr, plus ``config.log_file`` when set.

    Replaces any handlers installed by an earlier call.
    """
    formatter = _formatter_for(config)
    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stderr)]
    if config.log_file:
        handlers.append(_open_log_file(config.log_file))
    for handler in handlers:
        handler.setFormatter(formatter)

    logging.basicConfig(level=config.level, handlers=handlers, force=True)

    for name in _QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
