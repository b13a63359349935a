"""
Structured logging utilities for shardsearch.

Centralizes logging configuration so the CLI, the launcher and every
participant process log the same way. Each record carries the rank of the
participant that emitted it; a JSON formatter is available for log
collection across the process group.

Usage:
    from shardsearch.utils.logging import configure_logging, get_logger

    configure_logging(level="INFO", participant=0)
    log = get_logger(__name__)
    log.info("shard sent", extra={"worker": 1, "records": 1000})
"""

from __future__ import annotations

import json
import logging
import logging.config
from typing import Any, Dict, Optional

# Attributes present on every LogRecord; anything else came in through `extra=`.
_STANDARD_ATTRS = frozenset(
    vars(logging.LogRecord("", logging.INFO, "", 0, "", (), None)).keys()
) | {"message", "asctime", "participant"}


def _json_formatter(record: logging.LogRecord) -> str:
    """Render a log record as JSON string."""
    payload: Dict[str, Any] = {
        "level": record.levelname,
        "logger": record.name,
        "participant": getattr(record, "participant", None),
        "message": record.getMessage(),
    }
    for key, value in vars(record).items():
        if key not in _STANDARD_ATTRS and key != "extra":
            payload[key] = value
    # Nested dict form: log.info("...", extra={"extra": {...}})
    if isinstance(getattr(record, "extra", None), dict):
        payload.update(record.extra)
    if record.exc_info:
        payload["exc_info"] = logging.Formatter().formatException(record.exc_info)
    if record.stack_info:
        payload["stack_info"] = record.stack_info
    return json.dumps(payload, default=str)


class JsonFormatter(logging.Formatter):
    """Minimal JSON formatter for structured logs."""

    def format(self, record: logging.LogRecord) -> str:  # type: ignore[override]
        return _json_formatter(record)


class ParticipantFilter(logging.Filter):
    """Stamp every record with the participant rank of this process."""

    def __init__(self, participant: Optional[int] = None) -> None:
        super().__init__()
        self.participant = participant

    def filter(self, record: logging.LogRecord) -> bool:
        if not hasattr(record, "participant"):
            record.participant = "-" if self.participant is None else self.participant
        return True


def configure_logging(
    level: str = "INFO",
    json_logs: bool = False,
    participant: Optional[int] = None,
) -> None:
    """
    Configure root logging for one participant process.

    Parameters
    ----------
    level : str
        Logging level name (e.g., "DEBUG", "INFO", "WARNING").
    json_logs : bool
        Whether to emit logs as JSON. If False, uses a concise human formatter.
    participant : int | None
        Rank stamped on every record; None outside a participant process.
    """
    formatter_name = "json" if json_logs else "console"

    logging.config.dictConfig(
        {
            "version": 1,
            "disable_existing_loggers": False,
            "filters": {
                "participant": {
                    "()": ParticipantFilter,
                    "participant": participant,
                },
            },
            "formatters": {
                "console": {
                    "format": "%(asctime)s | %(levelname)s | p%(participant)s | %(name)s | %(message)s",
                    "datefmt": "%Y-%m-%d %H:%M:%S",
                },
                "json": {
                    "()": JsonFormatter,
                },
            },
            "handlers": {
                "default": {
                    "class": "logging.StreamHandler",
                    "stream": "ext://sys.stderr",
                    "formatter": formatter_name,
                    "filters": ["participant"],
                    "level": level,
                }
            },
            "root": {
                "handlers": ["default"],
                "level": level,
            },
        }
    )


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """
    Get a logger with the given name. If name is None, returns the root logger.
    """
    return logging.getLogger(name)


__all__ = ["configure_logging", "get_logger", "JsonFormatter", "ParticipantFilter"]
