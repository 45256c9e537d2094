"""
JSON logging for the continuity engine.

Every record under the ``canonkeeper`` logger namespace is written as one
JSON object per line to the configured log file; warnings and above are
echoed to stderr.

Engine code logs through :class:`SeriesAdapter` so each decision carries the
series it belongs to::

    log = SeriesAdapter(get_logger("canonkeeper.engine"), series_id)
    log.info("write accepted", extra={"event_type": "write_accepted", "entity_id": book_id})
"""
from __future__ import annotations

import json
import logging
import sys
from datetime import datetime, timezone
from typing import Any, MutableMapping

from canonkeeper.config import get_settings

ROOT_LOGGER = "canonkeeper"


class JSONFormatter(logging.Formatter):
    """One JSON object per record, with the engine's structured extras lifted to the top level."""

    EXTRA_FIELDS = (
        "series_id",
        "event_type",
        "entity_type",
        "entity_id",
        "operation",
        "attempt",
        "duration_ms",
        "metadata",
    )

    def format(self, record: logging.LogRecord) -> str:
        entry: dict[str, Any] = {
            "ts": datetime.fromtimestamp(record.created, timezone.utc).isoformat(timespec="milliseconds"),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        entry.update(
            (key, getattr(record, key)) for key in self.EXTRA_FIELDS if getattr(record, key, None) is not None
        )
        if record.exc_info and record.exc_info[0] is not None:
            entry["exception"] = self.formatException(record.exc_info)
        return json.dumps(entry, default=str)


class SeriesAdapter(logging.LoggerAdapter):
    """Adds ``series_id`` to every record, keeping any extras the caller passes."""

    def __init__(self, logger: logging.Logger, series_id: str):
        super().__init__(logger, {"series_id": series_id})

    def process(self, msg: str, kwargs: MutableMapping[str, Any]) -> tuple[str, MutableMapping[str, Any]]:
        kwargs["extra"] = {**kwargs.get("extra", {}), **self.extra}
        return msg, kwargs


def setup_logging(log_file: str | None = None, level: int | str | None = None) -> None:
    """Attach the JSON handlers to the ``canonkeeper`` logger.

    Arguments override ``log_file`` / ``log_level`` from settings. Only the
    first call installs handlers.
    """
    root = logging.getLogger(ROOT_LOGGER)
    if root.handlers:
        return

    settings = get_settings()
    root.setLevel(level or settings.log_level.upper())
    root.propagate = False
    formatter = JSONFormatter()

    file_handler = logging.FileHandler(log_file or settings.log_file, encoding="utf-8")
    file_handler.setFormatter(formatter)
    root.addHandler(file_handler)

    console = logging.StreamHandler(sys.stderr)
    console.setFormatter(formatter)
    console.setLevel(logging.WARNING)
    root.addHandler(console)


def get_logger(name: str = ROOT_LOGGER) -> logging.Logger:
    """Logger under the ``canonkeeper`` namespace, configuring handlers on first use."""
    setup_logging()
    if name == ROOT_LOGGER or name.startswith(ROOT_LOGGER + "."):
        return logging.getLogger(name)
    return logging.getLogger(f"{ROOT_LOGGER}.{name}")
