from __future__ import annotations

import json
import logging

from .config import get_settings


class JsonFormatter(logging.Formatter):
    """Very small JSON formatter for structured logs."""

    def format(self, record: logging.LogRecord) -> str:  # noqa: D401 - short
        payload = {
            "level": record.levelname.lower(),
            "logger": record.name,
            "message": record.getMessage(),
            "event_type": getattr(record, "event_type", record.getMessage()),
            "event": getattr(record, "event", None),
            "index": getattr(record, "index", None),
            "policy": getattr(record, "policy", None),
            "error_category": getattr(record, "error_category", None),
            "duration_ms": getattr(record, "duration_ms", None),
        }
        if record.exc_info:
            payload["exc_info"] = self.formatException(record.exc_info)
        return json.dumps(payload, default=str)


def configure_logging(level: str | int | None = None, fmt: str | None = None) -> None:
    """Configure logging.

    Level and format default to ``EVENT_BUS_LOG_LEVEL`` and
    ``EVENT_BUS_LOG_FORMAT``. With ``json`` the output is one JSON object per
    line carrying the dispatcher's structured fields.
    """

    if level is None or fmt is None:
        settings = get_settings()
        if level is None:
            level = settings.log_level.upper()
        if fmt is None:
            fmt = settings.log_format
    if isinstance(level, str):
        level = level.upper()

    if fmt.lower() == "json":
        handler = logging.StreamHandler()
        handler.setFormatter(JsonFormatter())
        logging.basicConfig(level=level, handlers=[handler], force=True)
    else:
        logging.basicConfig(
            level=level,
            format="%(asctime)s %(levelname)s %(name)s %(message)s",
            datefmt="%H:%M:%S",
            force=True,
        )
