"""TrendScope — Structured JSON Logging.

One JSON object per line on stdout. Pass context through ``extra``:
``platform`` for collectors, ``job`` for scheduled runs, ``stage`` for the
orchestrators.
"""

import logging
import json
import sys
from datetime import datetime, timezone
from trendscope.config import settings

EXTRA_FIELDS = ("platform", "job", "stage", "entity_id", "duration_ms")

# Libraries that log every request or job execution at INFO
NOISY_LOGGERS = ("httpx", "httpcore", "apscheduler.executors.default", "apscheduler.scheduler")


class JSONFormatter(logging.Formatter):
    """Render a record as a single JSON line."""

    def format(self, record: logging.LogRecord) -> str:
        entry = {
            "timestamp": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        for key in EXTRA_FIELDS:
            value = getattr(record, key, None)
            if value is not None:
                entry[key] = value
        if record.exc_info and record.exc_info[0] is not None:
            entry["exception"] = self.formatException(record.exc_info)
        return json.dumps(entry, default=str, ensure_ascii=False)


def configure_logging() -> None:
    """Quiet third-party loggers down to warnings."""
    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


def get_logger(name: str) -> logging.Logger:
    """Return ``trendscope.<name>`` with the JSON handler attached once."""
    logger = logging.getLogger(f"trendscope.{name}")
    if not logger.handlers:
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(JSONFormatter())
        logger.addHandler(handler)
        logger.propagate = False
    logger.setLevel(getattr(logging, settings.log_level.upper(), logging.INFO))
    return logger
