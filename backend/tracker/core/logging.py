"""
Logging setup for the tracker service.

Log calls pass context through `extra`; the formatter appends those fields
to the line as key=value pairs.
"""

import logging
import sys

from tracker.core.config import settings

# Attributes every LogRecord has; anything else came in through `extra`
_RECORD_ATTRIBUTES = frozenset(vars(logging.makeLogRecord({}))) | {"message", "asctime"}


class ContextFormatter(logging.Formatter):
    """Standard line format followed by the record's extra fields."""

    def format(self, record: logging.LogRecord) -> str:
        line = super().format(record)
        context = {
            key: value for key, value in vars(record).items()
            if key not in _RECORD_ATTRIBUTES and not key.startswith("_")
        }
        if context:
            line += " | " + " ".join(f"{key}={value}" for key, value in sorted(context.items()))
        return line


def setup_logging() -> None:
    """
    Configure the root logger to write to stdout at the configured level.
    """
    level = getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO)
    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(ContextFormatter("%(asctime)s - %(name)s - %(levelname)s - %(message)s"))
    logging.basicConfig(level=level, handlers=[handler], force=True)

    logging.getLogger("uvicorn").setLevel(logging.INFO)
    logging.getLogger("sqlalchemy.engine").setLevel(
        logging.INFO if settings.DATABASE_ECHO else logging.WARNING
    )
    logging.getLogger("aiohttp").setLevel(logging.WARNING)

    get_logger(__name__).info("Logging configured", extra={"level": logging.getLevelName(level)})


def get_logger(name: str) -> logging.Logger:
    """Get a logger instance for a module."""
    return logging.getLogger(name)
