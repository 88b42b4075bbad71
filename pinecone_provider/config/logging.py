"""Structured logging setup. Read-only config; no business logic."""

import logging
import sys

from pinecone_provider.config.settings import Settings, get_settings

LOG_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"
LOG_DATE_FORMAT = "%Y-%m-%dT%H:%M:%S"

# Attributes every LogRecord has; anything else on a record came from extra={...}
_RECORD_ATTRS = frozenset(vars(logging.makeLogRecord({}))) | {"message", "asctime", "taskName"}

# Third-party loggers that would otherwise log one line per describe poll
_NOISY_LOGGERS = ("httpx", "httpcore")


class ExtraFieldsFormatter(logging.Formatter):
    """Appends the extra={...} fields of a record as sorted key=value pairs."""

    def format(self, record: logging.LogRecord) -> str:
        line = super().format(record)
        fields = {k: v for k, v in vars(record).items() if k not in _RECORD_ATTRS and not k.startswith("_")}
        if not fields:
            return line
        rendered = " ".join(f"{key}={fields[key]!r}" for key in sorted(fields))
        return f"{line} | {rendered}"


def configure_logging(settings: Settings | None = None) -> None:
    """Route all loggers to stdout at settings.log_level. Safe to call again; replaces handlers."""
    settings = settings or get_settings()
    level = logging.getLevelName(settings.log_level.upper())
    if not isinstance(level, int):
        level = logging.INFO

    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(level)
    handler.setFormatter(ExtraFieldsFormatter(fmt=LOG_FORMAT, datefmt=LOG_DATE_FORMAT))

    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(handler)
    root.setLevel(level)

    for name in _NOISY_LOGGERS:
        logging.getLogger(name).setLevel(max(level, logging.WARNING))


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)
