import json
import logging
from logging.config import dictConfig

# Context the storage layer attaches to exchange and error records.
CONTEXT_FIELDS = ("operation", "bucket", "key", "status", "expected")


def setup_logging(level: str = "INFO") -> None:
    dictConfig(
        {
            "version": 1,
            "disable_existing_loggers": False,
            "formatters": {
                "json": {
                    "()": JsonFormatter,
                },
                "plain": {
                    "format": "%(message)s",
                },
            },
            "handlers": {
                "console": {
                    "class": "logging.StreamHandler",
                    "formatter": "json",
                },
                "cli_console": {
                    "class": "logging.StreamHandler",
                    "formatter": "plain",
                },
            },
            "root": {
                "level": level,
                "handlers": ["console"],
            },
            "loggers": {
                "objstore.cli": {
                    "handlers": ["cli_console"],
                    "level": "INFO",
                    "propagate": False,
                },
                # Connection pool chatter would drown the per-exchange records.
                "urllib3": {
                    "level": "WARNING",
                },
            },
        }
    )


class JsonFormatter(logging.Formatter):
    """One JSON object per record, with storage context lifted to the top level.

    Context arrives either as an ``extra`` dict (``extra={"extra": {...}}``) or
    as plain record attributes (``extra={"operation": ...}``).
    """

    def format(self, record: logging.LogRecord) -> str:
        payload = {
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        for name in CONTEXT_FIELDS:
            if hasattr(record, name):
                payload[name] = getattr(record, name)
        if hasattr(record, "extra") and isinstance(record.extra, dict):
            payload.update(record.extra)
        if record.exc_info:
            payload["exception"] = self.formatException(record.exc_info)
        return json.dumps(payload, ensure_ascii=False, default=str)
