"""
Logging helpers for the sync response store.

The store logs through standard library loggers named under
``sync_response_store``. Records emitted while a store is open carry the
account's ``user_id``. Applications that want one JSON object per line can
attach :class:`StructuredJsonFormatter` to any handler:

    >>> handler = logging.StreamHandler()
    >>> handler.setFormatter(StructuredJsonFormatter())
    >>> logging.getLogger("sync_response_store").addHandler(handler)
"""

import json
import logging
from datetime import datetime, timezone
from typing import Any

LOGGER_NAMESPACE = "sync_response_store"

# Attributes every LogRecord has; anything else came in through ``extra``
_RECORD_ATTRS = frozenset(vars(logging.LogRecord("", 0, "", 0, "", None, None))) | {
    "message",
    "asctime",
}


def _jsonable(value: Any) -> Any:
    try:
        json.dumps(value)
    except (TypeError, ValueError):
        return str(value)
    return value


class StructuredJsonFormatter(logging.Formatter):
    """Render each record as a single JSON object.

    Keys: ``timestamp`` (UTC, from the record's creation time), ``level``,
    ``logger``, ``message``, ``exception`` when present, and every field
    passed through ``extra`` such as ``user_id``. Values that cannot be
    encoded as JSON are written as their ``str()``.
    """

    def format(self, record: logging.LogRecord) -> str:
        created = datetime.fromtimestamp(record.created, tz=timezone.utc)
        payload: dict[str, Any] = {
            "timestamp": created.isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        if record.exc_info:
            payload["exception"] = self.formatException(record.exc_info)

        payload.update(
            (key, _jsonable(value))
            for key, value in vars(record).items()
            if key not in _RECORD_ATTRS and not key.startswith("_")
        )
        return json.dumps(payload)


def get_store_logger(name: str) -> logging.Logger:
    """Logger for a store component, e.g. ``store`` -> ``sync_response_store.store``."""
    return logging.getLogger(f"{LOGGER_NAMESPACE}.{name}")


class StoreLoggerAdapter(logging.LoggerAdapter):
    """Adds the bound account context to every record.

    Fields given at the call site through ``extra`` take precedence over
    the adapter's own.
    """

    def process(self, msg: str, kwargs: dict[str, Any]) -> tuple[str, dict[str, Any]]:
        kwargs["extra"] = {**self.extra, **kwargs.get("extra", {})}
        return msg, kwargs
