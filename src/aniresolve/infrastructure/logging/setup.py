"""structlog + stdlib logging for the service and uvicorn.

Records from both worlds (structlog events and plain ``logging`` records
from uvicorn/httpx) are rendered by one ``ProcessorFormatter``. Emission
happens on a ``QueueListener`` thread so request handlers never block on
terminal or pipe writes.
"""

from __future__ import annotations

import atexit
import copy
import logging
import logging.config
import queue
import sys
from datetime import datetime, timezone
from logging.handlers import QueueHandler, QueueListener
from typing import Any, Optional

import structlog

from aniresolve.infrastructure.config.schema import AppConfig

log = structlog.get_logger(__name__)

# Loggers that get an explicit level. httpx logs every request at INFO,
# so it stays at WARNING unless the service runs at DEBUG.
_MANAGED_LOGGERS: dict[str, dict[str, Any]] = {
    "uvicorn": {"handlers": ["default"], "propagate": False},
    "uvicorn.error": {},
    "uvicorn.access": {"handlers": ["access"], "propagate": False},
    "httpx": {"pinned": "WARNING"},
    "aniresolve": {},
}

_listener: Optional[QueueListener] = None


def _strip_uvicorn_color(_: Any, __: Any, event_dict: dict[str, Any]) -> dict[str, Any]:
    event_dict.pop("color_message", None)
    return event_dict


def _stamp_record_time(_: Any, __: Any, event_dict: dict[str, Any]) -> dict[str, Any]:
    """Timestamp stdlib records with their creation time, not render time."""
    record = event_dict.get("_record")
    if isinstance(record, logging.LogRecord):
        created = datetime.fromtimestamp(record.created, tz=timezone.utc)
        event_dict["timestamp"] = created.isoformat().replace("+00:00", "Z")
    return event_dict


def _renderer(config: AppConfig) -> structlog.typing.Processor:
    if config.log_format == "json":
        return structlog.processors.JSONRenderer()
    return structlog.dev.ConsoleRenderer()


def _formatter_kwargs(config: AppConfig) -> dict[str, Any]:
    return {
        "foreign_pre_chain": [
            _strip_uvicorn_color,
            structlog.contextvars.merge_contextvars,
            _stamp_record_time,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
        ],
        "processors": [
            structlog.stdlib.ProcessorFormatter.remove_processors_meta,
            _renderer(config),
        ],
    }


def build_logging_config(config: AppConfig) -> dict[str, Any]:
    """dictConfig handed to ``uvicorn.run(log_config=...)``.

    Both uvicorn handlers render through the structlog formatter; every
    managed logger gets ``config.log_level`` except pinned ones.
    """
    level = config.log_level
    loggers: dict[str, dict[str, Any]] = {}
    for name, spec in _MANAGED_LOGGERS.items():
        entry = {k: v for k, v in spec.items() if k != "pinned"}
        pinned = spec.get("pinned")
        entry["level"] = pinned if pinned and level != "DEBUG" else level
        loggers[name] = entry

    return {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "structlog": {
                "()": structlog.stdlib.ProcessorFormatter,
                **_formatter_kwargs(config),
            },
        },
        "handlers": {
            "default": {
                "class": "logging.StreamHandler",
                "formatter": "structlog",
                "stream": "ext://sys.stderr",
            },
            "access": {
                "class": "logging.StreamHandler",
                "formatter": "structlog",
                "stream": "ext://sys.stdout",
            },
        },
        "loggers": loggers,
        "root": {"handlers": ["default"], "level": level},
    }


class _KeepDictQueueHandler(QueueHandler):
    """QueueHandler that does not pre-format records.

    The stock ``prepare()`` stringifies ``record.msg``, which would lose
    structlog's event dict before the listener renders it.
    """

    def prepare(self, record: logging.LogRecord) -> logging.LogRecord:
        return copy.copy(record)


def _stop_listener() -> None:
    global _listener
    if _listener is None:
        return
    try:
        _listener.stop()
    finally:
        _listener = None


def _route_through_queue(config: AppConfig) -> None:
    """Replace all handlers with one queue; INFO and below go to stdout."""
    global _listener
    _stop_listener()

    formatter = structlog.stdlib.ProcessorFormatter(**_formatter_kwargs(config))

    out = logging.StreamHandler(stream=sys.stdout)
    out.setFormatter(formatter)
    out.addFilter(lambda record: record.levelno < logging.ERROR)

    err = logging.StreamHandler(stream=sys.stderr)
    err.setFormatter(formatter)
    err.setLevel(logging.ERROR)

    records: queue.Queue[logging.LogRecord] = queue.Queue()
    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(_KeepDictQueueHandler(records))
    root.setLevel(config.log_level)

    # Everything propagates to root; no logger writes on its own.
    for name in list(logging.root.manager.loggerDict):
        existing = logging.getLogger(name)
        existing.handlers.clear()
        existing.propagate = True

    _listener = QueueListener(records, out, err, respect_handler_level=True)
    _listener.start()
    atexit.register(_stop_listener)


def configure_logging(config: AppConfig) -> dict[str, Any]:
    """Configure structlog and stdlib logging for the process.

    Returns the dictConfig for uvicorn. After it is applied, emission is
    moved onto the queue listener.
    """
    structlog.configure(
        processors=[
            _strip_uvicorn_color,
            structlog.contextvars.merge_contextvars,
            structlog.processors.TimeStamper(fmt="iso", utc=True),
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.processors.format_exc_info,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    dict_config = build_logging_config(config)
    logging.config.dictConfig(dict_config)
    _route_through_queue(config)

    log.info("logging_configured", log_format=config.log_format, log_level=config.log_level)
    return dict_config
