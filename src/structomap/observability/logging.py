"""Structured logging for structomap.

Library code logs events with keyword context and nothing else:

    get_logger(__name__).debug("projector.transform", record_type="User", keys=7)

Nothing is configured on import. Until an application calls setup_logging(),
get_logger() hands out an _EventLogger that forwards to the stdlib logger of
the same name with the context rendered as key=value pairs, so the host's
own logging config decides where events go.

setup_logging() installs exactly one handler on the root logger (stderr, or
a JSON-lines file when log_path is set) and renders every record through
either structlog's processor chain or a plain JSON formatter. Host records
go through the same handler. shutdown_logging() detaches and closes it and
restores the root level it found.
"""

from __future__ import annotations

import json
import logging
import sys
import time
from pathlib import Path
from typing import Any, Callable

import structlog

from structomap.observability.config import LoggingConfig

_EVENT_ATTR = "structomap_event"
_CONTEXT_ATTR = "structomap_context"


class _EventLogger:
    """stdlib logger with structlog's event + kwargs call shape."""

    def __init__(self, logger: logging.Logger) -> None:
        self._logger = logger

    @property
    def name(self) -> str:
        return self._logger.name

    def _log(self, level: int, event: str, context: dict[str, Any]) -> None:
        if not self._logger.isEnabledFor(level):
            return
        message = " ".join([event, *(f"{k}={v!r}" for k, v in context.items())])
        self._logger.log(
            level,
            message,
            extra={_EVENT_ATTR: event, _CONTEXT_ATTR: context},
            stacklevel=3,
        )

    def debug(self, event: str, **context: Any) -> None:
        self._log(logging.DEBUG, event, context)

    def info(self, event: str, **context: Any) -> None:
        self._log(logging.INFO, event, context)

    def warning(self, event: str, **context: Any) -> None:
        self._log(logging.WARNING, event, context)

    def error(self, event: str, **context: Any) -> None:
        self._log(logging.ERROR, event, context)


class _JsonLineFormatter(logging.Formatter):
    """One JSON object per record, timestamps in UTC."""

    converter = time.gmtime

    def format(self, record: logging.LogRecord) -> str:
        entry: dict[str, Any] = dict(getattr(record, _CONTEXT_ATTR, {}))
        entry.update(
            timestamp=f"{self.formatTime(record, '%Y-%m-%dT%H:%M:%S')}.{int(record.msecs):03d}Z",
            level=record.levelname.lower(),
            logger=record.name,
            event=getattr(record, _EVENT_ATTR, record.getMessage()),
        )
        if record.exc_info and record.exc_info[1]:
            entry["exception"] = self.formatException(record.exc_info)
        return json.dumps(entry, default=str)


def _stdlib_formatter(config: LoggingConfig) -> logging.Formatter:
    if config.log_format == "console":
        return logging.Formatter(
            "%(asctime)s %(levelname)-8s %(name)s: %(message)s",
            datefmt="%Y-%m-%dT%H:%M:%S",
        )
    return _JsonLineFormatter()


def _lift_event_context(logger: Any, method_name: str, event_dict: dict) -> dict:
    """Give records from an _EventLogger their event name and context back."""
    record = event_dict.get("_record")
    if record is not None and hasattr(record, _EVENT_ATTR):
        event_dict["event"] = getattr(record, _EVENT_ATTR)
        event_dict.update(getattr(record, _CONTEXT_ATTR))
    return event_dict


def _structlog_formatter(config: LoggingConfig) -> logging.Formatter:
    shared: list = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        structlog.processors.format_exc_info,
    ]
    if config.log_format == "console":
        renderer: structlog.types.Processor = structlog.dev.ConsoleRenderer()
    else:
        renderer = structlog.processors.JSONRenderer()

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            *shared,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )
    return structlog.stdlib.ProcessorFormatter(
        foreign_pre_chain=[_lift_event_context, *shared],
        processors=[structlog.stdlib.ProcessorFormatter.remove_processors_meta, renderer],
    )


_FORMATTERS: dict[str, Callable[[LoggingConfig], logging.Formatter]] = {
    "structlog": _structlog_formatter,
    "stdlib": _stdlib_formatter,
}

_handler: logging.Handler | None = None
_previous_root_level: int | None = None
_structlog_active = False


def _create_handler(config: LoggingConfig) -> logging.Handler:
    if config.log_path is None:
        return logging.StreamHandler(sys.stderr)
    path = Path(config.log_path)
    path.parent.mkdir(parents=True, exist_ok=True)
    return logging.FileHandler(path, mode="a", encoding="utf-8")


def setup_logging(config: LoggingConfig | None = None) -> None:
    """Route all logging through one structomap-owned root handler.

    Calling it again replaces the handler installed by the previous call.
    Handlers owned by the host application are left alone.

    Raises:
        ValueError: unknown formatter or level name.
    """
    global _handler, _previous_root_level, _structlog_active

    config = config if config is not None else LoggingConfig()
    make_formatter = _FORMATTERS.get(config.log_formatter)
    if make_formatter is None:
        raise ValueError(
            f"Unknown log formatter: {config.log_formatter!r}. Available: {list(_FORMATTERS)}"
        )
    level = logging.getLevelNamesMapping().get(config.log_level.upper())
    if level is None:
        raise ValueError(f"Unknown log level: {config.log_level!r}")

    shutdown_logging()

    handler = _create_handler(config)
    handler.setFormatter(make_formatter(config))
    root = logging.getLogger()
    _previous_root_level = root.level
    root.addHandler(handler)
    root.setLevel(level)

    _handler = handler
    _structlog_active = config.log_formatter == "structlog"


def shutdown_logging() -> None:
    """Detach and close the handler installed by setup_logging(), if any."""
    global _handler, _previous_root_level, _structlog_active

    if _handler is not None:
        root = logging.getLogger()
        root.removeHandler(_handler)
        _handler.close()
        if _previous_root_level is not None:
            root.setLevel(_previous_root_level)
    if _structlog_active:
        structlog.reset_defaults()

    _handler = None
    _previous_root_level = None
    _structlog_active = False


def get_logger(name: str = "") -> Any:
    """structlog logger once setup_logging() chose structlog, else an _EventLogger."""
    if _structlog_active:
        return structlog.get_logger(name)
    return _EventLogger(logging.getLogger(name))
