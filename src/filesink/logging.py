"""Structured logging: internal diagnostics plus the FileSink logging bridge.

Two directions:
    filesink -> logging   sink lifecycle events (created, rotated, reused) go
                          through structlog loggers bound to stdlib loggers
                          under the "filesink" namespace.
    logging -> filesink   FileSinkDestination / add_file_target turn a FileSink
                          into a logging.Handler so any stdlib logger can use
                          it as a target.

Loggers are wrapped per call to get_logger() instead of through a global
structlog.configure(), so importing filesink never changes how the host
application's structlog is set up. setup_logging() only attaches a managed
handler to the "filesink" logger.

Write failures inside the sink are never logged: a sink that is itself a
logging target must not recurse into the logging system.
"""

from __future__ import annotations

import logging
import sys
from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable

import structlog

if TYPE_CHECKING:
    from filesink.config import SinkConfig
    from filesink.sinks.file_sink import FileSink

ROOT_LOGGER_NAME = "filesink"

_SHARED_PROCESSORS: list = [
    structlog.stdlib.filter_by_level,
    structlog.stdlib.add_logger_name,
    structlog.processors.add_log_level,
    structlog.processors.TimeStamper(fmt="iso"),
    structlog.processors.StackInfoRenderer(),
    structlog.processors.format_exc_info,
]


# ---------------------------------------------------------------------------
# Protocols
# ---------------------------------------------------------------------------


@runtime_checkable
class LogDestination(Protocol):
    """Strategy: where formatted log output is shipped.

    create_handler() returns a logging.Handler, the bridge between
    Python's logging system and the destination.
    """

    def create_handler(self, formatter: logging.Formatter) -> logging.Handler: ...

    def shutdown(self) -> None: ...


# ---------------------------------------------------------------------------
# Formatters
# ---------------------------------------------------------------------------


def build_formatter(log_format: str = "console") -> logging.Formatter:
    """structlog ProcessorFormatter rendering as console text or JSON."""
    if log_format == "json":
        renderer: Any = structlog.processors.JSONRenderer()
    elif log_format == "console":
        renderer = structlog.dev.ConsoleRenderer(colors=False)
    else:
        raise ValueError(
            f"Unknown log format: {log_format!r}. Available: ['console', 'json']."
        )
    return structlog.stdlib.ProcessorFormatter(
        processors=[
            structlog.stdlib.ProcessorFormatter.remove_processors_meta,
            renderer,
        ],
        foreign_pre_chain=[
            structlog.stdlib.add_logger_name,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
        ],
    )


def _plain_formatter() -> logging.Formatter:
    return logging.Formatter(
        "%(asctime)s %(levelname)-8s %(name)s: %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%S",
    )


# ---------------------------------------------------------------------------
# Destinations
# ---------------------------------------------------------------------------


class StderrDestination:
    """Write to stderr. Default for internal diagnostics."""

    def create_handler(self, formatter: logging.Formatter) -> logging.Handler:
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(formatter)
        return handler

    def shutdown(self) -> None:
        pass


class FileSinkHandler(logging.Handler):
    """Handler that hands each formatted record to a FileSink."""

    def __init__(self, sink: FileSink, fmt: logging.Formatter | None = None) -> None:
        super().__init__()
        self.setFormatter(fmt or _plain_formatter())
        self._sink = sink

    @property
    def sink(self) -> FileSink:
        return self._sink

    def emit(self, record: logging.LogRecord) -> None:
        try:
            msg = self.format(record)
        except Exception:
            self.handleError(record)
            return
        # Serialized by Handler.handle() holding self.lock, and by the sink's own lock.
        self._sink.write(msg)

    def close(self) -> None:
        try:
            self._sink.close()
        finally:
            super().close()


class FileSinkDestination:
    """Ship formatted log records into a FileSink."""

    def __init__(self, sink: FileSink) -> None:
        self._sink = sink

    def create_handler(self, formatter: logging.Formatter) -> logging.Handler:
        return FileSinkHandler(self._sink, formatter)

    def shutdown(self) -> None:
        self._sink.close()


def add_file_target(
    sink: FileSink,
    logger: logging.Logger | str | None = None,
    formatter: logging.Formatter | None = None,
) -> logging.Handler:
    """Register ``sink`` as a target of a stdlib logger (root by default).

    Returns the attached handler so the caller can remove it later.
    """
    if not isinstance(logger, logging.Logger):
        logger = logging.getLogger(logger)
    handler = FileSinkHandler(sink, formatter)
    logger.addHandler(handler)
    return handler


# ---------------------------------------------------------------------------
# Module state
# ---------------------------------------------------------------------------

_active_destination: LogDestination | None = None


def setup_logging(
    config: SinkConfig,
    destination: LogDestination | None = None,
) -> logging.Handler:
    """Route filesink's own diagnostics to ``destination`` (stderr by default).

    Only replaces a handler previously installed here; handlers added by
    the host (pytest caplog, monitoring agents) are preserved.
    """
    global _active_destination

    formatter = build_formatter(config.log_format)
    dest = destination or StderrDestination()
    handler = dest.create_handler(formatter)
    handler._filesink_managed = True  # type: ignore[attr-defined]

    pkg_logger = logging.getLogger(ROOT_LOGGER_NAME)
    for old in [h for h in pkg_logger.handlers if getattr(h, "_filesink_managed", False)]:
        pkg_logger.removeHandler(old)
    pkg_logger.addHandler(handler)
    pkg_logger.setLevel(getattr(logging, config.log_level.upper(), logging.WARNING))

    if _active_destination is not None and _active_destination is not dest:
        _active_destination.shutdown()
    _active_destination = dest
    return handler


def get_logger(name: str = ROOT_LOGGER_NAME, **kwargs: Any) -> Any:
    """Structlog BoundLogger wrapping the stdlib logger ``name``.

    Accepts logger.info("event", key=value) kwargs. Rendering happens in
    whatever handler receives the record; build_formatter() gives the
    structlog rendering, plain handlers see the event dict.
    """
    bound = structlog.wrap_logger(
        logging.getLogger(name),
        processors=[
            *_SHARED_PROCESSORS,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
    )
    return bound.bind(**kwargs) if kwargs else bound


def shutdown_logging() -> None:
    """Detach the managed handler and shut down its destination."""
    global _active_destination

    pkg_logger = logging.getLogger(ROOT_LOGGER_NAME)
    for old in [h for h in pkg_logger.handlers if getattr(h, "_filesink_managed", False)]:
        pkg_logger.removeHandler(old)
        old.close()
    if _active_destination is not None:
        _active_destination.shutdown()
        _active_destination = None
