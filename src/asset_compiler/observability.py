"""Structured logging and OpenTelemetry spans for asset-compiler.

Every log event emitted while a span is open carries the span's
attributes as structlog context variables, so the ``asset_rendered`` and
``filter_process_started`` events of a compile can be traced back to
its target. configure_logging() installs a pipeline that merges that
context; applications with their own structlog setup should add
``structlog.contextvars.merge_contextvars`` to get the same effect.
"""

from __future__ import annotations

import logging
import sys
from collections.abc import Iterator
from contextlib import contextmanager
from typing import TYPE_CHECKING, Any, TextIO

import structlog
from opentelemetry import trace
from opentelemetry.trace import SpanKind, Status, StatusCode
from structlog.contextvars import bound_contextvars, merge_contextvars

if TYPE_CHECKING:
    from opentelemetry.trace import Span, Tracer
    from structlog.stdlib import BoundLogger

_logger: BoundLogger | None = None
_tracer: Tracer | None = None

TRACER_NAME = "asset_compiler"


def get_logger() -> BoundLogger:
    """Return the cached package logger.

    Example:
        >>> get_logger().info("asset_added", source="css/main.scss")
    """
    global _logger
    if _logger is None:
        _logger = structlog.get_logger(TRACER_NAME)
    assert _logger is not None
    return _logger


def get_tracer() -> Tracer:
    global _tracer
    if _tracer is None:
        _tracer = trace.get_tracer(TRACER_NAME)
    return _tracer


def configure_logging(
    *,
    log_level: str = "INFO",
    json_format: bool = False,
    stream: TextIO | None = None,
) -> None:
    """Route asset-compiler log events to ``stream``.

    Events below ``log_level`` are dropped before any processor runs, so
    the per-asset debug events cost nothing at the default level.

    Args:
        log_level: Minimum level name (DEBUG, INFO, WARNING, ERROR).
        json_format: Render one JSON object per line instead of the
            console format.
        stream: Destination, stderr by default. Build output on stdout
            stays clean.

    Raises:
        ValueError: If ``log_level`` is not a level name.

    Example:
        >>> configure_logging(log_level="DEBUG", json_format=True)
    """
    level = logging.getLevelName(log_level.upper())
    if not isinstance(level, int):
        raise ValueError(f"Unknown log level: {log_level}")

    renderer: Any = (
        structlog.processors.JSONRenderer()
        if json_format
        else structlog.dev.ConsoleRenderer(colors=False)
    )
    structlog.configure(
        processors=[
            merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.format_exc_info,
            renderer,
        ],
        wrapper_class=structlog.make_filtering_bound_logger(level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(file=stream or sys.stderr),
        cache_logger_on_first_use=False,
    )


@contextmanager
def span(
    name: str,
    *,
    attributes: dict[str, Any] | None = None,
) -> Iterator[Span]:
    """Create an OpenTelemetry span with structured logging.

    Logs ``<name>_started`` at debug level, ``<name>_completed`` on success
    and ``<name>_failed`` on error. Exceptions are re-raised. While the
    block runs, ``attributes`` are bound as structlog context variables.

    Args:
        name: Span name (e.g., "compile").
        attributes: Optional span attributes, also added to log events.

    Yields:
        OpenTelemetry Span instance.

    Example:
        >>> with span("compile", attributes={"target": "build/app.css"}):
        ...     run_pipeline()
    """
    tracer = get_tracer()
    logger = get_logger()
    attrs = attributes or {}

    with tracer.start_as_current_span(
        name, kind=SpanKind.INTERNAL, attributes=attrs
    ) as s, bound_contextvars(**attrs):
        logger.debug(f"{name}_started", **attrs)
        try:
            yield s
            s.set_status(Status(StatusCode.OK))
            logger.info(f"{name}_completed", **attrs)
        except Exception as exc:
            s.set_status(Status(StatusCode.ERROR, str(exc)))
            s.record_exception(exc)
            logger.error(f"{name}_failed", error=str(exc), **attrs)
            raise
