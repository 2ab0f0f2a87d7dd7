# ==== STRUCTURED LOGGING WITH LOGURU ==== #

"""
Structured logging with loguru for the request lifecycle engine.

This module provides JSON logging, optional rotated file sinks, routing of
standard-library logging through loguru, and OpenTelemetry trace correlation
for lifecycle events.
"""

import logging
import sys
from pathlib import Path
from typing import Any, Dict

from loguru import logger
from opentelemetry import trace
from opentelemetry.instrumentation.logging import LoggingInstrumentor


# ==== STANDARD LOGGING BRIDGE ==== #


class InterceptHandler(logging.Handler):
    """Route standard-library log records through loguru."""

    def emit(self, record: logging.LogRecord) -> None:
        # Get corresponding Loguru level if it exists
        try:
            level = logger.level(record.levelname).name
        except ValueError:
            level = record.levelno

        # Find caller from where originated the logged message
        frame, depth = logging.currentframe(), 2
        while frame and frame.f_code.co_filename == logging.__file__:
            frame = frame.f_back
            depth += 1

        logger.opt(depth=depth, exception=record.exc_info).log(
            level, record.getMessage()
        )


def init_logging(level: str = "INFO", logs_dir: str | Path | None = None) -> None:
    """Initialize structured logging with loguru.

    Console output is always JSON. File sinks with rotation and compression
    are added only when a log directory is given.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        logs_dir: Directory for rotated log files, or None for console only
    """
    # Remove default loguru handler
    logger.remove()

    logger.add(
        sys.stdout,
        format="{message}",
        serialize=True,
        level=level.upper(),
        enqueue=True,
        colorize=False,
        backtrace=True,
        diagnose=False,
    )

    if logs_dir is not None:
        logs_path = Path(logs_dir)
        logs_path.mkdir(parents=True, exist_ok=True)

        logger.add(
            logs_path / "lifecycle_{time:YYYY-MM-DD}.log",
            rotation="100 MB",
            retention="30 days",
            compression="gz",
            serialize=True,
            level="DEBUG",
            enqueue=True,
        )

        # Errors are kept longer than regular logs
        logger.add(
            logs_path / "lifecycle_errors_{time:YYYY-MM-DD}.log",
            rotation="50 MB",
            retention="90 days",
            compression="gz",
            serialize=True,
            level="ERROR",
            enqueue=True,
        )

    logging.basicConfig(handlers=[InterceptHandler()], level=0, force=True)

    try:
        LoggingInstrumentor().instrument(set_logging_format=False)
    except Exception as e:
        logger.warning(f"Failed to setup OpenTelemetry logging: {e}")

    logger.info("Structured logging initialized with loguru", level=level)


class ContextualLogger:
    """Loguru logger with automatic context injection.

    Binds keyword fields and, when a span is recording, the active trace and
    span ids to every record.
    """

    def __init__(self, name: str):
        self.name = name
        self.logger = logger.bind(logger_name=name)

    def _add_context(self, extra: Dict[str, Any] | None = None) -> Dict[str, Any]:
        context: Dict[str, Any] = {"logger_name": self.name}

        if extra:
            context.update(extra)

        span = trace.get_current_span()
        if span.is_recording():
            span_context = span.get_span_context()
            if span_context.is_valid:
                context['trace_id'] = format(span_context.trace_id, '032x')
                context['span_id'] = format(span_context.span_id, '016x')

        return context

    def debug(self, msg: str, **kwargs: Any) -> None:
        self.logger.bind(**self._add_context(kwargs)).debug(msg)

    def info(self, msg: str, **kwargs: Any) -> None:
        self.logger.bind(**self._add_context(kwargs)).info(msg)

    def warning(self, msg: str, **kwargs: Any) -> None:
        self.logger.bind(**self._add_context(kwargs)).warning(msg)

    def error(self, msg: str, **kwargs: Any) -> None:
        self.logger.bind(**self._add_context(kwargs)).error(msg)

    def exception(self, msg: str, **kwargs: Any) -> None:
        """Log exception with full traceback and context."""
        self.logger.bind(**self._add_context(kwargs)).exception(msg)


# ==== LOGGING UTILITIES ==== #

def get_logger(name: str) -> ContextualLogger:
    """Get a contextual logger instance.

    Args:
        name: Logger name (typically __name__)

    Returns:
        ContextualLogger instance
    """
    return ContextualLogger(name)


def log_business_event(event_type: str, request_id: str, **context: Any) -> None:
    """Log a lifecycle business event with structured data.

    Args:
        event_type: Type of business event
        request_id: Request the event belongs to
        **context: Additional business context
    """
    logger.bind(
        event_type=event_type,
        request_id=request_id,
        business_event=True,
        **context
    ).info(f"Business event: {event_type}")
