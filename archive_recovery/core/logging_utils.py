from __future__ import annotations

import logging
import sys
import uuid

from loguru import logger as loguru_logger

# LogRecord attributes that are not user-supplied ``extra`` fields
_STANDARD_FIELDS = frozenset(
    {
        "args",
        "msg",
        "name",
        "levelno",
        "levelname",
        "pathname",
        "filename",
        "module",
        "exc_info",
        "exc_text",
        "stack_info",
        "lineno",
        "funcName",
        "created",
        "msecs",
        "relativeCreated",
        "thread",
        "threadName",
        "processName",
        "process",
        "taskName",
        "getMessage",
        "message",
    }
)

_TEXT_FORMAT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss.SSS}</green> | <level>{level: <8}</level> | "
    "<cyan>{name}</cyan> - <level>{message}</level> {extra}"
)


class InterceptHandler(logging.Handler):
    """Bridge stdlib logging records (and their ``extra`` fields) into loguru."""

    def emit(self, record: logging.LogRecord) -> None:
        level_to_use: int | str
        try:
            level_to_use = loguru_logger.level(record.levelname).name
        except ValueError:
            level_to_use = record.levelno

        extra = {
            key: value
            for key, value in record.__dict__.items()
            if not key.startswith("_") and key not in _STANDARD_FIELDS
        }

        loguru_logger.bind(**extra).opt(depth=6, exception=record.exc_info).log(
            level_to_use, record.getMessage()
        )


def setup_logging(
    level: str = "INFO",
    *,
    json_output: bool = False,
    log_file: str | None = None,
    max_file_size: str = "10 MB",
    retention: str = "7 days",
) -> None:
    """Route stdlib logging through loguru.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        json_output: Serialize every record as JSON instead of the text format
        log_file: Optional log file path
        max_file_size: Maximum size per log file (loguru format)
        retention: Log retention period (loguru format)
    """
    lvl = getattr(logging, level.upper(), logging.INFO)

    loguru_logger.remove()
    loguru_logger.add(
        sys.stderr,
        format=_TEXT_FORMAT,
        level=level.upper(),
        serialize=json_output,
        backtrace=True,
        diagnose=False,
    )
    if log_file:
        loguru_logger.add(
            log_file,
            level=level.upper(),
            serialize=True,
            rotation=max_file_size,
            retention=retention,
            compression="gz",
            enqueue=True,
        )

    root = logging.getLogger()
    root.handlers.clear()
    root.setLevel(lvl)
    root.addHandler(InterceptHandler())

    # httpx logs every request line at INFO
    for noisy_logger in ("httpx", "httpcore"):
        logging.getLogger(noisy_logger).setLevel(logging.WARNING)

    loguru_logger.debug(
        "logging_initialized",
        setup_config={"level": level, "json_output": json_output, "log_file": log_file},
    )


def generate_correlation_id() -> str:
    """Generate a short correlation ID for tracing one run across log lines."""
    return uuid.uuid4().hex[:12]


def mask_credential(value: str | None, visible: int = 4) -> str:
    """Hide a bearer value for logging, keeping the scheme and the last characters.

    >>> mask_credential("Bearer abcdefghijkl")
    'Bearer ***ijkl'
    """
    if not value:
        return "<none>"
    scheme, _, token = value.partition(" ")
    if not token:
        scheme, token = "", scheme
    tail = token[-visible:] if len(token) > visible * 2 else ""
    masked = f"***{tail}"
    return f"{scheme} {masked}" if scheme else masked
