import logging
import sys

import structlog

LOG_FORMATS = ("console", "json")


def _renderer(log_format: "str") -> "structlog.typing.Processor":
    if log_format == "json":
        return structlog.processors.JSONRenderer()
    return structlog.dev.ConsoleRenderer()


def setup_logging(level: "str", log_format: "str" = "console") -> "None":
    """
    configures structlog on top of the stdlib logging module.

    Everything is written to stderr so that stdout carries only the
    run summary. "json" emits one object per line for log shippers,
    "console" is the human-readable default. Exceptions are rendered
    into the event so failed account exports keep their traceback.
    """
    if log_format not in LOG_FORMATS:
        raise ValueError(f"unknown log format {log_format!r}")

    numeric_level = getattr(logging, level.upper(), logging.INFO)
    logging.basicConfig(
        format="%(message)s",
        stream=sys.stderr,
        level=numeric_level,
    )
    # httpx announces every request at INFO
    logging.getLogger("httpx").setLevel(max(numeric_level, logging.WARNING))

    processors: "list[structlog.typing.Processor]" = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
    ]
    if log_format == "json":
        processors.append(structlog.processors.format_exc_info)
    processors.append(_renderer(log_format))

    structlog.configure(
        processors=processors,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )
