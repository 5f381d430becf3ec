"""Structured logging for digest runs.

A run is a single short-lived process, usually fired by a scheduler, so
every line carries the ``run_id`` bound by the CLI and goes to one stream.
"""

import logging
import sys
from typing import TextIO

import structlog


# Log every request at INFO; kept at WARNING unless the run is verbose
NOISY_LOGGERS = ("httpx", "httpcore")


def _renderer(json_format: bool, output: TextIO) -> structlog.types.Processor:
    if json_format:
        return structlog.processors.JSONRenderer(sort_keys=True)
    return structlog.dev.ConsoleRenderer(colors=output.isatty())


def configure_logging(
    level: int = logging.INFO,
    output: TextIO = sys.stderr,
    json_format: bool = True,
) -> None:
    """Route digest, httpx and run-context logging to one stream.

    JSON lines suit the scheduler's log collector; the console renderer
    is for interactive ``--no-json-logs`` runs. Safe to call more than once
    in a process; the last call wins.

    Args:
        level: Minimum level for digest events and library logs.
        output: Stream both structlog and stdlib logging write to.
        json_format: Render JSON lines instead of console output.
    """
    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            _renderer(json_format, output),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(file=output),
        cache_logger_on_first_use=False,
    )

    logging.basicConfig(format="%(message)s", stream=output, level=level, force=True)
    library_level = level if level <= logging.DEBUG else max(level, logging.WARNING)
    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(library_level)


def get_logger(name: str | None = None) -> structlog.stdlib.BoundLogger:
    """Logger for a digest module."""
    logger: structlog.stdlib.BoundLogger = structlog.get_logger(name)
    return logger


def bind_run_context(run_id: str) -> None:
    """Tag every following event with the digest run's id."""
    structlog.contextvars.bind_contextvars(run_id=run_id)


def clear_run_context() -> None:
    """Drop the run id once the run has finished."""
    structlog.contextvars.unbind_contextvars("run_id")
