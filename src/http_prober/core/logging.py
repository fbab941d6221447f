"""Structured logging configuration for HTTP Prober.

structlog events go to stderr through the stdlib ``logging`` tree. stdout is
reserved for the prefixed state lines so a collector can scrape them without
having to filter log noise.
"""

from __future__ import annotations

import logging
import sys
from typing import Any, Callable

import structlog

SERVICE_NAME = "http-prober"

# Marks handlers we installed so repeated configuration replaces them
_HANDLER_ATTR = "_http_prober_handler"

Processor = Callable[[Any, str, dict[str, Any]], dict[str, Any]]


def add_run_context(prefix: str = "") -> Processor:
    """Build a processor stamping every event with the service and run prefix.

    The prefix is the same tag that starts each state line, so log events and
    state lines from one run can be matched up.
    """

    def processor(logger: Any, method_name: str, event_dict: dict[str, Any]) -> dict[str, Any]:
        event_dict.setdefault("service", SERVICE_NAME)
        if prefix:
            event_dict.setdefault("run", prefix.rstrip(":"))
        return event_dict

    return processor


def _install_handler(root: logging.Logger, handler: logging.Handler, level: int) -> None:
    handler.setLevel(level)
    setattr(handler, _HANDLER_ATTR, True)
    root.addHandler(handler)


def configure_logging(
    level: str = "INFO",
    json_format: bool = False,
    log_file: str | None = None,
    prefix: str = "",
) -> Any:
    """Configure structured logging.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR)
        json_format: If True, output JSON logs for machine parsing
        log_file: Optional file path for logging
        prefix: State line prefix of this run, attached to every event

    Returns:
        Configured logger instance
    """
    log_level = getattr(logging, level.upper(), logging.INFO)

    processors: list[Any] = [
        structlog.stdlib.filter_by_level,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        add_run_context(prefix),
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
    ]

    if json_format:
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty()))

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)
    for handler in list(root_logger.handlers):
        if getattr(handler, _HANDLER_ATTR, False):
            root_logger.removeHandler(handler)
            handler.close()

    _install_handler(root_logger, logging.StreamHandler(sys.stderr), log_level)
    if log_file:
        _install_handler(root_logger, logging.FileHandler(log_file), log_level)

    return structlog.get_logger("http_prober")


def get_logger(name: str = "http_prober") -> Any:
    """Get a structlog logger bound to ``name``."""
    return structlog.get_logger(name)
