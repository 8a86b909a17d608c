"""
structlog setup shared by the CLI and library users.
"""
from __future__ import annotations

import logging
import sys
from typing import TYPE_CHECKING, Any, Dict, List

import structlog

if TYPE_CHECKING:
    from novelsieve.config.config import MonitoringConfig

# --- Custom Processors ---


def add_source_url(logger: logging.Logger, method_name: str, event_dict: Dict[Any, Any]) -> Dict[Any, Any]:
    """
    Copies the page being extracted into the record when the pipeline has
    bound one with ``structlog.contextvars.bound_contextvars``.
    """
    ctx = structlog.contextvars.get_contextvars()
    if "source_url" in ctx and "source_url" not in event_dict:
        event_dict["source_url"] = ctx["source_url"]
    return event_dict


# --- Configuration ---


def configure_logging(config: MonitoringConfig) -> None:
    """
    Sets up structlog to handle all logging for the application, including
    records emitted through the standard ``logging`` module.
    """
    shared_processors: List[Any] = [
        structlog.contextvars.merge_contextvars,
        add_source_url,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
    ]

    log_renderer: Any
    if config.log_file:
        # Structured JSON logging for file output
        log_renderer = structlog.processors.JSONRenderer(ensure_ascii=False)
        handler: logging.Handler = logging.FileHandler(config.log_file, encoding="utf-8")
    else:
        # More readable console output for development
        log_renderer = structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty())
        handler = logging.StreamHandler(sys.stderr)

    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            processor=log_renderer,
            foreign_pre_chain=shared_processors,
        )
    )

    root = logging.getLogger()
    for existing in list(root.handlers):
        root.removeHandler(existing)
    root.addHandler(handler)
    root.setLevel(config.log_level.upper())

    structlog.configure(
        processors=shared_processors
        + [
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    logger = structlog.get_logger("novelsieve.logging")
    logger.debug("Logging configured", level=config.log_level, output=config.log_file or "console")
