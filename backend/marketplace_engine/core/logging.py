"""
Logging configuration for the marketplace engine.
"""
import logging
import sys

import structlog

from marketplace_engine.core.config import Settings, settings as default_settings


def setup_logging(settings: Settings | None = None):
    """
    Configure structured logging for the engine.

    Args:
        settings: Optional settings override; defaults to the environment.
    """
    settings = settings or default_settings
    log_level = logging.DEBUG if settings.debug else getattr(
        logging, settings.log_level, logging.INFO
    )

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.StackInfoRenderer(),
            structlog.dev.set_exc_info,
            structlog.processors.TimeStamper(fmt="iso"),
            # Console renderer in debug mode, JSON otherwise
            structlog.dev.ConsoleRenderer()
            if settings.debug
            else structlog.processors.JSONRenderer(),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(log_level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=True,
    )

    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=log_level,
    )


def get_logger(name: str | None = None):
    """
    Get a structured logger.

    Args:
        name: Optional logger name.

    Returns:
        Structured logger instance.
    """
    return structlog.get_logger(name)
