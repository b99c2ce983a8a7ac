"""Logging setup shared by the API and the command line."""

import logging
import sys
from typing import Optional

import structlog

from ..config import Settings, settings as default_settings


def configure_logging(config: Optional[Settings] = None) -> None:
    """
    Configure structlog on top of the standard library logger.

    Args:
        config: Settings providing ``log_level`` and ``log_format``
    """
    config = config or default_settings
    level = getattr(logging, config.log_level.upper(), logging.INFO)

    logging.basicConfig(format="%(message)s", stream=sys.stderr, level=level)

    renderer = (
        structlog.dev.ConsoleRenderer()
        if config.log_format == "console"
        else structlog.processors.JSONRenderer()
    )

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.TimeStamper(fmt="iso"),
            renderer,
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )
