"""Logging configuration for the fundbook CLI.

Environment variables:
- FUNDBOOK_LOG_LEVEL: DEBUG, INFO, WARNING, ERROR (default: WARNING)
"""

import logging.config
import os
from typing import Optional

DEFAULT_LOG_LEVEL = "WARNING"


def get_logging_config(level: Optional[str] = None) -> dict:
    """Build a dictConfig for console logging.

    Args:
        level: Log level name; falls back to FUNDBOOK_LOG_LEVEL, then WARNING

    Returns:
        logging.config.dictConfig dictionary
    """
    log_level = (level or os.environ.get("FUNDBOOK_LOG_LEVEL") or DEFAULT_LOG_LEVEL).upper()
    return {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "verbose": {
                "format": "[{asctime}] {levelname} {name} {message}",
                "style": "{",
            },
        },
        "handlers": {
            "console": {
                "class": "logging.StreamHandler",
                "formatter": "verbose",
                "stream": "ext://sys.stderr",
            },
        },
        "loggers": {
            "fundbook": {
                "handlers": ["console"],
                "level": log_level,
                "propagate": False,
            },
        },
    }


def configure_logging(level: Optional[str] = None) -> None:
    """Apply the console logging configuration."""
    logging.config.dictConfig(get_logging_config(level))
