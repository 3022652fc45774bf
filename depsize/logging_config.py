"""Logging configuration for the command line tool."""

import logging
import logging.config
import sys
from typing import Any

from depsize.config import settings


def setup_logging(verbose: bool = False) -> None:
    """Configure console logging on the diagnostic stream.

    Args:
        verbose: Lower the ``depsize`` logger to DEBUG and include source
            locations in every record.
    """
    if settings.log_format == "json":
        formatter = "json"
    elif verbose:
        formatter = "detailed"
    else:
        formatter = "simple"

    level = "DEBUG" if verbose else settings.log_level

    log_config: dict[str, Any] = {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "detailed": {
                "format": "%(asctime)s - %(name)s - %(levelname)s - [%(filename)s:%(lineno)d] - %(message)s",
                "datefmt": "%Y-%m-%d %H:%M:%S",
            },
            "simple": {
                "format": "%(levelname)s - %(message)s",
            },
            "json": {
                "()": "pythonjsonlogger.jsonlogger.JsonFormatter",
                "format": "%(asctime)s %(name)s %(levelname)s %(filename)s %(lineno)d %(message)s",
            },
        },
        "handlers": {
            "console": {
                "class": "logging.StreamHandler",
                "level": level,
                "formatter": formatter,
                "stream": sys.stderr,
            },
        },
        "loggers": {
            "depsize": {
                "level": level,
                "handlers": ["console"],
                "propagate": False,
            },
            "asyncio": {
                "level": "WARNING",
                "handlers": ["console"],
                "propagate": False,
            },
        },
        "root": {
            "level": "WARNING",
            "handlers": ["console"],
        },
    }

    logging.config.dictConfig(log_config)

    logger = logging.getLogger("depsize")
    logger.debug(
        f"Logging initialized - Environment: {settings.environment}, Level: {level}"
    )


def get_logger(name: str) -> logging.Logger:
    """Get a logger instance under the ``depsize`` namespace.

    Args:
        name: Logger name, typically __name__ of the calling module

    Returns:
        Configured logger instance
    """
    if name == "depsize" or name.startswith("depsize."):
        return logging.getLogger(name)
    return logging.getLogger(f"depsize.{name}")
