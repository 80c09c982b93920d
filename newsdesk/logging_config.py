"""Console logging for the web app and the operator CLI."""

import logging
import logging.config
from typing import Any, Dict

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"
LOG_DATEFMT = "%H:%M:%S"


def build_logging_config(level: str = "INFO", access_log: bool = True) -> Dict[str, Any]:
    """Return the ``dictConfig`` mapping used by ``setup_logging``.

    Args:
        level: Level for the root, ``newsdesk`` and ``uvicorn.error`` loggers.
        access_log: When False, uvicorn request lines are dropped (WARNING).
    """
    level = level.upper()
    return {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "default": {"format": LOG_FORMAT, "datefmt": LOG_DATEFMT},
            "access_simple": {"format": "%(message)s"},
        },
        "handlers": {
            "console": {"class": "logging.StreamHandler", "formatter": "default"},
            "access": {"class": "logging.StreamHandler", "formatter": "access_simple"},
        },
        "loggers": {
            "newsdesk": {"level": level},
            "uvicorn.error": {"level": level, "handlers": ["console"], "propagate": False},
            "uvicorn.access": {
                "level": "INFO" if access_log else "WARNING",
                "handlers": ["access"],
                "propagate": False,
            },
            "sqlalchemy.pool": {"level": "WARNING"},
        },
        "root": {"level": level, "handlers": ["console"]},
    }


def setup_logging(level: str = "INFO", access_log: bool = True) -> None:
    logging.config.dictConfig(build_logging_config(level, access_log))
