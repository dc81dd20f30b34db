"""Logging setup shared by the app factory and the CLI scripts."""
from __future__ import annotations

import logging
import logging.config

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"


def configure_logging(level: str = "INFO") -> None:
    logging.config.dictConfig(
        {
            "version": 1,
            "disable_existing_loggers": False,
            "formatters": {
                "standard": {"format": LOG_FORMAT},
            },
            "handlers": {
                "console": {
                    "class": "logging.StreamHandler",
                    "formatter": "standard",
                    "level": level.upper(),
                },
            },
            "root": {"handlers": ["console"], "level": level.upper()},
            "loggers": {
                "werkzeug": {"level": "WARNING"},
                "mysql.connector": {"level": "WARNING"},
            },
        }
    )
