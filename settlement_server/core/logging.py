"""Logging configuration shared by the API process and maintenance scripts."""

from __future__ import annotations

import logging.config

from settlement_server.core.config import Settings


def configure_logging(settings: Settings) -> None:
    level = "DEBUG" if settings.debug else settings.logging.level.upper()
    logging.config.dictConfig(
        {
            "version": 1,
            "disable_existing_loggers": False,
            "formatters": {
                "default": {"format": settings.logging.format},
            },
            "handlers": {
                "console": {
                    "class": "logging.StreamHandler",
                    "formatter": "default",
                },
            },
            "loggers": {
                "settlement_server": {"level": level, "handlers": ["console"], "propagate": False},
                "sqlalchemy.engine": {"level": "INFO" if settings.database.echo else "WARNING"},
            },
            "root": {"level": "WARNING", "handlers": ["console"]},
        }
    )


__all__ = ["configure_logging"]
