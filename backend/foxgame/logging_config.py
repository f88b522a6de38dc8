"""
Logging setup for the game server.

One console handler on the root logger; modules log through
``logging.getLogger(__name__)``.
"""

import logging
import logging.config


def setup_logging(level: str = "INFO") -> None:
    """Configure logging once at application startup."""
    logging_config = {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "default": {
                "format": "%(asctime)s - %(name)s - %(levelname)s - %(message)s",
            },
        },
        "handlers": {
            "console": {
                "class": "logging.StreamHandler",
                "level": "DEBUG",
                "formatter": "default",
            },
        },
        "root": {
            "level": level.upper(),
            "handlers": ["console"],
        },
    }

    logging.config.dictConfig(logging_config)
    logging.getLogger(__name__).debug("Logging configured at %s", level.upper())
