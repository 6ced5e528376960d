"""Logging configuration for the invite portal."""

import logging
import sys

from portal.config import Settings

# Libraries that log every request or connection at INFO
_NOISY_LOGGERS = ("httpx", "httpcore", "asyncpg", "uvicorn.access")


def setup_logging(settings: Settings) -> None:
    """Route stdlib logging to stdout.

    Debug mode lowers the portal's own loggers to DEBUG; third-party
    request chatter stays at WARNING in every environment.
    """
    level = logging.DEBUG if settings.debug else logging.INFO

    logging.basicConfig(
        level=level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
        stream=sys.stdout,
        force=True,
    )

    for name in _NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    logging.getLogger("portal").setLevel(level)

    logging.getLogger(__name__).info(
        "Logging configured: environment=%s, level=%s, policy=%s",
        settings.environment,
        logging.getLevelName(level),
        settings.policy.path,
    )


def get_logger(name: str) -> logging.Logger:
    """Return a logger under the portal hierarchy."""
    return logging.getLogger(name)
