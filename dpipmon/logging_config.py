"""Logging setup for DPIP Monitor.

Everything goes to stderr. DPIPMON_LOG_LEVEL picks the level; at DEBUG the
HTTP transport's own connection logging is let through as well, otherwise it
is held at WARNING so a 30 second refresh loop does not flood the console.
"""

import logging
import os
import sys
from typing import Mapping

LOG_LEVEL_ENV = "DPIPMON_LOG_LEVEL"
LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

LEVELS = {
    "DEBUG": logging.DEBUG,
    "INFO": logging.INFO,
    "WARNING": logging.WARNING,
    "ERROR": logging.ERROR,
    "CRITICAL": logging.CRITICAL,
}

# Loggers of the HTTP stack under requests
TRANSPORT_LOGGERS = ("urllib3",)


def resolve_level(raw: str | None) -> int | None:
    """Map a level name (any case, surrounding blanks ignored) to a logging level.

    Returns None for unknown names; an unset or blank value means INFO.
    """
    if raw is None or not raw.strip():
        return logging.INFO
    return LEVELS.get(raw.strip().upper())


def configure_logging(environ: Mapping[str, str] | None = None) -> int:
    """Configure application-wide logging from the environment.

    Args:
        environ: Environment to read (defaults to os.environ)

    Returns:
        The level applied to the root logger

    Examples:
        $ python -m dpipmon
        $ DPIPMON_LOG_LEVEL=debug python -m dpipmon
    """
    if environ is None:
        environ = os.environ

    raw = environ.get(LOG_LEVEL_ENV)
    level = resolve_level(raw)
    unknown = level is None
    if unknown:
        level = logging.INFO

    logging.basicConfig(
        level=level,
        format=LOG_FORMAT,
        datefmt=DATE_FORMAT,
        stream=sys.stderr,
        force=True,
    )

    transport_level = logging.NOTSET if level <= logging.DEBUG else logging.WARNING
    for name in TRANSPORT_LOGGERS:
        logging.getLogger(name).setLevel(transport_level)

    logger = logging.getLogger(__name__)
    if unknown:
        logger.warning("Ignoring %s=%r: unknown level (using INFO)", LOG_LEVEL_ENV, raw)
    logger.info("Logging configured: level=%s", logging.getLevelName(level))
    return level
