"""Environment-driven settings for DPIP Monitor."""

import logging
import os
from dataclasses import dataclass
from typing import Mapping

from dpipmon.api_client import DEFAULT_BASE_URL, DEFAULT_TIMEOUT_S
from dpipmon.models import TimeRange

logger = logging.getLogger(__name__)

DEFAULT_REFRESH_MS = 30_000
DEFAULT_ISP = "Chunghwa Telecom Co. Ltd."
DEFAULT_RANGE = TimeRange.HOUR_24

SOURCE_HTTP = "http"
SOURCE_FAKE = "fake"


@dataclass(frozen=True)
class Settings:
    """Runtime settings. Everything has a working default."""

    api_base: str = DEFAULT_BASE_URL
    refresh_interval_ms: int = DEFAULT_REFRESH_MS
    request_timeout_s: float = DEFAULT_TIMEOUT_S
    default_isp: str = DEFAULT_ISP
    default_range: TimeRange = DEFAULT_RANGE
    source: str = SOURCE_HTTP


def _positive_number(environ, name, default, convert):
    raw = environ.get(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        value = convert(raw)
    except ValueError:
        logger.warning("Ignoring %s=%r: not a number (using %s)", name, raw, default)
        return default
    if value <= 0:
        logger.warning("Ignoring %s=%r: must be positive (using %s)", name, raw, default)
        return default
    return value


def load_settings(environ: Mapping[str, str] | None = None) -> Settings:
    """Build Settings from DPIPMON_* environment variables.

    Invalid values are logged and replaced by their default; configuration
    problems never prevent the dashboard from starting.
    """
    if environ is None:
        environ = os.environ

    api_base = environ.get("DPIPMON_API_BASE", "").strip().rstrip("/") or DEFAULT_BASE_URL

    refresh_ms = _positive_number(environ, "DPIPMON_REFRESH_MS", DEFAULT_REFRESH_MS, int)
    timeout_s = _positive_number(environ, "DPIPMON_TIMEOUT_S", DEFAULT_TIMEOUT_S, float)

    # An explicitly empty value means "start with no ISP selected"
    default_isp = environ.get("DPIPMON_DEFAULT_ISP", DEFAULT_ISP).strip()

    default_range = DEFAULT_RANGE
    raw_range = environ.get("DPIPMON_DEFAULT_RANGE")
    if raw_range:
        try:
            default_range = TimeRange(int(raw_range))
        except ValueError:
            allowed = ", ".join(str(r.value) for r in TimeRange)
            logger.warning(
                "Ignoring DPIPMON_DEFAULT_RANGE=%r: expected one of %s", raw_range, allowed
            )

    source = environ.get("DPIPMON_SOURCE", SOURCE_HTTP).strip().lower() or SOURCE_HTTP
    if source not in (SOURCE_HTTP, SOURCE_FAKE):
        logger.warning("Ignoring DPIPMON_SOURCE=%r: expected 'http' or 'fake'", source)
        source = SOURCE_HTTP

    settings = Settings(
        api_base=api_base,
        refresh_interval_ms=refresh_ms,
        request_timeout_s=timeout_s,
        default_isp=default_isp,
        default_range=default_range,
        source=source,
    )
    logger.debug("Settings loaded: %s", settings)
    return settings
