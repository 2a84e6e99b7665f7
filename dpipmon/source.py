"""Telemetry source abstraction for DPIP Monitor data."""

from typing import Protocol

from dpipmon.models import StatusSnapshot


class TelemetrySource(Protocol):
    """Protocol defining the interface for telemetry sources."""

    def fetch_isp_list(self) -> list[str]:
        """Return the ISP identifiers known to the service."""
        ...

    def fetch_status(self, isp: str, range_minutes: int) -> StatusSnapshot:
        """Return the sample series for an ISP over the given range."""
        ...
