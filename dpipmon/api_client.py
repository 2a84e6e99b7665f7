"""HTTP client for the DPIP telemetry API."""

import logging
import time
from urllib.parse import quote

import requests

from dpipmon.models import Sample, StatusSnapshot

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "https://lb.exptech.dev"
DEFAULT_TIMEOUT_S = 10.0

ISP_LIST_PATH = "/api/v1/dpip/ispList"
STATUS_PATH = "/api/v1/dpip/status/{isp}/{range_minutes}"


class TelemetryError(Exception):
    """Base class for telemetry API failures."""


class ApiRequestError(TelemetryError):
    """Network failure, timeout, or non-success HTTP status."""


class ApiDecodeError(TelemetryError):
    """Response body is not the JSON shape the API promises."""


class TelemetryClient:
    """Typed client for the ISP list and status endpoints.

    Both endpoints share the same base URL, timeout, JSON decoding and error
    mapping. Every failure surfaces as a TelemetryError subclass.

    The canonical status response is an envelope ``{"data": [...], "now": ms}``.
    A bare array is still accepted as the legacy shape; the snapshot is then
    stamped with the local clock and flagged ``legacy=True``.
    """

    def __init__(
        self,
        base_url: str = DEFAULT_BASE_URL,
        timeout_s: float = DEFAULT_TIMEOUT_S,
        session: requests.Session | None = None,
    ):
        if timeout_s <= 0:
            raise ValueError("timeout_s must be positive")

        self.base_url = base_url.rstrip("/")
        self.timeout_s = timeout_s
        self.session = session if session is not None else requests.Session()

        logger.debug("TelemetryClient initialized: base_url=%s, timeout=%.1fs", self.base_url, timeout_s)

    def fetch_isp_list(self) -> list[str]:
        """Fetch the ISP identifiers known to the service.

        Raises:
            ApiRequestError: request failed or returned a non-2xx status
            ApiDecodeError: body is not a JSON array of strings
        """
        payload = self._get_json(ISP_LIST_PATH)

        if not isinstance(payload, list) or not all(isinstance(isp, str) for isp in payload):
            raise ApiDecodeError("ISP list is not an array of strings")

        logger.debug("Fetched ISP list: %d entries", len(payload))
        return payload

    def fetch_status(self, isp: str, range_minutes: int) -> StatusSnapshot:
        """Fetch the sample series for an ISP over range_minutes.

        Args:
            isp: ISP identifier, percent-encoded into a single path segment
            range_minutes: Display range in minutes

        Raises:
            ApiRequestError: request failed or returned a non-2xx status
            ApiDecodeError: body is neither an envelope nor a bare sample array
        """
        if not isp:
            raise ValueError("isp cannot be empty")

        path = self.status_path(isp, range_minutes)
        payload = self._get_json(path)
        snapshot = self._parse_status(payload)

        logger.debug(
            "Fetched status: isp=%s, range=%d, samples=%d, legacy=%s",
            isp,
            range_minutes,
            len(snapshot.samples),
            snapshot.legacy,
        )
        return snapshot

    @staticmethod
    def status_path(isp: str, range_minutes: int) -> str:
        return STATUS_PATH.format(isp=quote(isp, safe=""), range_minutes=int(range_minutes))

    def _get_json(self, path: str):
        url = f"{self.base_url}{path}"
        try:
            response = self.session.get(url, timeout=self.timeout_s)
            response.raise_for_status()
        except requests.exceptions.RequestException as e:
            raise ApiRequestError(f"GET {url} failed: {e}") from e

        try:
            return response.json()
        except ValueError as e:
            raise ApiDecodeError(f"GET {url} returned invalid JSON: {e}") from e

    def _parse_status(self, payload) -> StatusSnapshot:
        now_ms = None
        if isinstance(payload, dict):
            items = payload.get("data")
            raw_now = payload.get("now")
            if isinstance(raw_now, (int, float)) and not isinstance(raw_now, bool):
                now_ms = int(raw_now)
        else:
            items = payload

        if not isinstance(items, list):
            raise ApiDecodeError("status response has no sample array")

        try:
            samples = tuple(Sample.from_dict(item) for item in items)
        except ValueError as e:
            raise ApiDecodeError(f"malformed sample: {e}") from e

        if now_ms is None:
            logger.warning("Status response has no server timestamp; using local clock")
            return StatusSnapshot(samples=samples, now_ms=int(time.time() * 1000), legacy=True)

        return StatusSnapshot(samples=samples, now_ms=now_ms)
