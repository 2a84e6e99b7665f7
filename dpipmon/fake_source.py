"""Simulated telemetry source for offline development and testing."""

import random
import time

from dpipmon.models import NO_DATA, Sample, StatusSnapshot
from dpipmon.timeline import bucket_spec

DEFAULT_ISPS = (
    "Chunghwa Telecom Co. Ltd.",
    "Taiwan Mobile Co., Ltd.",
    "Far EasTone Telecommunications Co., Ltd.",
    "Asia Pacific Telecom",
)


class FakeTelemetrySource:
    """Generates plausible ping/loss series without touching the network."""

    def __init__(self, seed: int | None = None, isps: tuple[str, ...] = DEFAULT_ISPS):
        """Initialize with optional random seed for deterministic behavior."""
        # Isolated random instance; workers call this from pool threads
        self._random = random.Random(seed)
        self.isps = isps

        # Simulation parameters
        self.base_ping = 12.0  # Edge latency in ms
        self.origin_extra = 18.0  # Added latency to the origin target
        self.ping_variance = 3.0
        self.gap_probability = 0.03  # Chance a slot has no measurement
        self.loss_probability = 0.05  # Chance a slot reports packet loss
        self.fill_ratio = 0.9  # Fraction of buckets the fake server returns

    def fetch_isp_list(self) -> list[str]:
        return list(self.isps)

    def fetch_status(self, isp: str, range_minutes: int) -> StatusSnapshot:
        """Generate a series covering most of the requested range."""
        if isp not in self.isps:
            raise ValueError(f"Unknown ISP: {isp!r}")

        _, count = bucket_spec(range_minutes)
        returned = int(count * self.fill_ratio)
        samples = tuple(self._generate_sample() for _ in range(returned))

        return StatusSnapshot(samples=samples, now_ms=int(time.time() * 1000))

    def _generate_sample(self) -> Sample:
        if self._random.random() < self.gap_probability:
            return Sample()

        ping = max(1, round(self.base_ping + self._random.gauss(0, self.ping_variance)))
        ping_dev = max(1, round(ping + self.origin_extra + self._random.gauss(0, self.ping_variance)))

        if self._random.random() < self.loss_probability:
            loss = self._random.choice((10, 25, 50, 100))
        else:
            loss = 0

        # The origin target occasionally drops out on its own
        if self._random.random() < self.gap_probability:
            return Sample(ping=ping, loss=loss, ping_dev=NO_DATA, loss_dev=NO_DATA)

        return Sample(ping=ping, loss=loss, ping_dev=ping_dev, loss_dev=loss)
