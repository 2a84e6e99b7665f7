"""Data models for DPIP Monitor telemetry."""

import math
from dataclasses import dataclass
from enum import Enum, IntEnum

from dpipmon.severity import Severity

# Sentinel used by the telemetry API for "no measurement"
NO_DATA = -1


class TimeRange(IntEnum):
    """Selectable display durations, in minutes."""

    MIN_5 = 5
    MIN_15 = 15
    MIN_30 = 30
    HOUR_1 = 60
    HOUR_3 = 180
    HOUR_6 = 360
    HOUR_24 = 1440

    @property
    def label(self) -> str:
        return _TIME_RANGE_LABELS[self]


_TIME_RANGE_LABELS = {
    TimeRange.MIN_5: "5 min",
    TimeRange.MIN_15: "15 min",
    TimeRange.MIN_30: "30 min",
    TimeRange.HOUR_1: "1 hour",
    TimeRange.HOUR_3: "3 hours",
    TimeRange.HOUR_6: "6 hours",
    TimeRange.HOUR_24: "24 hours",
}


class Target(Enum):
    """Measurement target, selecting which pair of sample fields to read."""

    EDGE = ("ping", "loss", "Cloudflare")
    ORIGIN = ("ping_dev", "loss_dev", "ExpTech")

    def __init__(self, value_field: str, loss_field: str, display_name: str):
        self.value_field = value_field
        self.loss_field = loss_field
        self.display_name = display_name


@dataclass(frozen=True)
class Sample:
    """One measurement record at a timeline position.

    ping/ping_dev are latencies in ms, loss/loss_dev are loss percentages.
    NO_DATA (-1) in any field means the server had nothing for that slot.
    """

    ping: float = NO_DATA
    loss: float = NO_DATA
    ping_dev: float = NO_DATA
    loss_dev: float = NO_DATA

    @classmethod
    def from_dict(cls, raw: dict) -> "Sample":
        """Build a Sample from a decoded JSON object.

        Missing keys become NO_DATA. Non-numeric or non-finite values raise
        ValueError.
        """
        if not isinstance(raw, dict):
            raise ValueError(f"sample must be an object, got {type(raw).__name__}")

        values = {}
        for name in ("ping", "loss", "ping_dev", "loss_dev"):
            value = raw.get(name, NO_DATA)
            if value is None:
                value = NO_DATA
            # bool is an int subclass; reject it explicitly
            if isinstance(value, bool) or not isinstance(value, (int, float)):
                raise ValueError(f"sample field {name!r} is not numeric: {value!r}")
            # json accepts NaN and Infinity literals
            if not math.isfinite(value):
                raise ValueError(f"sample field {name!r} is not finite: {value!r}")
            values[name] = value
        return cls(**values)

    def value_for(self, target: Target) -> float:
        return getattr(self, target.value_field)

    def loss_for(self, target: Target) -> float:
        return getattr(self, target.loss_field)


@dataclass(frozen=True)
class DisplayPoint:
    """A single timeline bucket ready for charting."""

    timestamp_ms: int
    value: float | None  # None when the bucket has no measurement
    loss_percent: float
    severity: Severity
    has_data: bool

    @property
    def color(self) -> str:
        return self.severity.color


@dataclass(frozen=True)
class SummaryStats:
    """Aggregates over the valid samples of one target."""

    avg_value: int
    min_value: float
    max_value: float
    avg_loss_percent: float
    max_loss_percent: float
    valid_count: int
    total_count: int

    @property
    def completeness_percent(self) -> int:
        """Share of samples carrying a measurement, as a whole percentage."""
        if self.total_count == 0:
            return 0
        return int(self.valid_count / self.total_count * 100 + 0.5)


@dataclass(frozen=True)
class StatusSnapshot:
    """Decoded status response for one ISP and range."""

    samples: tuple[Sample, ...]
    now_ms: int
    legacy: bool = False  # True when the server omitted the authoritative "now"
