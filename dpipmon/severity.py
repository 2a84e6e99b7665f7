"""Packet-loss severity classification."""

from enum import Enum


class Severity(Enum):
    """Loss bands shown as marker colors, plus a no-data state."""

    NO_DATA = "no_data"
    HEALTHY = "healthy"
    MINOR = "minor"
    MAJOR = "major"
    SEVERE = "severe"

    @property
    def color(self) -> str:
        return SEVERITY_COLORS[self]

    @property
    def label(self) -> str:
        return SEVERITY_LABELS[self]


SEVERITY_COLORS = {
    Severity.NO_DATA: "#9CA3AF",
    Severity.HEALTHY: "#10B981",
    Severity.MINOR: "#3B82F6",
    Severity.MAJOR: "#EF4444",
    Severity.SEVERE: "#8B5CF6",
}

SEVERITY_LABELS = {
    Severity.HEALTHY: "0% loss",
    Severity.MINOR: "≤33% loss",
    Severity.MAJOR: "≤66% loss",
    Severity.SEVERE: ">66% loss",
    Severity.NO_DATA: "No data",
}

# Upper bound (inclusive) of each loss band above zero
MINOR_MAX = 33
MAJOR_MAX = 66


def classify(loss_percent: float) -> Severity:
    """Classify a packet-loss percentage into a severity band.

    Pure, total function. Band upper bounds are inclusive:

        -1          -> NO_DATA
        <= 0        -> HEALTHY
        (0, 33]     -> MINOR
        (33, 66]    -> MAJOR
        > 66        -> SEVERE

    Fractional values are compared as-is, so 66.5 is SEVERE.
    """
    if loss_percent == -1:
        return Severity.NO_DATA
    if loss_percent <= 0:
        return Severity.HEALTHY
    if loss_percent <= MINOR_MAX:
        return Severity.MINOR
    if loss_percent <= MAJOR_MAX:
        return Severity.MAJOR
    return Severity.SEVERE


def severity_color(loss_percent: float) -> str:
    """Return the marker color for a packet-loss percentage."""
    return classify(loss_percent).color
