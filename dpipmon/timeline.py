"""Timeline reindexing: align sparse samples onto fixed-cadence buckets."""

import logging
from datetime import datetime
from math import ceil
from typing import Sequence

from dpipmon.models import NO_DATA, DisplayPoint, Sample, Target
from dpipmon.severity import Severity, classify

logger = logging.getLogger(__name__)

SECOND_MS = 1000
MINUTE_MS = 60 * SECOND_MS
HOUR_MS = 60 * MINUTE_MS

# Approximate number of labelled ticks on the time axis
AXIS_TICK_TARGET = 8


def bucket_spec(range_minutes: int) -> tuple[int, int]:
    """Return (bucket_width_ms, bucket_count) for a display range.

    Cadence policy:
    - up to 60 minutes: 30 second buckets (count = range * 2)
    - up to 1440 minutes: 60 second buckets (count = range)
    - beyond that: hourly buckets (count = ceil(range / 60))

    Raises:
        ValueError: if range_minutes is not positive
    """
    if range_minutes <= 0:
        raise ValueError(f"range_minutes must be positive, got {range_minutes}")

    if range_minutes <= 60:
        return 30 * SECOND_MS, range_minutes * 2
    if range_minutes <= 1440:
        return MINUTE_MS, range_minutes
    return HOUR_MS, ceil(range_minutes / 60)


def bucket_timestamps(range_minutes: int, now_ms: int) -> list[int]:
    """Return evenly spaced bucket timestamps, oldest first, ending at now_ms."""
    width_ms, count = bucket_spec(range_minutes)
    start_ms = now_ms - (count - 1) * width_ms
    return [start_ms + index * width_ms for index in range(count)]


def reindex(
    samples: Sequence[Sample],
    range_minutes: int,
    now_ms: int,
    target: Target = Target.EDGE,
) -> list[DisplayPoint]:
    """Map samples onto the display timeline for one target.

    Alignment is positional: sample i fills bucket i. The server returns
    samples oldest first at the expected cadence, so embedded timing is not
    consulted. Buckets without a sample, and samples whose value is the
    NO_DATA sentinel, become empty points. Extra samples are dropped.

    Returns:
        Exactly bucket_spec(range_minutes)[1] DisplayPoints, oldest first
    """
    timestamps = bucket_timestamps(range_minutes, now_ms)

    if len(samples) > len(timestamps):
        logger.debug(
            "Dropping %d surplus samples (range=%d, buckets=%d)",
            len(samples) - len(timestamps),
            range_minutes,
            len(timestamps),
        )

    points = []
    for index, timestamp_ms in enumerate(timestamps):
        sample = samples[index] if index < len(samples) else None

        if sample is None:
            points.append(
                DisplayPoint(
                    timestamp_ms=timestamp_ms,
                    value=None,
                    loss_percent=NO_DATA,
                    severity=Severity.NO_DATA,
                    has_data=False,
                )
            )
            continue

        value = sample.value_for(target)
        loss = sample.loss_for(target)
        has_data = value != NO_DATA
        points.append(
            DisplayPoint(
                timestamp_ms=timestamp_ms,
                value=value if has_data else None,
                loss_percent=loss,
                severity=classify(loss) if has_data else Severity.NO_DATA,
                has_data=has_data,
            )
        )

    return points


def format_time_label(timestamp_ms: int, range_minutes: int) -> str:
    """Format a bucket timestamp for tooltips and axis labels (local time)."""
    moment = datetime.fromtimestamp(timestamp_ms / 1000)
    if range_minutes <= 60:
        return moment.strftime("%H:%M:%S")
    if range_minutes <= 1440:
        return moment.strftime("%H:%M")
    return moment.strftime("%d %H:00")


def axis_ticks(timestamps: Sequence[int]) -> list[int]:
    """Pick roughly AXIS_TICK_TARGET evenly spaced timestamps, always ending on the last."""
    if not timestamps:
        return []

    step = max(1, len(timestamps) // AXIS_TICK_TARGET)
    last = len(timestamps) - 1
    return [ts for index, ts in enumerate(timestamps) if index % step == 0 or index == last]
