"""Summary statistics over a sample series."""

from math import floor
from typing import Sequence

from dpipmon.models import NO_DATA, Sample, SummaryStats, Target


def _round_half_up(value: float, places: int = 0) -> float:
    scale = 10**places
    return floor(value * scale + 0.5) / scale


def summarize(samples: Sequence[Sample], target: Target = Target.EDGE) -> SummaryStats | None:
    """Compute summary statistics for one target.

    Only samples whose value is not the NO_DATA sentinel contribute. Loss
    figures are taken from those same samples.

    Args:
        samples: Sample series as returned by the server
        target: Which value/loss pair to read

    Returns:
        SummaryStats, or None when no sample carries a measurement. Callers
        render a distinct "no data" state for None rather than zeros.
    """
    valid = [sample for sample in samples if sample.value_for(target) != NO_DATA]
    if not valid:
        return None

    values = [sample.value_for(target) for sample in valid]
    losses = [sample.loss_for(target) for sample in valid]

    return SummaryStats(
        avg_value=int(_round_half_up(sum(values) / len(values))),
        min_value=min(values),
        max_value=max(values),
        avg_loss_percent=_round_half_up(sum(losses) / len(losses), 2),
        max_loss_percent=max(losses),
        valid_count=len(valid),
        total_count=len(samples),
    )
