"""Read models and the weighted-mean aggregation shared by managers and batches."""

from collections.abc import Iterable
from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True)
class OperationSummary:
    """Flat read model of one live operation."""

    id: Any
    stage: str | None
    percentage: float
    message: str
    estimated_time_remaining: float


def weighted_mean(entries: Iterable[tuple[float, float]]) -> float:
    """Weight-normalized mean of ``(percentage, weight)`` pairs.

    Normalizes by the weights actually present, so weights need not sum to 100.
    Returns 0 for no entries or a zero total weight.
    """
    total = 0.0
    total_weight = 0.0
    for percentage, weight in entries:
        total += percentage * weight
        total_weight += weight
    return total / total_weight if total_weight else 0.0
