"""
Descriptive statistics shared by the analytics calculators.

Thin wrappers over the statistics module with the edge-case behaviour the
calculators rely on (None instead of exceptions for short inputs).
"""

import math
import statistics
from typing import Optional, Sequence


def mean_or_none(values: Sequence[float]) -> Optional[float]:
    """Arithmetic mean, or None for an empty sequence."""
    if not values:
        return None
    return statistics.fmean(values)


def sample_stdev(values: Sequence[float]) -> Optional[float]:
    """Sample standard deviation (n - 1). None with fewer than 2 values."""
    if len(values) < 2:
        return None
    return statistics.stdev(values)


def coefficient_of_variation(values: Sequence[float]) -> Optional[float]:
    """
    CV = stdev / mean.

    Returns None when fewer than 2 values exist or the mean is 0.
    """
    m = mean_or_none(values)
    s = sample_stdev(values)
    if m is None or s is None or m == 0:
        return None
    return abs(s / m)


def population_mean_std(values: Sequence[float]) -> tuple[float, float]:
    """
    Mean and population standard deviation for z-scoring.

    A degenerate spread (0 or non-finite) falls back to 1 so that
    standardised values stay finite.
    """
    if not values:
        return 0.0, 1.0
    m = statistics.fmean(values)
    std = statistics.pstdev(values, mu=m)
    if not math.isfinite(std) or std == 0:
        std = 1.0
    return m, std


def nearest_rank_percentile(values: Sequence[float], pct: float) -> Optional[float]:
    """
    Percentile by nearest rank on the sorted values.

    index = round(pct / 100 * (n - 1)), clamped into range.
    """
    if not values:
        return None
    ordered = sorted(values)
    idx = round((pct / 100) * (len(ordered) - 1))
    idx = min(len(ordered) - 1, max(0, idx))
    return ordered[idx]


def percentile_rank(values: Sequence[float], target: float) -> Optional[int]:
    """
    Share of values <= target, as an integer percent (0-100).

    None for an empty population or a non-finite target.
    """
    if not values or target is None or not math.isfinite(target):
        return None
    count = sum(1 for v in values if v <= target)
    return round(count / len(values) * 100)
