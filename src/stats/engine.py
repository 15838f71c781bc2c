"""
Statistics Engine

Pure summary statistics over a payload of real-valued samples:
- Arithmetic mean
- Median (computed on a private sorted copy)
- Spread: twice the population standard deviation

None of the functions validate the sample domain; the ledger's validator
does that downstream. All of them reject empty input.

Author: StatChain Project
"""

import math
from typing import NamedTuple, Sequence


class StatisticsError(ValueError):
    """Raised when statistics are requested for an empty payload."""
    pass


class Summary(NamedTuple):
    """Mean, median and spread of one payload."""
    mean: float
    median: float
    spread: float


def _require_samples(data: Sequence[float]) -> int:
    count = len(data)
    if count == 0:
        raise StatisticsError("Cannot compute statistics of an empty payload")
    return count


def mean(data: Sequence[float]) -> float:
    """
    Arithmetic mean: sum(data) / count(data).
    
    Example:
        >>> round(mean([0.2, 0.4, 0.6]), 12)
        0.4
    """
    count = _require_samples(data)
    total = 0.0
    for value in data:
        total += value
    return total / count


def median(data: Sequence[float]) -> float:
    """
    Median of the samples.
    
    Sorts a copy, so the caller's ordering survives the call. For an even
    number of samples the two middle values are averaged.
    
    Example:
        >>> median([4, 1, 3, 2])
        2.5
    """
    count = _require_samples(data)
    ordered = sorted(data)
    middle = count // 2
    if count % 2 == 0:
        return (ordered[middle - 1] + ordered[middle]) / 2
    return ordered[middle]


def variance(data: Sequence[float]) -> float:
    """Population variance (divisor is count, not count - 1)."""
    count = _require_samples(data)
    centre = mean(data)
    squared_diff = 0.0
    for value in data:
        squared_diff += (value - centre) * (value - centre)
    return squared_diff / count


def spread(data: Sequence[float]) -> float:
    """Twice the population standard deviation."""
    return 2 * math.sqrt(variance(data))


def summarize(data: Sequence[float]) -> Summary:
    """Compute mean, median and spread from the same, untouched payload."""
    return Summary(mean=mean(data), median=median(data), spread=spread(data))
