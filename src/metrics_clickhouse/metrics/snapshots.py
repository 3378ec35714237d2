"""
Metric Snapshots - Immutable Read-Only Statistics.

Every instrument hands out one of these from ``snapshot()``. A snapshot
is captured under the instrument's lock, so a reporter reading it never
sees a half-applied update.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from enum import Enum
from typing import ClassVar, List, Sequence, Tuple


class MetricKind(Enum):
    """Closed set of exportable metric kinds."""
    COUNTER = "counter"
    GAUGE = "gauge"
    GAUGE_FLOAT64 = "gauge_float64"
    HISTOGRAM = "histogram"
    METER = "meter"
    TIMER = "timer"


def sample_percentiles(values: Sequence[float], ps: Sequence[float]) -> List[float]:
    """
    Interpolated percentiles of a sample.

    Uses the (n + 1) rank convention; positions outside the sample
    clamp to the smallest or largest value.

    Args:
        values: Sample values, any order
        ps: Percentiles as fractions (0.5 for the median)

    Returns:
        One value per requested percentile, all 0.0 for an empty sample
    """
    ordered = sorted(values)
    size = len(ordered)
    if size == 0:
        return [0.0 for _ in ps]

    scores = []
    for p in ps:
        pos = p * (size + 1)
        if pos < 1.0:
            scores.append(float(ordered[0]))
        elif pos >= size:
            scores.append(float(ordered[-1]))
        else:
            lower = ordered[int(pos) - 1]
            upper = ordered[int(pos)]
            scores.append(lower + (pos - math.floor(pos)) * (upper - lower))
    return scores


@dataclass(frozen=True)
class CounterSnapshot:
    kind: ClassVar[MetricKind] = MetricKind.COUNTER
    count: int = 0


@dataclass(frozen=True)
class GaugeSnapshot:
    kind: ClassVar[MetricKind] = MetricKind.GAUGE
    value: int = 0


@dataclass(frozen=True)
class GaugeFloat64Snapshot:
    kind: ClassVar[MetricKind] = MetricKind.GAUGE_FLOAT64
    value: float = 0.0


@dataclass(frozen=True)
class SampleStats:
    """Summary statistics over a histogram sample."""
    count: int = 0
    values: Tuple[float, ...] = ()

    @property
    def max(self) -> float:
        return max(self.values) if self.values else 0.0

    @property
    def min(self) -> float:
        return min(self.values) if self.values else 0.0

    @property
    def mean(self) -> float:
        if not self.values:
            return 0.0
        return sum(self.values) / len(self.values)

    @property
    def variance(self) -> float:
        """Population variance of the sample."""
        if not self.values:
            return 0.0
        mean = self.mean
        return sum((v - mean) ** 2 for v in self.values) / len(self.values)

    @property
    def stddev(self) -> float:
        return math.sqrt(self.variance)

    def percentiles(self, ps: Sequence[float]) -> List[float]:
        return sample_percentiles(self.values, ps)


@dataclass(frozen=True)
class HistogramSnapshot(SampleStats):
    kind: ClassVar[MetricKind] = MetricKind.HISTOGRAM


@dataclass(frozen=True)
class MeterSnapshot:
    """Rates are events per second."""
    kind: ClassVar[MetricKind] = MetricKind.METER
    count: int = 0
    rate1: float = 0.0
    rate5: float = 0.0
    rate15: float = 0.0
    rate_mean: float = 0.0


@dataclass(frozen=True)
class TimerSnapshot(SampleStats):
    """Histogram of durations plus the meter of timing events."""
    kind: ClassVar[MetricKind] = MetricKind.TIMER
    rate1: float = 0.0
    rate5: float = 0.0
    rate15: float = 0.0
    rate_mean: float = 0.0
