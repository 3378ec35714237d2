"""
Metrics Package - In-Process Metrics Registry.

Instruments updated by application code and read by the reporter:
    - Counter, Gauge, GaugeFloat64
    - Histogram (uniform reservoir sample)
    - Meter (1/5/15 minute EWMA rates)
    - Timer (histogram of durations plus meter)

Every instrument exposes ``snapshot()`` returning an immutable snapshot
tagged with its MetricKind.
"""

from metrics_clickhouse.metrics.instruments import (
    Counter,
    Gauge,
    GaugeFloat64,
    Histogram,
    Meter,
    Timer,
    UniformSample,
)
from metrics_clickhouse.metrics.registry import DuplicateMetricError, MetricsRegistry
from metrics_clickhouse.metrics.snapshots import (
    CounterSnapshot,
    GaugeFloat64Snapshot,
    GaugeSnapshot,
    HistogramSnapshot,
    MeterSnapshot,
    MetricKind,
    TimerSnapshot,
)

__all__ = [
    "MetricsRegistry",
    "DuplicateMetricError",
    "MetricKind",
    "Counter",
    "Gauge",
    "GaugeFloat64",
    "Histogram",
    "Meter",
    "Timer",
    "UniformSample",
    "CounterSnapshot",
    "GaugeSnapshot",
    "GaugeFloat64Snapshot",
    "HistogramSnapshot",
    "MeterSnapshot",
    "TimerSnapshot",
]
