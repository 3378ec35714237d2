"""
Flattening Package - Metric Snapshots to Rows.
"""

from metrics_clickhouse.flattening.flattener import (
    HISTOGRAM_BUCKETS,
    METER_BUCKETS,
    TIMER_BUCKETS,
    MetricFlattener,
)

__all__ = [
    "MetricFlattener",
    "HISTOGRAM_BUCKETS",
    "METER_BUCKETS",
    "TIMER_BUCKETS",
]
