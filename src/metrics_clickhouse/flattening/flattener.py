"""
Metric Flattener - Snapshot to Row Conversion.

Turns one named metric into zero or more MetricRow objects:

    counter        -> <name>.count
    gauge          -> <name>.gauge
    histogram      -> <name>.histogram, one row per bucket
    meter          -> <name>.meter, one row per bucket
    timer          -> <name>.timer, one row per bucket

Multi-bucket kinds tag each row with ``bucket=<stat>`` on a copy of
the base tag set. Unknown kinds produce no rows.
"""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Any, Callable, Dict, Mapping, Union

from metrics_clickhouse.domain.value_objects import (
    MetricRow,
    RowBatch,
    TagSet,
    make_bucket_tags,
)
from metrics_clickhouse.interfaces.registry import (
    MetricsRegistryProtocol,
    SnapshotProtocol,
    SnapshottingMetric,
)
from metrics_clickhouse.metrics.snapshots import MetricKind

logger = logging.getLogger(__name__)

Handler = Callable[[str, SnapshotProtocol, datetime], RowBatch]

PERCENTILES = (0.5, 0.75, 0.95, 0.99, 0.999, 0.9999)
PERCENTILE_LABELS = ("p50", "p75", "p95", "p99", "p999", "p9999")

HISTOGRAM_BUCKETS = (
    "count", "max", "mean", "min", "stddev", "variance",
) + PERCENTILE_LABELS
METER_BUCKETS = ("count", "m1", "m5", "m15", "mean")
TIMER_BUCKETS = HISTOGRAM_BUCKETS + ("m1", "m5", "m15", "meanrate")


def histogram_fields(snapshot: Any) -> Dict[str, float]:
    """Sample statistics shared by histograms and timers."""
    ps = snapshot.percentiles(PERCENTILES)
    fields = {
        "count": float(snapshot.count),
        "max": float(snapshot.max),
        "mean": snapshot.mean,
        "min": float(snapshot.min),
        "stddev": snapshot.stddev,
        "variance": snapshot.variance,
    }
    fields.update(zip(PERCENTILE_LABELS, ps))
    return fields


def meter_fields(snapshot: Any) -> Dict[str, float]:
    return {
        "count": float(snapshot.count),
        "m1": snapshot.rate1,
        "m5": snapshot.rate5,
        "m15": snapshot.rate15,
        "mean": snapshot.rate_mean,
    }


def timer_fields(snapshot: Any) -> Dict[str, float]:
    fields = histogram_fields(snapshot)
    fields.update(
        {
            "m1": snapshot.rate1,
            "m5": snapshot.rate5,
            "m15": snapshot.rate15,
            "meanrate": snapshot.rate_mean,
        }
    )
    return fields


class MetricFlattener:
    """
    Converts metric snapshots into uniform rows.

    One flattener is built per reporter with the reporter's base tags;
    the base tag tuple is shared by every single-value row and copied
    for every bucketed row.
    """

    def __init__(self, base_tags: TagSet = ()) -> None:
        """
        Initialize flattener.

        Args:
            base_tags: ``key=value`` tags attached to every row
        """
        self.base_tags: TagSet = tuple(base_tags)
        self._handlers: Dict[MetricKind, Handler] = {
            MetricKind.COUNTER: self._flatten_counter,
            MetricKind.GAUGE: self._flatten_gauge,
            MetricKind.GAUGE_FLOAT64: self._flatten_gauge,
            MetricKind.HISTOGRAM: self._bucketed("histogram", histogram_fields),
            MetricKind.METER: self._bucketed("meter", meter_fields),
            MetricKind.TIMER: self._bucketed("timer", timer_fields),
        }

    def flatten(
        self,
        name: str,
        metric: Union[SnapshottingMetric, Any],
        timestamp: datetime,
    ) -> RowBatch:
        """
        Flatten one metric.

        Args:
            name: Registered metric name
            metric: Object exposing ``snapshot()``; anything else is skipped
            timestamp: Timestamp shared by every row of the cycle

        Returns:
            Rows for this metric; empty for unrecognized metrics
        """
        if not isinstance(metric, SnapshottingMetric) or not callable(metric.snapshot):
            logger.debug(f"Skipping metric {name}: no snapshot()")
            return []

        snapshot = metric.snapshot()
        if not isinstance(snapshot, SnapshotProtocol):
            logger.debug(f"Skipping metric {name}: snapshot has no kind")
            return []

        handler = self._handlers.get(snapshot.kind)
        if handler is None:
            logger.debug(f"Skipping metric {name}: unsupported kind")
            return []
        return handler(name, snapshot, timestamp)

    def flatten_registry(
        self,
        registry: MetricsRegistryProtocol,
        timestamp: datetime,
    ) -> RowBatch:
        """Flatten every metric in the registry into one batch."""
        rows: RowBatch = []

        def collect(name: str, metric: Any) -> None:
            rows.extend(self.flatten(name, metric, timestamp))

        registry.each(collect)
        return rows

    def _flatten_counter(self, name: str, snapshot: Any, timestamp: datetime) -> RowBatch:
        return [
            MetricRow(
                timestamp=timestamp,
                name=f"{name}.count",
                tags=self.base_tags,
                value=float(snapshot.count),
            )
        ]

    def _flatten_gauge(self, name: str, snapshot: Any, timestamp: datetime) -> RowBatch:
        return [
            MetricRow(
                timestamp=timestamp,
                name=f"{name}.gauge",
                tags=self.base_tags,
                value=float(snapshot.value),
            )
        ]

    def _bucketed(
        self,
        suffix: str,
        fields_of: Callable[[Any], Mapping[str, float]],
    ) -> Handler:
        def flatten_buckets(name: str, snapshot: Any, timestamp: datetime) -> RowBatch:
            row_name = f"{name}.{suffix}"
            return [
                MetricRow(
                    timestamp=timestamp,
                    name=row_name,
                    tags=make_bucket_tags(bucket, self.base_tags),
                    value=value,
                )
                for bucket, value in fields_of(snapshot).items()
            ]

        return flatten_buckets
