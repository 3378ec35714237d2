"""
Metrics Registry Protocol.

Defines the abstract interface the reporter consumes from a metrics
registry. The reporter owns no metrics: it only enumerates the
registered (name, metric) pairs and asks each metric for a snapshot.

Design Notes:
    - Uses typing.Protocol for structural subtyping
    - Any registry offering ``each()`` works, not only MetricsRegistry
    - Snapshots must be immutable and captured atomically per metric
"""

from __future__ import annotations

from typing import Any, Callable, Protocol, runtime_checkable

from metrics_clickhouse.metrics.snapshots import MetricKind


@runtime_checkable
class MetricsRegistryProtocol(Protocol):
    """Abstract interface for metric enumeration."""

    def each(self, callback: Callable[[str, Any], None]) -> None:
        """
        Invoke callback once per registered metric.

        Args:
            callback: Called with (name, metric)
        """
        ...


@runtime_checkable
class SnapshotProtocol(Protocol):
    """Read-only statistics of one metric at one instant."""

    @property
    def kind(self) -> MetricKind:
        """Kind used to select the flattening rule."""
        ...


@runtime_checkable
class SnapshottingMetric(Protocol):
    """A metric that can hand out a snapshot."""

    def snapshot(self) -> SnapshotProtocol:
        """Capture current statistics."""
        ...
