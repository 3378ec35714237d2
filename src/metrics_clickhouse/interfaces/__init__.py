"""
Interfaces Layer - Abstract Protocols for Dependencies.

Protocols:
    - MetricsRegistryProtocol: metric enumeration
    - SnapshottingMetric / SnapshotProtocol: per-metric snapshots
    - StoreClientProtocol: live store session
    - TransactionProtocol: all-or-nothing row batch

Design Principles:
    - Use typing.Protocol (not ABC) for Pythonic interfaces
    - Interface Segregation: Small, focused interfaces
"""

from metrics_clickhouse.interfaces.registry import (
    MetricsRegistryProtocol,
    SnapshotProtocol,
    SnapshottingMetric,
)
from metrics_clickhouse.interfaces.store import (
    StoreClientProtocol,
    TransactionProtocol,
)

__all__ = [
    "MetricsRegistryProtocol",
    "SnapshotProtocol",
    "SnapshottingMetric",
    "StoreClientProtocol",
    "TransactionProtocol",
]
