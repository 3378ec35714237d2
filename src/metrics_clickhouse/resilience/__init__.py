"""
Resilience Package - Error Taxonomy.

Exceptions raised by the connection manager, the batch writer and the
reporter loop. The loop decides per class whether a failure is logged and
skipped or ends the reporter.
"""

from metrics_clickhouse.resilience.errors import (
    FlushCycleError,
    ReporterError,
    SchemaBootstrapError,
    StartupConnectionError,
    StoreConnectionError,
)

__all__ = [
    "ReporterError",
    "StoreConnectionError",
    "StartupConnectionError",
    "SchemaBootstrapError",
    "FlushCycleError",
]
