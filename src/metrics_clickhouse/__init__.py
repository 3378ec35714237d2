"""
Metrics ClickHouse - Periodic Metrics Export to ClickHouse.

Exports counters, gauges, histograms, meters and timers from an
in-process metrics registry into a ClickHouse table over the native
protocol. Each flush cycle writes all metrics as one atomic batch; a
separate health check reconnects when the server stops answering.

Architecture:
    - Hexagonal Architecture (Ports & Adapters)
    - Dependency Injection for testability
    - Configuration via Pydantic (optionally loaded from YAML)

Main Components:
    - metrics: In-process registry and instruments
    - domain: Row model, tag helpers, timestamp alignment
    - flattening: Metric snapshots to rows
    - adapters: ClickHouse connection manager and batch writer
    - observability: Connection health checks
    - reporter: Scheduler loop and public entry points
    - config: Configuration models and loaders

Example:
    >>> from metrics_clickhouse import MetricsRegistry, report_to_clickhouse
    >>> registry = MetricsRegistry()
    >>> registry.counter("requests").inc()
    >>> report_to_clickhouse(registry, 10, "localhost:9000", "metrics",
    ...                      "app", "", "", align=True)

"""

import logging

__version__ = "0.1.0"


def configure_logging(
    level: int = logging.INFO,
    format: str = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
) -> None:
    """
    Configure logging for the reporter.

    Call this at application startup to see log messages.
    By default, only WARNING and above are visible.

    Args:
        level: Logging level (default: INFO)
        format: Log message format

    Example:
        >>> import metrics_clickhouse
        >>> metrics_clickhouse.configure_logging(logging.DEBUG)
    """
    logging.basicConfig(
        level=level,
        format=format,
        datefmt="%Y-%m-%d %H:%M:%S",
    )
    logging.getLogger("metrics_clickhouse").setLevel(level)


from metrics_clickhouse.config import ReporterConfig, load_config  # noqa: E402
from metrics_clickhouse.metrics import MetricsRegistry  # noqa: E402
from metrics_clickhouse.reporter import (  # noqa: E402
    ClickHouseReporter,
    report_to_clickhouse,
    report_to_clickhouse_with_tags,
)

__all__ = [
    "ClickHouseReporter",
    "MetricsRegistry",
    "ReporterConfig",
    "configure_logging",
    "load_config",
    "report_to_clickhouse",
    "report_to_clickhouse_with_tags",
]
