"""
Reporter Package - Public Entry Points.

    report_to_clickhouse(registry, interval, address, database, table,
                         username, password, align)
    report_to_clickhouse_with_tags(..., tags, align)

Both block for the rest of the process. Run them on a thread of your
own, or use ClickHouseReporter.start() for a stoppable background
reporter.
"""

from __future__ import annotations

import logging
from datetime import timedelta
from typing import Mapping, Union

from metrics_clickhouse.config.models import ReporterConfig
from metrics_clickhouse.interfaces.registry import MetricsRegistryProtocol
from metrics_clickhouse.reporter.clickhouse_reporter import (
    ClickHouseReporter,
    PeriodicTimer,
)
from metrics_clickhouse.resilience.errors import StartupConnectionError

logger = logging.getLogger(__name__)

Interval = Union[float, timedelta]


def report_to_clickhouse(
    registry: MetricsRegistryProtocol,
    interval: Interval,
    address: str,
    database: str,
    table: str,
    username: str,
    password: str,
    align: bool,
) -> None:
    """
    Export the registry to ClickHouse every ``interval``.

    Args:
        registry: Registry to export
        interval: Flush interval (seconds or timedelta)
        address: ``host:port`` of the native protocol (TCP) port
        database: Target database, created if missing
        table: Target table, created if missing
        username: Optional user, used only together with password
        password: Optional password
        align: Truncate row timestamps to a multiple of interval
    """
    report_to_clickhouse_with_tags(
        registry, interval, address, database, table, username, password, {}, align
    )


def report_to_clickhouse_with_tags(
    registry: MetricsRegistryProtocol,
    interval: Interval,
    address: str,
    database: str,
    table: str,
    username: str,
    password: str,
    tags: Mapping[str, str],
    align: bool,
) -> None:
    """
    Export the registry to ClickHouse every ``interval`` with extra tags.

    Same as report_to_clickhouse; every row additionally carries the
    given tags as ``key=value`` strings. Returns only if the initial
    connection fails.
    """
    config = ReporterConfig(
        address=address,
        database=database,
        table=table,
        username=username,
        password=password,
        flush_interval=interval,
        align=align,
        tags=dict(tags),
    )
    reporter = ClickHouseReporter(registry, config)
    try:
        reporter.run_forever()
    except StartupConnectionError as e:
        logger.error(f"Unable to make ClickHouse client: {e}")


__all__ = [
    "ClickHouseReporter",
    "PeriodicTimer",
    "report_to_clickhouse",
    "report_to_clickhouse_with_tags",
]
