"""
ClickHouse Reporter - Periodic Export Loop.

Drives two independent timers on one thread:
    - flush timer (config.flush_interval): snapshot every metric,
      flatten to rows, write them as one transaction
    - health timer (config.health_check_interval): ping the store,
      reconnect on failure

Design Notes:
    - Flush and health check never run concurrently
    - Missed ticks are dropped, not replayed
    - Flush and reconnect failures are logged and the loop continues
    - SchemaBootstrapError ends the loop
"""

from __future__ import annotations

import logging
import threading
import time
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Callable, Optional

from metrics_clickhouse.adapters.batch_writer import BatchWriter
from metrics_clickhouse.adapters.clickhouse_connection import ClickHouseConnectionManager
from metrics_clickhouse.config.models import ReporterConfig
from metrics_clickhouse.domain.value_objects import align_timestamp
from metrics_clickhouse.flattening.flattener import MetricFlattener
from metrics_clickhouse.interfaces.registry import MetricsRegistryProtocol
from metrics_clickhouse.observability.health_monitor import (
    ConnectionHealthMonitor,
    HealthStatus,
)
from metrics_clickhouse.resilience.errors import (
    FlushCycleError,
    SchemaBootstrapError,
    StartupConnectionError,
    StoreConnectionError,
)

logger = logging.getLogger(__name__)


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class PeriodicTimer:
    """Deadline tracker for one fixed-period tick."""
    period: float
    next_due: float

    def is_due(self, now: float) -> bool:
        return now >= self.next_due

    def advance(self, now: float) -> None:
        """Move to the first deadline after ``now``, skipping missed ticks."""
        self.next_due += self.period
        if self.next_due <= now:
            missed = int((now - self.next_due) // self.period) + 1
            self.next_due += missed * self.period


class ClickHouseReporter:
    """
    Exports one metrics registry to one ClickHouse table.

    Usage:
        reporter = ClickHouseReporter(registry, config)
        thread = reporter.start()
        ...
        reporter.stop()
    """

    def __init__(
        self,
        registry: MetricsRegistryProtocol,
        config: ReporterConfig,
        connections: Optional[ClickHouseConnectionManager] = None,
        writer: Optional[BatchWriter] = None,
        clock: Callable[[], datetime] = utc_now,
        monotonic: Callable[[], float] = time.monotonic,
    ) -> None:
        """
        Initialize reporter.

        Args:
            registry: Registry to enumerate on every flush
            config: Immutable reporter configuration
            connections: Connection manager (built from config if omitted)
            writer: Batch writer (built from config if omitted)
            clock: Wall clock for row timestamps
            monotonic: Clock driving the timers
        """
        self.registry = registry
        self.config = config
        self.connections = connections or ClickHouseConnectionManager(config)
        self.writer = writer or BatchWriter(
            self.connections, config.database, config.table
        )
        self.flattener = MetricFlattener(config.base_tags)
        self.health_monitor = ConnectionHealthMonitor(self.connections)
        self._clock = clock
        self._monotonic = monotonic
        self._stop_event = threading.Event()
        self._thread: Optional[threading.Thread] = None
        self._flush_timer: Optional[PeriodicTimer] = None
        self._health_timer: Optional[PeriodicTimer] = None

    def cycle_timestamp(self) -> datetime:
        """Timestamp for the rows of the current cycle."""
        now = self._clock()
        if self.config.align:
            return align_timestamp(now, self.config.interval)
        return now

    def flush(self) -> int:
        """
        Run one flush cycle.

        Returns:
            Number of rows written

        Raises:
            FlushCycleError: If snapshotting or writing failed
        """
        timestamp = self.cycle_timestamp()
        try:
            rows = self.flattener.flatten_registry(self.registry, timestamp)
        except Exception as e:
            raise FlushCycleError(f"Unable to snapshot metrics: {e}") from e

        try:
            return self.writer.write(rows)
        except Exception as e:
            raise FlushCycleError(
                f"Unable to send {len(rows)} metrics to ClickHouse: {e}",
                row_count=len(rows),
            ) from e

    def check_health(self) -> HealthStatus:
        """Ping the store and reconnect if it did not answer."""
        return self.health_monitor.check()

    def connect(self) -> None:
        """
        Open the initial connection.

        Raises:
            StartupConnectionError: If the store cannot be reached
            SchemaBootstrapError: If the schema cannot be created
        """
        try:
            self.connections.connect()
        except StoreConnectionError as e:
            raise StartupConnectionError(
                f"Unable to make ClickHouse client for {self.config.address}: {e}"
            ) from e

    def run_forever(self) -> None:
        """
        Connect, then run the export loop until stop() is called.

        Raises:
            StartupConnectionError: If the initial connection fails
            SchemaBootstrapError: If the schema cannot be created
        """
        try:
            self.connect()
            self._reset_timers(self._monotonic())
            while not self._stop_event.is_set():
                if self._stop_event.wait(self._seconds_until_next_tick()):
                    break
                self.run_pending(self._monotonic())
        except SchemaBootstrapError as e:
            logger.critical(f"Stopping ClickHouse reporter: {e}")
            raise
        finally:
            self.connections.close()

    def run_pending(self, now: float) -> None:
        """
        Run every tick due at ``now``.

        Flush runs before the health check when both are due.

        Raises:
            SchemaBootstrapError: If a reconnect cannot create the schema
        """
        if self._flush_timer is None or self._health_timer is None:
            self._reset_timers(now)

        if self._flush_timer.is_due(now):
            self._on_flush_tick()
            self._flush_timer.advance(self._monotonic())

        if self._health_timer.is_due(now):
            self._on_health_tick()
            self._health_timer.advance(self._monotonic())

    def start(self) -> threading.Thread:
        """Run the reporter on a background daemon thread."""
        if self._thread is not None and self._thread.is_alive():
            raise RuntimeError("Reporter already running")
        self._stop_event.clear()
        self._thread = threading.Thread(
            target=self.run_forever,
            name=f"clickhouse-reporter-{self.config.qualified_table}",
            daemon=True,
        )
        self._thread.start()
        return self._thread

    def stop(self, timeout: Optional[float] = None) -> None:
        """Ask the loop to exit and wait for the background thread."""
        self._stop_event.set()
        if self._thread is not None and self._thread is not threading.current_thread():
            self._thread.join(timeout)

    @property
    def is_running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def _reset_timers(self, now: float) -> None:
        self._flush_timer = PeriodicTimer(
            period=self.config.flush_interval,
            next_due=now + self.config.flush_interval,
        )
        self._health_timer = PeriodicTimer(
            period=self.config.health_check_interval,
            next_due=now + self.config.health_check_interval,
        )

    def _seconds_until_next_tick(self) -> float:
        due = min(self._flush_timer.next_due, self._health_timer.next_due)
        return max(0.0, due - self._monotonic())

    def _on_flush_tick(self) -> None:
        try:
            written = self.flush()
        except FlushCycleError as e:
            logger.error(f"Flush cycle failed: {e}")
        else:
            logger.debug(f"Sent {written} rows to {self.config.qualified_table}")

    def _on_health_tick(self) -> None:
        status = self.check_health()
        if not status.is_healthy:
            logger.warning(
                f"ClickHouse at {self.config.address} still unreachable, "
                f"retrying in {self.config.health_check_interval:g}s"
            )
