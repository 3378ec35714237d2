"""
Unit Tests for ConnectionHealthMonitor.

Test Aspects Covered:
    ✅ Business Logic: Ping, reconnect on failure
    ✅ Error Handling: Failed reconnect keeps old client
    ✅ Integration: Schema failure propagates to caller
"""

from __future__ import annotations

import pytest

from metrics_clickhouse.adapters.clickhouse_connection import ClickHouseConnectionManager
from metrics_clickhouse.observability.health_monitor import (
    ConnectionHealthMonitor,
    HealthCheckResult,
)
from metrics_clickhouse.resilience.errors import SchemaBootstrapError
from tests.fixtures.fake_clickhouse import FakeClickHouseServer


@pytest.fixture
def monitor(connections: ClickHouseConnectionManager) -> ConnectionHealthMonitor:
    connections.connect()
    return ConnectionHealthMonitor(connections)


class TestConnectionHealthMonitor:
    """Test cases for check()."""

    def test_healthy_connection(
        self,
        monitor: ConnectionHealthMonitor,
        fake_server: FakeClickHouseServer,
    ) -> None:
        """
        SCENARIO: Server answers ping
        EXPECTED: Healthy, single passing ping check, no new client
        """
        status = monitor.check()

        assert status.is_healthy
        assert [c.name for c in status.checks] == ["ping"]
        assert status.checks[0].result == HealthCheckResult.PASS
        assert not status.reconnected
        assert len(fake_server.clients) == 1

    def test_failed_ping_triggers_reconnect(
        self,
        monitor: ConnectionHealthMonitor,
        connections: ClickHouseConnectionManager,
        fake_server: FakeClickHouseServer,
    ) -> None:
        """
        SCENARIO: Ping fails but server accepts a new connection
        EXPECTED: New client swapped in, status healthy and reconnected
        """
        # Arrange
        old_client = connections.client
        fake_server.clients[0].execute = _refuse

        # Act
        status = monitor.check()

        # Assert
        assert status.is_healthy
        assert status.reconnected
        assert connections.client is not old_client
        assert old_client.disconnected
        assert status.summary["checks"]["ping"]["result"] == "warn"

    def test_failed_reconnect_keeps_old_client(
        self,
        monitor: ConnectionHealthMonitor,
        connections: ClickHouseConnectionManager,
        fake_server: FakeClickHouseServer,
    ) -> None:
        """
        SCENARIO: Server is down for ping and reconnect
        EXPECTED: Unhealthy status, old client kept, retried on next check
        """
        old_client = connections.client
        fake_server.reachable = False

        first = monitor.check()
        second = monitor.check()

        assert not first.is_healthy
        assert not second.is_healthy
        assert connections.client is old_client
        assert monitor.last_status is second
        assert first.checks[-1].result == HealthCheckResult.FAIL

    def test_recovers_after_outage(
        self,
        monitor: ConnectionHealthMonitor,
        connections: ClickHouseConnectionManager,
        fake_server: FakeClickHouseServer,
    ) -> None:
        """Server back up: the next check reconnects."""
        fake_server.reachable = False
        monitor.check()

        fake_server.reachable = True
        fake_server.clients[0].execute = _refuse
        status = monitor.check()

        assert status.reconnected
        assert connections.ping()

    def test_schema_failure_propagates(
        self,
        monitor: ConnectionHealthMonitor,
        fake_server: FakeClickHouseServer,
    ) -> None:
        """DDL failure during reconnect is not swallowed."""
        fake_server.clients[0].execute = _refuse
        fake_server.fail_ddl = True

        with pytest.raises(SchemaBootstrapError):
            monitor.check()


def _refuse(query, params=None):
    raise ConnectionResetError("connection reset by peer")
