"""
Health Monitor - Store Connection Health Checks.

Runs the periodic liveness probe of the reporter:
    - Ping the current ClickHouse client
    - On failure, rebuild the client in place
    - Report the outcome as a HealthStatus

Design Notes:
    - A failed reconnect keeps the previous client; the next check
      tries again (fixed interval, no backoff)
    - SchemaBootstrapError is not handled here and reaches the caller
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, List, Optional

from metrics_clickhouse.adapters.clickhouse_connection import ClickHouseConnectionManager
from metrics_clickhouse.resilience.errors import StoreConnectionError

logger = logging.getLogger(__name__)


class HealthCheckResult(Enum):
    """Result of a health check."""
    PASS = "pass"
    WARN = "warn"
    FAIL = "fail"


@dataclass
class HealthCheck:
    """Individual health check result."""
    name: str
    result: HealthCheckResult
    message: str


@dataclass
class HealthStatus:
    """Overall health status."""
    is_healthy: bool
    checks: List[HealthCheck] = field(default_factory=list)
    timestamp: str = ""

    def __post_init__(self):
        if not self.timestamp:
            self.timestamp = datetime.now(timezone.utc).isoformat()

    def add_check(self, check: HealthCheck) -> None:
        """Add a health check result."""
        self.checks.append(check)
        if check.result == HealthCheckResult.FAIL:
            self.is_healthy = False

    @property
    def reconnected(self) -> bool:
        """True if this check replaced the client."""
        return any(
            c.name == "reconnect" and c.result == HealthCheckResult.PASS
            for c in self.checks
        )

    @property
    def summary(self) -> Dict[str, Any]:
        """Get summary of health status."""
        return {
            "is_healthy": self.is_healthy,
            "timestamp": self.timestamp,
            "checks": {
                c.name: {"result": c.result.value, "message": c.message}
                for c in self.checks
            },
        }


class ConnectionHealthMonitor:
    """
    Probe the store connection and recover it when the probe fails.

    Checks:
        - ping: server answers on the current client
        - reconnect: only run when ping fails
    """

    def __init__(self, connections: ClickHouseConnectionManager) -> None:
        """
        Initialize health monitor.

        Args:
            connections: Connection manager to probe and rebuild
        """
        self.connections = connections
        self.last_status: Optional[HealthStatus] = None

    def check(self) -> HealthStatus:
        """
        Run one health check.

        Returns:
            HealthStatus; healthy if the ping or the reconnect succeeded

        Raises:
            SchemaBootstrapError: If the reconnect cannot create the schema
        """
        address = self.connections.config.address
        status = HealthStatus(is_healthy=True)

        if self.connections.ping():
            status.add_check(
                HealthCheck("ping", HealthCheckResult.PASS, f"{address} reachable")
            )
            self.last_status = status
            return status

        # A failed ping alone is a warning; only a failed reconnect fails the check
        status.add_check(
            HealthCheck("ping", HealthCheckResult.WARN, f"{address} did not answer ping")
        )
        logger.warning(
            f"Ping to ClickHouse at {address} failed, trying to recreate client"
        )

        try:
            self.connections.connect()
        except StoreConnectionError as e:
            status.add_check(
                HealthCheck("reconnect", HealthCheckResult.FAIL, str(e))
            )
            logger.error(f"Unable to recreate ClickHouse client: {e}")
        else:
            status.add_check(
                HealthCheck("reconnect", HealthCheckResult.PASS, f"reconnected to {address}")
            )
            logger.info(f"Recreated ClickHouse client for {address}")

        self.last_status = status
        return status
