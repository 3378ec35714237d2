"""
Observability Package - Connection Health.

    - ConnectionHealthMonitor: ping, reconnect on failure
    - HealthStatus / HealthCheck / HealthCheckResult: check outcome
"""

from metrics_clickhouse.observability.health_monitor import (
    ConnectionHealthMonitor,
    HealthCheck,
    HealthCheckResult,
    HealthStatus,
)

__all__ = [
    "ConnectionHealthMonitor",
    "HealthCheck",
    "HealthCheckResult",
    "HealthStatus",
]
