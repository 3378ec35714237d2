"""
Pytest Configuration and Shared Fixtures.

This module contains fixtures available to all tests.
"""

from __future__ import annotations

import random
from datetime import datetime, timezone
from pathlib import Path

import pytest

from metrics_clickhouse.adapters.batch_writer import BatchWriter
from metrics_clickhouse.adapters.clickhouse_connection import ClickHouseConnectionManager
from metrics_clickhouse.config.models import ReporterConfig
from metrics_clickhouse.metrics.registry import MetricsRegistry
from tests.fixtures.fake_clickhouse import FakeClickHouseServer


@pytest.fixture(autouse=True)
def set_random_seed():
    """Ensure all tests are deterministic."""
    random.seed(42)
    yield


@pytest.fixture
def sample_config_path() -> Path:
    """Path to sample configuration file."""
    return Path(__file__).parent / "fixtures" / "sample_config.yaml"


@pytest.fixture
def base_tags_mapping() -> dict:
    """Tags attached to every exported row."""
    return {"node_id": "1234", "node_name": "node001"}


@pytest.fixture
def reporter_config(base_tags_mapping: dict) -> ReporterConfig:
    """Reporter configuration without alignment."""
    return ReporterConfig(
        address="localhost:9000",
        database="metrics",
        table="app",
        flush_interval=10,
        align=False,
        tags=base_tags_mapping,
    )


@pytest.fixture
def fake_server() -> FakeClickHouseServer:
    """In-memory ClickHouse server."""
    return FakeClickHouseServer()


@pytest.fixture
def connections(
    reporter_config: ReporterConfig,
    fake_server: FakeClickHouseServer,
) -> ClickHouseConnectionManager:
    """Connection manager wired to the fake server (not yet connected)."""
    return ClickHouseConnectionManager(
        reporter_config, client_factory=fake_server.client_factory
    )


@pytest.fixture
def writer(
    connections: ClickHouseConnectionManager,
    reporter_config: ReporterConfig,
) -> BatchWriter:
    """Batch writer targeting metrics.app."""
    return BatchWriter(connections, reporter_config.database, reporter_config.table)


@pytest.fixture
def registry() -> MetricsRegistry:
    """Empty metrics registry."""
    return MetricsRegistry()


@pytest.fixture
def reference_time() -> datetime:
    """Standard wall-clock time for testing."""
    return datetime(2024, 12, 15, 10, 30, 17, 250000, tzinfo=timezone.utc)
