"""
ClickHouse Connection Manager - Owns the Live Store Session.

Opens native-protocol connections, bootstraps the metrics schema and
probes liveness. Exactly one client is current at any time; a
reconnect only replaces it once the new client is fully usable.

Schema:
    CREATE TABLE IF NOT EXISTS <database>.<table>
    (
        time  DateTime CODEC(DoubleDelta, LZ4),
        name  String CODEC(LZ4),
        tags  Array(String) CODEC(LZ4),
        value Float32
    ) ENGINE = MergeTree()
      ORDER BY (time, name)
"""

from __future__ import annotations

import logging
import threading
from typing import Any, Callable, Dict, Optional

from clickhouse_driver import Client
from clickhouse_driver.errors import Error as DriverError

from metrics_clickhouse.config.models import ReporterConfig
from metrics_clickhouse.interfaces.store import StoreClientProtocol
from metrics_clickhouse.resilience.errors import (
    SchemaBootstrapError,
    StoreConnectionError,
)

logger = logging.getLogger(__name__)

PING_QUERY = "SELECT 1"

CREATE_DATABASE_TEMPLATE = "CREATE DATABASE IF NOT EXISTS {database}"

CREATE_TABLE_TEMPLATE = """
CREATE TABLE IF NOT EXISTS {database}.{table}
(
    time DateTime CODEC(DoubleDelta, LZ4),
    name String CODEC(LZ4),
    tags Array(String) CODEC(LZ4),
    value Float32
) ENGINE = MergeTree()
  ORDER BY (time, name)
"""

# Errors a broken or unreachable server can surface through the driver
CONNECTION_ERRORS = (DriverError, OSError, EOFError)

ClientFactory = Callable[..., StoreClientProtocol]


class ClickHouseConnectionManager:
    """
    Holds the single live ClickHouse client of one reporter.

    Features:
        - connect(): open, probe, bootstrap schema, then swap in
        - ping(): side-effect free liveness probe
        - Thread-safe handle replacement
    """

    def __init__(
        self,
        config: ReporterConfig,
        client_factory: Optional[ClientFactory] = None,
    ) -> None:
        """
        Initialize connection manager.

        Args:
            config: Reporter configuration (address, credentials, schema)
            client_factory: Callable building a client from keyword
                arguments, clickhouse_driver.Client by default
        """
        self.config = config
        self._client_factory = client_factory or Client
        self._client: Optional[StoreClientProtocol] = None
        self._lock = threading.Lock()

    @property
    def client(self) -> StoreClientProtocol:
        """
        Current live client.

        Raises:
            StoreConnectionError: If connect() never succeeded
        """
        with self._lock:
            if self._client is None:
                raise StoreConnectionError(
                    f"No ClickHouse connection to {self.config.address}"
                )
            return self._client

    @property
    def is_connected(self) -> bool:
        with self._lock:
            return self._client is not None

    def connect(self) -> StoreClientProtocol:
        """
        Open a new client and make it current.

        The previous client, if any, stays current until the new one has
        answered a probe and the schema exists; it is then disconnected.

        Returns:
            The new current client

        Raises:
            StoreConnectionError: If the server cannot be reached
            SchemaBootstrapError: If the database or table cannot be created
        """
        client = self._client_factory(**self._client_options())

        try:
            client.execute(PING_QUERY)
        except CONNECTION_ERRORS as e:
            self._discard(client)
            raise StoreConnectionError(
                f"Unable to connect to ClickHouse at {self.config.address}: {e}"
            ) from e

        try:
            self._bootstrap_schema(client)
        except CONNECTION_ERRORS as e:
            self._discard(client)
            raise SchemaBootstrapError(
                f"Unable to create {self.config.qualified_table} on "
                f"{self.config.address}: {e}"
            ) from e

        with self._lock:
            previous, self._client = self._client, client

        if previous is not None:
            self._discard(previous)
        logger.info(
            f"Connected to ClickHouse at {self.config.address} "
            f"(table={self.config.qualified_table})"
        )
        return client

    def ping(self) -> bool:
        """
        Probe the current client.

        Returns:
            True if the server answered, False otherwise
        """
        with self._lock:
            client = self._client
        if client is None:
            return False

        try:
            client.execute(PING_QUERY)
        except CONNECTION_ERRORS as e:
            logger.debug(f"Ping to {self.config.address} failed: {e}")
            return False
        return True

    def close(self) -> None:
        """Disconnect and forget the current client."""
        with self._lock:
            client, self._client = self._client, None
        if client is not None:
            self._discard(client)

    def _client_options(self) -> Dict[str, Any]:
        options: Dict[str, Any] = {
            "host": self.config.host,
            "port": self.config.port,
            "connect_timeout": self.config.connect_timeout,
        }
        if self.config.has_credentials:
            options["user"] = self.config.username
            options["password"] = self.config.password
        return options

    def _bootstrap_schema(self, client: StoreClientProtocol) -> None:
        client.execute(
            CREATE_DATABASE_TEMPLATE.format(database=self.config.database)
        )
        client.execute(
            CREATE_TABLE_TEMPLATE.format(
                database=self.config.database,
                table=self.config.table,
            )
        )

    def _discard(self, client: StoreClientProtocol) -> None:
        try:
            client.disconnect()
        except CONNECTION_ERRORS as e:
            logger.warning(f"Error while disconnecting from {self.config.address}: {e}")
