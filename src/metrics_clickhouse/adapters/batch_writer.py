"""
Batch Writer - One Transaction per Flush Cycle.

Persists all rows of a flush cycle as one unit: either every row is
stored or none is. ClickHouse applies a single native-protocol block
insert atomically, so the transaction buffers rows client-side and
sends them as one block on commit.

Design Notes:
    - Rows are inserted in the order they were produced
    - Any insert or commit failure rolls the whole batch back
    - An empty batch commits without a round trip
"""

from __future__ import annotations

import logging
from typing import Any, Callable, List, Sequence, Tuple

from metrics_clickhouse.adapters.clickhouse_connection import ClickHouseConnectionManager
from metrics_clickhouse.domain.value_objects import MetricRow
from metrics_clickhouse.interfaces.store import StoreClientProtocol, TransactionProtocol

logger = logging.getLogger(__name__)

INSERT_TEMPLATE = "INSERT INTO {database}.{table} (time, name, tags, value) VALUES"

TransactionFactory = Callable[[StoreClientProtocol, str], TransactionProtocol]


class TransactionClosedError(RuntimeError):
    """Raised when a committed or rolled back transaction is reused."""
    pass


class InsertTransaction:
    """Client-side buffered insert committed as one block."""

    def __init__(self, client: StoreClientProtocol, statement: str) -> None:
        self.client = client
        self.statement = statement
        self._pending: List[Tuple[Any, ...]] = []
        self._closed = False

    @property
    def pending_count(self) -> int:
        return len(self._pending)

    def insert(self, row: MetricRow) -> None:
        self._ensure_open()
        self._pending.append(row.as_insert_params())

    def commit(self) -> None:
        self._ensure_open()
        self._closed = True
        if self._pending:
            self.client.execute(self.statement, self._pending)
        self._pending = []

    def rollback(self) -> None:
        self._closed = True
        self._pending = []

    def _ensure_open(self) -> None:
        if self._closed:
            raise TransactionClosedError("Transaction already committed or rolled back")


class BatchWriter:
    """
    Writes one flush cycle's rows to the metrics table.

    Usage:
        writer = BatchWriter(connections, "metrics", "app")
        written = writer.write(rows)
    """

    def __init__(
        self,
        connections: ClickHouseConnectionManager,
        database: str,
        table: str,
        transaction_factory: TransactionFactory = InsertTransaction,
    ) -> None:
        """
        Initialize batch writer.

        Args:
            connections: Source of the current client
            database: Target database
            table: Target table
            transaction_factory: Builds a transaction from (client, statement)
        """
        self.connections = connections
        self.statement = INSERT_TEMPLATE.format(database=database, table=table)
        self._transaction_factory = transaction_factory

    def write(self, rows: Sequence[MetricRow]) -> int:
        """
        Persist rows atomically.

        Args:
            rows: Every row of one flush cycle

        Returns:
            Number of rows committed

        Raises:
            Exception: Whatever the insert or commit raised; nothing from
                the batch is stored in that case
        """
        transaction = self._transaction_factory(self.connections.client, self.statement)
        try:
            for row in rows:
                transaction.insert(row)
            transaction.commit()
        except Exception:
            transaction.rollback()
            logger.debug(f"Rolled back batch of {len(rows)} rows")
            raise

        logger.debug(f"Committed batch of {len(rows)} rows")
        return len(rows)
