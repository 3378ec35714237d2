"""
Store Client Protocols.

Defines the narrow slice of a ClickHouse native client the reporter
uses, plus the transaction contract of the batch writer. Tests swap
in fakes that satisfy these protocols.

Design Notes:
    - Mirrors clickhouse_driver.Client.execute / disconnect
    - A transaction buffers rows; commit persists all or nothing
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Optional, Protocol, Sequence, runtime_checkable

if TYPE_CHECKING:
    from metrics_clickhouse.domain.value_objects import MetricRow


@runtime_checkable
class StoreClientProtocol(Protocol):
    """Abstract interface for a live store session."""

    def execute(self, query: str, params: Optional[Sequence[Any]] = None) -> Any:
        """
        Run one statement.

        Args:
            query: SQL text; for inserts it ends at ``VALUES``
            params: Row tuples for inserts

        Returns:
            Driver-specific result
        """
        ...

    def disconnect(self) -> None:
        """Close the underlying socket."""
        ...


@runtime_checkable
class TransactionProtocol(Protocol):
    """One all-or-nothing batch of rows."""

    def insert(self, row: "MetricRow") -> None:
        """Add a row to the batch."""
        ...

    def commit(self) -> None:
        """Persist every inserted row."""
        ...

    def rollback(self) -> None:
        """Discard every inserted row."""
        ...
