"""
Adapters Package - Infrastructure Implementations.

Concrete implementations talking to ClickHouse:

    - ClickHouseConnectionManager: owns the live native-protocol client
    - BatchWriter: one atomic insert per flush cycle
    - InsertTransaction: client-side buffered block insert

Design Principles:
    - Adapters implement the protocols in the interfaces package
    - Easily swappable via Dependency Injection (client and
      transaction factories)
"""

from metrics_clickhouse.adapters.batch_writer import (
    BatchWriter,
    InsertTransaction,
    TransactionClosedError,
)
from metrics_clickhouse.adapters.clickhouse_connection import ClickHouseConnectionManager

__all__ = [
    "ClickHouseConnectionManager",
    "BatchWriter",
    "InsertTransaction",
    "TransactionClosedError",
]
