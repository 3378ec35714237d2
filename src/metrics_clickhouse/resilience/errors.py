"""
Reporter Errors - Failure Taxonomy for the Export Loop.

Each class maps to one failure mode of the reporter:
    - StoreConnectionError: network open or probe failed (recoverable)
    - StartupConnectionError: first connect failed, reporter does not start
    - SchemaBootstrapError: database/table DDL failed (fatal)
    - FlushCycleError: snapshot, flatten or write failed (cycle skipped)

Design Notes:
    - Underlying driver exceptions are chained via ``raise ... from``
    - Periodic failures never stop the loop, except SchemaBootstrapError
"""

from __future__ import annotations


class ReporterError(Exception):
    """Base class for all reporter errors."""
    pass


class StoreConnectionError(ReporterError):
    """Raised when a connection to the store cannot be opened or probed."""
    pass


class StartupConnectionError(StoreConnectionError):
    """Raised when the initial connection fails and the reporter cannot start."""
    pass


class SchemaBootstrapError(ReporterError):
    """Raised when the target database or table cannot be created."""
    pass


class FlushCycleError(ReporterError):
    """Raised when one flush cycle fails to snapshot, flatten or write."""

    def __init__(self, message: str, row_count: int = 0) -> None:
        super().__init__(message)
        self.row_count = row_count
