"""
Configuration Models - Pydantic Models for Type-Safe Config.

All configuration is validated at construction time using Pydantic.
A ReporterConfig is frozen: one reporter instance keeps the same
settings for its whole lifetime.
"""

from __future__ import annotations

from datetime import timedelta
from typing import Dict, Tuple

from pydantic import BaseModel, Field, field_validator

from metrics_clickhouse.domain.value_objects import make_tags

DEFAULT_NATIVE_PORT = 9000


class ReporterConfig(BaseModel):
    """Settings for one ClickHouse reporter."""

    address: str = Field(default="localhost:9000", min_length=1)
    database: str = Field(min_length=1)
    table: str = Field(min_length=1)
    username: str = ""
    password: str = ""
    flush_interval: float = Field(default=10.0, gt=0, description="Seconds")
    align: bool = False
    tags: Dict[str, str] = Field(default_factory=dict)
    health_check_interval: float = Field(default=5.0, gt=0, description="Seconds")
    connect_timeout: float = Field(default=10.0, gt=0, description="Seconds")

    model_config = {"frozen": True}

    @field_validator("flush_interval", "health_check_interval", mode="before")
    @classmethod
    def _accept_timedelta(cls, value):
        if isinstance(value, timedelta):
            return value.total_seconds()
        return value

    @field_validator("address")
    @classmethod
    def _validate_address(cls, value: str) -> str:
        host, sep, port = value.rpartition(":")
        if not sep:
            return value
        if not host:
            raise ValueError(f"address is missing a host: {value!r}")
        if not port.isdigit() or not 0 < int(port) < 65536:
            raise ValueError(f"address has an invalid port: {value!r}")
        return value

    @field_validator("database", "table")
    @classmethod
    def _validate_identifier(cls, value: str) -> str:
        # Interpolated into DDL and INSERT statements.
        if not all(ch.isalnum() or ch == "_" for ch in value):
            raise ValueError(f"identifier must be alphanumeric or '_': {value!r}")
        return value

    @property
    def host(self) -> str:
        """Host part of the address."""
        host, sep, _ = self.address.rpartition(":")
        return host if sep else self.address

    @property
    def port(self) -> int:
        """Native protocol port, 9000 when the address has none."""
        _, sep, port = self.address.rpartition(":")
        return int(port) if sep else DEFAULT_NATIVE_PORT

    @property
    def interval(self) -> timedelta:
        """Flush interval as a timedelta."""
        return timedelta(seconds=self.flush_interval)

    @property
    def qualified_table(self) -> str:
        """``database.table`` as used in statements."""
        return f"{self.database}.{self.table}"

    @property
    def base_tags(self) -> Tuple[str, ...]:
        """Configured tags rendered as ``key=value`` strings."""
        return make_tags(self.tags)

    @property
    def has_credentials(self) -> bool:
        """True when both username and password are set."""
        return bool(self.username) and bool(self.password)
