"""
Value Objects for Domain Layer.

Value objects are immutable objects that describe one exported
observation. Rows are rebuilt every flush cycle and never modified.
"""

from __future__ import annotations

import struct
from datetime import datetime, timedelta, timezone
from typing import List, Mapping, Tuple

from pydantic import BaseModel, Field, field_validator


# =============================================================================
# Type Aliases for improved readability
# =============================================================================

# Tags rendered as "key=value", insertion ordered
TagSet = Tuple[str, ...]

# All rows produced by one flush cycle
RowBatch = List["MetricRow"]

_EPOCH_UTC = datetime(1970, 1, 1, tzinfo=timezone.utc)
_EPOCH_NAIVE = datetime(1970, 1, 1)
_MICROSECOND = timedelta(microseconds=1)


def to_float32(value: float) -> float:
    """Round a number to the nearest 32-bit float."""
    return struct.unpack("f", struct.pack("f", float(value)))[0]


class MetricRow(BaseModel):
    """One observation as stored in the metrics table."""

    timestamp: datetime
    name: str = Field(min_length=1)
    tags: TagSet = Field(default_factory=tuple)
    value: float

    model_config = {"frozen": True}

    @field_validator("value")
    @classmethod
    def _round_to_float32(cls, value: float) -> float:
        return to_float32(value)

    def as_insert_params(self) -> Tuple[datetime, str, List[str], float]:
        """Column values in (time, name, tags, value) order."""
        return (self.timestamp, self.name, list(self.tags), self.value)


def make_tags(tags: Mapping[str, str]) -> TagSet:
    """
    Render a tag mapping as ``key=value`` strings.

    Args:
        tags: Tag mapping, iterated in insertion order

    Returns:
        Tuple of ``key=value`` strings
    """
    return tuple(f"{key}={value}" for key, value in tags.items())


def make_bucket_tags(bucket: str, tags: TagSet) -> TagSet:
    """Return a new tag set with ``bucket=<bucket>`` appended."""
    return tuple(tags) + (f"bucket={bucket}",)


def align_timestamp(moment: datetime, interval: timedelta) -> datetime:
    """
    Truncate a timestamp down to a multiple of the interval.

    Multiples are counted from the Unix epoch in whole microseconds,
    so the result never lies after ``moment``.

    Args:
        moment: Timestamp to truncate (naive or timezone-aware)
        interval: Positive alignment interval

    Returns:
        Aligned timestamp with the same tzinfo as ``moment``

    Raises:
        ValueError: If interval is shorter than one microsecond
    """
    step = interval // _MICROSECOND
    if step <= 0:
        raise ValueError(f"Alignment interval must be positive, got {interval}")

    if moment.tzinfo is None:
        epoch = _EPOCH_NAIVE
        micros = (moment - epoch) // _MICROSECOND
        return epoch + timedelta(microseconds=micros - micros % step)

    micros = (moment - _EPOCH_UTC) // _MICROSECOND
    aligned = _EPOCH_UTC + timedelta(microseconds=micros - micros % step)
    return aligned.astimezone(moment.tzinfo)
