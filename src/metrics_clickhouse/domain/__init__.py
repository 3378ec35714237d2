"""
Domain Layer - Row Model.

    - MetricRow: one (timestamp, name, tags, value) observation
    - Tag helpers: make_tags, make_bucket_tags
    - align_timestamp: flush timestamp truncation
"""

from metrics_clickhouse.domain.value_objects import (
    MetricRow,
    RowBatch,
    TagSet,
    align_timestamp,
    make_bucket_tags,
    make_tags,
    to_float32,
)

__all__ = [
    "MetricRow",
    "RowBatch",
    "TagSet",
    "align_timestamp",
    "make_bucket_tags",
    "make_tags",
    "to_float32",
]
