"""
Configuration Package - Models and Loader.

    - ReporterConfig: frozen Pydantic model for one reporter
    - load_config: reads the ``reporter`` section of a YAML file

Design Principles:
    - Type-safe via Pydantic
    - Validation on load (fail fast)
"""

from metrics_clickhouse.config.loader import config_from_mapping, load_config
from metrics_clickhouse.config.models import ReporterConfig

__all__ = ["ReporterConfig", "config_from_mapping", "load_config"]
