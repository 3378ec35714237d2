"""
Configuration Loader - Reporter Settings from YAML.

Reads the ``reporter`` section of a YAML document into a validated
ReporterConfig:

    reporter:
      address: "localhost:9000"
      database: metrics
      table: app
      flush_interval: 10
      align: true
      tags:
        host: node001

A document without the ``reporter`` key is read as the section itself.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Mapping, Union

import yaml

from metrics_clickhouse.config.models import ReporterConfig

ROOT_KEY = "reporter"


def config_from_mapping(document: Mapping[str, Any]) -> ReporterConfig:
    """
    Validate an already parsed document.

    Raises:
        ValueError: If the ``reporter`` section is not a mapping
        ValidationError: If a setting is invalid
    """
    section = document.get(ROOT_KEY, document)
    if not isinstance(section, Mapping):
        raise ValueError(f"'{ROOT_KEY}' section must be a mapping, got {type(section).__name__}")
    return ReporterConfig.model_validate(dict(section))


def load_config(config_path: Union[str, Path]) -> ReporterConfig:
    """
    Load reporter configuration from a YAML file.

    Args:
        config_path: Path to the YAML file

    Returns:
        Validated ReporterConfig object

    Raises:
        FileNotFoundError: If the file doesn't exist
        ValidationError: If the configuration is invalid
    """
    with open(config_path, encoding="utf-8") as f:
        document = yaml.safe_load(f) or {}
    if not isinstance(document, Mapping):
        raise ValueError(f"{config_path}: expected a YAML mapping")
    return config_from_mapping(document)
