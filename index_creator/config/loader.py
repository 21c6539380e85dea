from __future__ import annotations

import json
import os
from pathlib import Path
from typing import Any

import jsonschema
import yaml
from jsonschema.exceptions import ValidationError

from ..models.config_models import IndexerConfig

"""Config loader.

Responsibilities:
- Locate the YAML config (``--config`` > ``INDEXER_CONFIG`` env > default path)
- Validate it against ``config_schema.json`` (shipped beside this module)
- Apply defaults and map ``auto`` values to None (auto-detect)
"""

__all__ = [
    "ConfigError",
    "DEFAULT_CONFIG_PATH",
    "CONFIG_ENV_VAR",
    "SCHEMA_PATH",
    "resolve_config_path",
    "load_config",
]

DEFAULT_CONFIG_PATH = Path("config/indexer.yml")
CONFIG_ENV_VAR = "INDEXER_CONFIG"
SCHEMA_PATH = Path(__file__).with_name("config_schema.json")


class ConfigError(Exception):
    pass


def resolve_config_path(explicit: str | None = None) -> Path:
    if explicit:
        return Path(explicit)
    env_value = os.getenv(CONFIG_ENV_VAR)
    if env_value:
        return Path(env_value)
    return DEFAULT_CONFIG_PATH


def _validate_config_schema(data: dict[str, Any]) -> None:
    """Validate config data against the JSON schema.

    Raises:
        ConfigError: If the schema file is missing or unreadable, or the config
            data fails validation (missing ``source_directory``, unknown keys,
            wrong types or enum values).
    """
    if not SCHEMA_PATH.exists():
        raise ConfigError(f"config schema not found: {SCHEMA_PATH}")

    try:
        schema = json.loads(SCHEMA_PATH.read_text(encoding="utf-8"))
        jsonschema.validate(data, schema)
    except json.JSONDecodeError as e:
        raise ConfigError(f"invalid schema file: {e}") from e
    except ValidationError as e:
        raise ConfigError(f"config validation failed: {e.message}") from e


def _auto(value: Any) -> Any:
    return None if value == "auto" else value


def load_config(path: Path) -> IndexerConfig:
    if not path.exists():
        raise ConfigError(f"config file not found: {path}")
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    except yaml.YAMLError as e:
        raise ConfigError(f"invalid yaml: {e}") from e
    if not isinstance(data, dict):
        raise ConfigError(f"config root must be a mapping, got {type(data).__name__}")

    _validate_config_schema(data)

    return IndexerConfig(
        source_directory=data["source_directory"],
        output_directory=data.get("output_directory", "./output"),
        input_format=_auto(data.get("input_format", "auto")),
        has_header=_auto(data.get("has_header", "auto")),
        exports=tuple(data.get("exports", ("json", "csv"))),
        collapsed=data.get("collapsed"),
        dividers=data.get("dividers"),
        log_directory=data.get("log_directory", "./logs"),
    )
