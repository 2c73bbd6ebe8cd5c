from __future__ import annotations

import json
import os
from pathlib import Path
from typing import Any

import jsonschema
import yaml
from jsonschema.exceptions import ValidationError

from ..models.config_models import ImportConfig
from ..models.field_key import DEFAULT_KEYWORDS, FieldKey, parse_keywords

"""Import configuration persistence (YAML).

Responsibilities:
- Load config/import.yml (defaults when the file does not exist yet)
- Validate it against import_config_schema.json
- Save the whole config after every edit
"""

__all__ = [
    "ConfigError",
    "DEFAULT_CONFIG_PATH",
    "SCHEMA_PATH",
    "load_config",
    "save_config",
    "config_to_dict",
    "config_from_dict",
]

SCHEMA_PATH = Path(__file__).parent / "import_config_schema.json"
DEFAULT_CONFIG_PATH = Path("config/import.yml")


class ConfigError(Exception):
    pass


def _validate_config_schema(data: dict[str, Any]) -> None:
    """Validate config data against the JSON schema.

    Raises:
        ConfigError: schema file missing/invalid, or the data violates it
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


def config_from_dict(data: dict[str, Any]) -> ImportConfig:
    mapping = {
        FieldKey(k): str(v).strip()
        for k, v in (data.get("column_mapping") or {}).items()
        if v is not None and str(v).strip()
    }
    groups = dict(DEFAULT_KEYWORDS)
    for k, v in (data.get("keyword_groups") or {}).items():
        # Either a YAML list or the comma separated text typed by the user
        groups[FieldKey(k)] = parse_keywords(v) if isinstance(v, str) else parse_keywords(",".join(v))
    return ImportConfig(
        source_url=data.get("source_url") or "",
        header_row_number=data.get("header_row_number", 1),
        column_mapping=mapping,
        cached_header_labels=tuple(data.get("cached_header_labels") or ()),
        keyword_groups=groups,
    )


def config_to_dict(config: ImportConfig) -> dict[str, Any]:
    return {
        "source_url": config.source_url,
        "header_row_number": config.header_row_number,
        "column_mapping": {k.value: v for k, v in config.column_mapping.items()},
        "cached_header_labels": list(config.cached_header_labels),
        "keyword_groups": {k.value: list(v) for k, v in config.keyword_groups.items()},
    }


def load_config(path: Path) -> ImportConfig:
    """Load the import configuration; a missing file yields the defaults.

    Raises:
        ConfigError: unreadable YAML or schema violation
    """
    if not path.exists():
        return ImportConfig()
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    except yaml.YAMLError as e:
        raise ConfigError(f"invalid yaml: {e}") from e
    if not isinstance(data, dict):
        raise ConfigError(f"config root must be a mapping: {path}")

    _validate_config_schema(data)
    return config_from_dict(data)


def save_config(path: Path, config: ImportConfig) -> None:
    """Write the configuration (write to a temp file, then rename)."""
    path.parent.mkdir(parents=True, exist_ok=True)
    text = yaml.safe_dump(config_to_dict(config), sort_keys=False, allow_unicode=True)
    tmp = path.with_suffix(path.suffix + ".tmp")
    try:
        tmp.write_text(text, encoding="utf-8")
        os.replace(tmp, path)
    except OSError as e:
        raise ConfigError(f"could not write config {path}: {e}") from e
