"""
Configuration Loader (``ledger_config.loader``).

Reads YAML with PyYAML, deep-merges an override file onto the bundled
defaults and parses the result into ``ledger_config.schema`` dataclasses.
Callers go through ``ledger_config.get_active_config()``.

Failure modes
-------------
* Missing YAML file  -> ``FileNotFoundError`` propagates.
* Malformed YAML  -> ``yaml.YAMLError`` propagates.
* Missing or mistyped keys  -> ``ValueError`` naming the dotted key.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

import yaml

from ledger_config.schema import ExportConfig, LedgerConfig, LoggingConfig

DEFAULTS_PATH = Path(__file__).parent / "defaults.yaml"


def load_yaml_file(path: Path) -> dict[str, Any]:
    """
    Load a single YAML file and return its contents as a dict.

    Raises:
        FileNotFoundError: if the file does not exist.
        yaml.YAMLError: if the file contains invalid YAML.
        ValueError: if the top level is not a mapping.
    """
    with open(path, encoding="utf-8") as f:
        data = yaml.safe_load(f) or {}
    if not isinstance(data, dict):
        raise ValueError(f"{path}: top level must be a mapping, got {type(data).__name__}")
    return data


def deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """New dict with ``override`` merged into ``base``; nested dicts merge key by key."""
    merged = dict(base)
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = deep_merge(merged[key], value)
        else:
            merged[key] = value
    return merged


def _require(data: dict[str, Any], dotted: str, kind: type) -> Any:
    node: Any = data
    for part in dotted.split("."):
        if not isinstance(node, dict) or part not in node:
            raise ValueError(f"Missing configuration key: {dotted}")
        node = node[part]
    if not isinstance(node, kind):
        raise ValueError(
            f"Configuration key {dotted} must be {kind.__name__}, got {type(node).__name__}"
        )
    return node


def _resolve_folder(base: Path, folder: str) -> Path:
    path = Path(folder).expanduser()
    return path if path.is_absolute() else base / path


def parse_config(data: dict[str, Any]) -> LedgerConfig:
    """Build a LedgerConfig from merged YAML data."""
    base = Path(_require(data, "export.base_folder", str)).expanduser()
    return LedgerConfig(
        database_url=_require(data, "database.url", str),
        echo=_require(data, "database.echo", bool),
        logging=LoggingConfig(level=_require(data, "logging.level", str)),
        export=ExportConfig(
            base_folder=base,
            export_folder=_resolve_folder(base, _require(data, "export.export_folder", str)),
            backup_folder=_resolve_folder(base, _require(data, "export.backup_folder", str)),
            label=_require(data, "export.label", str),
        ),
    )


def load_config(config_path: Path | None = None) -> LedgerConfig:
    """Defaults, merged with ``config_path`` when given, parsed."""
    data = load_yaml_file(DEFAULTS_PATH)
    if config_path is not None:
        data = deep_merge(data, load_yaml_file(Path(config_path)))
    return parse_config(data)
