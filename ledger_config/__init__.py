"""
ledger_config -- single public entrypoint for ledger configuration.

Responsibility:
    ``get_active_config()`` is the only way to obtain runtime
    configuration.  It loads the bundled ``defaults.yaml`` and, when given,
    deep-merges an override file on top.

Architecture position:
    Configuration sits above ``ledger_kernel``.  The kernel never imports
    from here; ``ledger_config.bridges`` hands the values to the kernel.

Failure modes:
    - ``FileNotFoundError`` -- override file does not exist.
    - ``yaml.YAMLError`` -- override file is not valid YAML.
    - ``ValueError`` -- a key is missing or has the wrong type.
"""

from __future__ import annotations

from pathlib import Path

from ledger_config.loader import load_config
from ledger_config.schema import ExportConfig, LedgerConfig, LoggingConfig
from ledger_kernel.logging_config import get_logger

_logger = get_logger("config")


def get_active_config(config_path: str | Path | None = None) -> LedgerConfig:
    """The ONLY public configuration entrypoint."""
    config = load_config(Path(config_path) if config_path is not None else None)
    _logger.info(
        "ledger_config_loaded",
        extra={
            "config_path": str(config_path) if config_path is not None else None,
            "database_backend": config.database_url.split(":", 1)[0],
            "export_folder": str(config.export.export_folder),
        },
    )
    return config


__all__ = [
    "ExportConfig",
    "LedgerConfig",
    "LoggingConfig",
    "get_active_config",
]
