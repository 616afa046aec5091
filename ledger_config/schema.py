"""
LedgerConfig schema.

Frozen dataclasses produced by the loader.  Folder paths are already
resolved (``~`` expanded, relative folders anchored at ``base_folder``).
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


@dataclass(frozen=True)
class LoggingConfig:
    level: str = "INFO"

    def __post_init__(self) -> None:
        level = str(self.level).upper()
        if level not in _LOG_LEVELS:
            raise ValueError(f"logging.level must be one of {_LOG_LEVELS}, got {self.level!r}")
        object.__setattr__(self, "level", level)


@dataclass(frozen=True)
class ExportConfig:
    """Where snapshots and backups go, and the label in their names."""

    base_folder: Path
    export_folder: Path
    backup_folder: Path
    label: str = "ledger_export"


@dataclass(frozen=True)
class LedgerConfig:
    """Runtime configuration of one ledger."""

    database_url: str
    echo: bool
    logging: LoggingConfig
    export: ExportConfig
