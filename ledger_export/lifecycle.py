"""
Export lifecycle -- file naming, timestamp recovery and folder layout.

Responsibility:
    Builds sortable, collision-resistant snapshot names, reads the export
    time back out of a name, and manages the export and backup folders.
    Nothing here looks at ledger content.

Filename grammar:
    ``<YYYYMMDD>_<HHMMSS>_<label><extension>``, e.g.
    ``20240101_120000_ledger_export.qif``.  The first two ``_``-separated
    tokens are the UTC timestamp.  Backups append ``.zip`` to the XML name.

Invariants enforced:
    - parse_export_time(build_export_filename(fmt, clock)) == clock.now()
      truncated to the second.
    - Both folders exist after any ExportLocations method that uses them.

Failure modes:
    - parse_export_time never raises: malformed names are logged as
      ``export_name_malformed`` and yield EPOCH.
"""

from __future__ import annotations

import os
from datetime import datetime, timezone
from pathlib import Path

from ledger_export.formats import ExportFormat
from ledger_kernel.domain.clock import Clock, SystemClock
from ledger_kernel.exceptions import MalformedExportNameError
from ledger_kernel.logging_config import get_logger

logger = get_logger("export.lifecycle")

EXPORT_TIME_FORMAT = "%Y%m%d_%H%M%S"
DEFAULT_LABEL = "ledger_export"
BACKUP_SUFFIX = ".zip"
EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)


def build_export_filename(
    export_format: ExportFormat,
    clock: Clock | None = None,
    label: str = DEFAULT_LABEL,
) -> str:
    """Timestamped file name for a snapshot in ``export_format``."""
    now = (clock or SystemClock()).now().astimezone(timezone.utc)
    return f"{now.strftime(EXPORT_TIME_FORMAT)}_{label}{ExportFormat(export_format).extension}"


def _read_export_time(name: str) -> datetime:
    tokens = name.split("_")
    if len(tokens) < 2:
        raise MalformedExportNameError(name, "expected <date>_<time> prefix")
    stamp = f"{tokens[0]}_{tokens[1]}"
    # strptime accepts unpadded fields; reject anything that does not
    # round-trip through the formatter
    try:
        parsed = datetime.strptime(stamp, EXPORT_TIME_FORMAT)
    except ValueError as e:
        raise MalformedExportNameError(name, str(e)) from e
    if parsed.strftime(EXPORT_TIME_FORMAT) != stamp:
        raise MalformedExportNameError(name, f"non-canonical timestamp {stamp!r}")
    return parsed.replace(tzinfo=timezone.utc)


def parse_export_time(filename: str | os.PathLike) -> datetime:
    """
    Export time encoded in a snapshot file name (UTC).

    Only the base name is inspected, so full paths are accepted.  Returns
    EPOCH for names that do not start with a valid timestamp.
    """
    name = Path(filename).name
    try:
        return _read_export_time(name)
    except MalformedExportNameError as e:
        logger.warning(
            "export_name_malformed",
            extra={"export_filename": e.filename, "reason": e.reason},
        )
        return EPOCH


class ExportLocations:
    """
    Export and backup folders of one ledger.

    Guarantees:
        - Folders are created on first use, including missing parents.
        - most_recent_backup() only looks at direct file entries.
    """

    def __init__(
        self,
        export_folder: str | os.PathLike,
        backup_folder: str | os.PathLike,
        clock: Clock | None = None,
        label: str = DEFAULT_LABEL,
    ):
        self.export_folder = Path(export_folder)
        self.backup_folder = Path(backup_folder)
        self.clock = clock or SystemClock()
        self.label = label

    def create_export_file(self, export_format: ExportFormat) -> Path:
        """Path for a new snapshot in the export folder (not yet written)."""
        self.export_folder.mkdir(parents=True, exist_ok=True)
        return self.export_folder / build_export_filename(export_format, self.clock, self.label)

    def build_backup_file(self) -> Path:
        """Path for a new backup archive in the backup folder (not yet written)."""
        self.backup_folder.mkdir(parents=True, exist_ok=True)
        name = build_export_filename(ExportFormat.XML, self.clock, self.label)
        return self.backup_folder / f"{name}{BACKUP_SUFFIX}"

    def most_recent_backup(self) -> Path | None:
        """The backup file with the latest modification time, if any."""
        if not self.backup_folder.is_dir():
            return None
        latest: Path | None = None
        latest_mtime = float("-inf")
        for entry in self.backup_folder.iterdir():
            if not entry.is_file():
                continue
            mtime = entry.stat().st_mtime
            if mtime > latest_mtime:
                latest, latest_mtime = entry, mtime
        return latest
