"""
Export lifecycle for ledger snapshots and backups.

Naming, timestamp recovery and folder management are independent of the
snapshot format; format writers subclass Exporter.
"""

from ledger_export.exporter import Exporter, ExportParams
from ledger_export.formats import ExportFormat
from ledger_export.lifecycle import (
    DEFAULT_LABEL,
    EPOCH,
    ExportLocations,
    build_export_filename,
    parse_export_time,
)

__all__ = [
    "DEFAULT_LABEL",
    "EPOCH",
    "ExportFormat",
    "ExportLocations",
    "ExportParams",
    "Exporter",
    "build_export_filename",
    "parse_export_time",
]
