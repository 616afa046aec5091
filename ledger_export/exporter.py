"""
Exporter -- base class for format writers.

Responsibility:
    Gives every format writer the same lifecycle: read the ledger through a
    LedgerContext, write one snapshot, wrap any failure in ExporterError
    naming the format, and on success mark the written transactions as
    exported.

Architecture position:
    Outer layer over ledger_kernel.  Concrete writers subclass Exporter and
    implement generate_export(); their byte-level output is their own
    business.

Failure modes:
    - ExporterError("Failed to generate <FORMAT>[-<detail>]") chained to the
      original exception.  Ledger state is unchanged: transactions are only
      marked exported after generate_export() returns.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Iterable
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import TextIO

from ledger_export.formats import ExportFormat
from ledger_export.lifecycle import ExportLocations
from ledger_kernel.context import LedgerContext
from ledger_kernel.domain.dtos import TransactionInfo
from ledger_kernel.exceptions import ExporterError
from ledger_kernel.logging_config import LogContext, get_logger
from ledger_kernel.selectors.split_selector import SplitSelector
from ledger_kernel.services.account_service import AccountService
from ledger_kernel.services.transaction_service import TransactionService

logger = get_logger("export.exporter")


@dataclass(frozen=True)
class ExportParams:
    """
    What to export.

    ``export_start`` limits the export to transactions modified at or
    after that instant; None exports everything.
    """

    export_format: ExportFormat
    export_start: datetime | None = None
    mark_exported: bool = True

    def __post_init__(self) -> None:
        object.__setattr__(self, "export_format", ExportFormat(self.export_format))
        if self.export_start is not None and self.export_start.tzinfo is None:
            raise ValueError("export_start must be timezone-aware")


class Exporter(ABC):
    """
    Base class for format writers.

    Contract:
        Subclasses implement generate_export(writer) and return the uids of
        the transactions they wrote.  They read through ``self.accounts``,
        ``self.transactions``, ``self.splits`` and ``transactions_to_export()``.
    """

    def __init__(self, params: ExportParams, context: LedgerContext):
        self.params = params
        self.context = context
        self.accounts = AccountService(context)
        self.transactions = TransactionService(context)
        self.splits = SplitSelector(context)

    @property
    def export_format(self) -> ExportFormat:
        return self.params.export_format

    def transactions_to_export(self) -> list[TransactionInfo]:
        """Non-template transactions modified since ``export_start``."""
        return self.transactions.list_transactions(
            include_templates=False, modified_since=self.params.export_start
        )

    @abstractmethod
    def generate_export(self, writer: TextIO) -> Iterable[str] | None:
        """Write the snapshot to ``writer``; return the exported transaction uids."""
        ...

    def export(self, writer: TextIO) -> list[str]:
        """
        Run generate_export() and mark what it wrote as exported.

        Returns:
            Uids of the exported transactions.

        Raises:
            ExporterError: If the writer fails for any reason.
            Store errors from marking the transactions exported propagate
            unwrapped.
        """
        fmt = self.export_format.value
        with LogContext.bind(export_format=fmt):
            try:
                exported = list(self.generate_export(writer) or ())
            except ExporterError:
                logger.error("export_failed", exc_info=True)
                raise
            except Exception as exc:
                logger.error("export_failed", exc_info=True)
                raise ExporterError(fmt, cause=exc) from exc

            if self.params.mark_exported and exported:
                self.transactions.mark_exported(exported)

            logger.info("export_completed", extra={"transaction_count": len(exported)})
        return exported

    def export_to_file(self, locations: ExportLocations) -> Path:
        """
        Write a snapshot into the export folder.

        The partially written file is removed when anything in the export
        fails, including marking the transactions exported.
        """
        path = locations.create_export_file(self.export_format)
        try:
            with path.open("w", encoding="utf-8", newline="") as writer:
                self.export(writer)
        except Exception:
            path.unlink(missing_ok=True)
            raise
        logger.info("export_file_written", extra={"path": str(path)})
        return path
