"""
Config -> Kernel bridges.

Turn a LedgerConfig into kernel and export objects.  These live here
because ledger_kernel never imports ledger_config.

Usage:
    config = get_active_config()
    context = init_context_from_config(config)
    locations = export_locations_from_config(config, context.clock)
"""

from __future__ import annotations

from ledger_config.schema import LedgerConfig
from ledger_export.lifecycle import ExportLocations
from ledger_kernel.context import LedgerContext, init_default_context
from ledger_kernel.domain.clock import Clock
from ledger_kernel.logging_config import configure_logging


def init_context_from_config(config: LedgerConfig, clock: Clock | None = None) -> LedgerContext:
    """Configure logging and create the process-wide LedgerContext."""
    configure_logging(level=config.logging.level)
    return init_default_context(config.database_url, echo=config.echo, clock=clock)


def export_locations_from_config(config: LedgerConfig, clock: Clock | None = None) -> ExportLocations:
    return ExportLocations(
        export_folder=config.export.export_folder,
        backup_folder=config.export.backup_folder,
        clock=clock,
        label=config.export.label,
    )
