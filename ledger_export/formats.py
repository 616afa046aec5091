"""Export formats and the file extensions their snapshots use."""

from enum import Enum


class ExportFormat(str, Enum):
    """Snapshot formats a format writer can produce."""

    QIF = "QIF"
    OFX = "OFX"
    XML = "XML"
    CSV_ACCOUNTS = "CSVA"
    CSV_TRANSACTIONS = "CSVT"

    @property
    def extension(self) -> str:
        return _EXTENSIONS[self]

    @property
    def description(self) -> str:
        return _DESCRIPTIONS[self]


_EXTENSIONS = {
    ExportFormat.QIF: ".qif",
    ExportFormat.OFX: ".ofx",
    ExportFormat.XML: ".gnca",
    ExportFormat.CSV_ACCOUNTS: ".csv",
    ExportFormat.CSV_TRANSACTIONS: ".csv",
}

_DESCRIPTIONS = {
    ExportFormat.QIF: "Quicken Interchange Format",
    ExportFormat.OFX: "Open Financial eXchange",
    ExportFormat.XML: "GnuCash XML",
    ExportFormat.CSV_ACCOUNTS: "CSV (accounts)",
    ExportFormat.CSV_TRANSACTIONS: "CSV (transactions)",
}
