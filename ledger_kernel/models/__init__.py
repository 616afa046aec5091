"""ORM models for accounts, transactions and splits."""

from ledger_kernel.models.account import Account
from ledger_kernel.models.split import Split
from ledger_kernel.models.transaction import Transaction

__all__ = ["Account", "Split", "Transaction"]
