"""Write side of the ledger kernel."""

from ledger_kernel.services.account_service import AccountService
from ledger_kernel.services.base import BaseService
from ledger_kernel.services.split_service import SplitService
from ledger_kernel.services.transaction_service import TransactionService

__all__ = ["AccountService", "BaseService", "SplitService", "TransactionService"]
