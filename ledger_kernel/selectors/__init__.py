"""Read side of the ledger kernel."""

from ledger_kernel.selectors.balance_selector import BalanceSelector
from ledger_kernel.selectors.base import BaseSelector
from ledger_kernel.selectors.split_selector import SplitSelector

__all__ = ["BalanceSelector", "BaseSelector", "SplitSelector"]
