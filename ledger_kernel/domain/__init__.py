"""Pure domain layer: value objects, rules and DTOs (no database access)."""

from ledger_kernel.domain.accounts import (
    AccountType,
    NormalBalance,
    SplitType,
    descendants_of,
    normal_balance_sign,
)
from ledger_kernel.domain.clock import Clock, DeterministicClock, SystemClock
from ledger_kernel.domain.currency import CurrencyInfo, CurrencyRegistry
from ledger_kernel.domain.dtos import (
    AccountInfo,
    AccountSpec,
    BalanceWindow,
    SplitDeletionResult,
    SplitInfo,
    SplitSpec,
    TransactionInfo,
    TransactionSpec,
)
from ledger_kernel.domain.money import Currency, Money

__all__ = [
    "AccountInfo",
    "AccountSpec",
    "AccountType",
    "BalanceWindow",
    "Clock",
    "Currency",
    "CurrencyInfo",
    "CurrencyRegistry",
    "DeterministicClock",
    "Money",
    "NormalBalance",
    "SplitDeletionResult",
    "SplitInfo",
    "SplitSpec",
    "SplitType",
    "SystemClock",
    "TransactionInfo",
    "TransactionSpec",
    "descendants_of",
    "normal_balance_sign",
]
