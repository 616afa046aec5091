"""
Accounts -- Account type table and hierarchy traversal.

Responsibility:
    Owns the closed set of account types, the single type -> normal-balance
    table, the split direction enum, and pure helpers over the account
    forest (descendant expansion, cycle detection).

Architecture position:
    Kernel > Domain -- pure functional core, zero I/O.  The hierarchy
    helpers work on a ``{uid: parent_uid}`` map so the store decides how
    that map is loaded.

Invariants enforced:
    - normal_balance_sign() is the only place the debit/credit convention of
      an account type is decided.  The Balance Engine and the account
      service both go through it.
    - The account forest never contains a cycle (would_create_cycle()).

Failure modes:
    - KeyError-free: every AccountType member has a table entry, checked at
      import time.
    - AccountHierarchyError from descendants_of() when the parent map
      already contains a cycle.
"""

from collections.abc import Iterable, Mapping
from enum import Enum

from ledger_kernel.exceptions import AccountHierarchyError


class AccountType(str, Enum):
    """Types of accounts in the account tree."""

    ROOT = "root"
    CASH = "cash"
    BANK = "bank"
    ASSET = "asset"
    STOCK = "stock"
    MUTUAL = "mutual"
    RECEIVABLE = "receivable"
    CREDIT = "credit"
    LIABILITY = "liability"
    PAYABLE = "payable"
    EQUITY = "equity"
    INCOME = "income"
    EXPENSE = "expense"
    CURRENCY = "currency"
    TRADING = "trading"


class NormalBalance(str, Enum):
    """Normal balance side for an account."""

    DEBIT = "debit"
    CREDIT = "credit"


class SplitType(str, Enum):
    """Direction of a single split line."""

    DEBIT = "debit"
    CREDIT = "credit"

    @property
    def sign(self) -> int:
        """+1 for debits, -1 for credits."""
        return 1 if self is SplitType.DEBIT else -1


_NORMAL_BALANCE: dict[AccountType, NormalBalance] = {
    AccountType.CASH: NormalBalance.DEBIT,
    AccountType.BANK: NormalBalance.DEBIT,
    AccountType.ASSET: NormalBalance.DEBIT,
    AccountType.STOCK: NormalBalance.DEBIT,
    AccountType.MUTUAL: NormalBalance.DEBIT,
    AccountType.RECEIVABLE: NormalBalance.DEBIT,
    AccountType.EXPENSE: NormalBalance.DEBIT,
    AccountType.CREDIT: NormalBalance.CREDIT,
    AccountType.LIABILITY: NormalBalance.CREDIT,
    AccountType.PAYABLE: NormalBalance.CREDIT,
    AccountType.EQUITY: NormalBalance.CREDIT,
    AccountType.INCOME: NormalBalance.CREDIT,
    AccountType.CURRENCY: NormalBalance.CREDIT,
    AccountType.TRADING: NormalBalance.CREDIT,
    AccountType.ROOT: NormalBalance.CREDIT,
}


def normal_balance_sign(account_type: AccountType | str) -> NormalBalance:
    """
    Normal balance of an account type.

    Raises:
        ValueError: If ``account_type`` is not a known type.
    """
    return _NORMAL_BALANCE[AccountType(account_type)]


def descendants_of(parent_map: Mapping[str, str | None], uid: str) -> set[str]:
    """
    All accounts below ``uid`` in the forest described by ``parent_map``.

    ``parent_map`` maps every account uid to its parent uid (or None).
    The result does not include ``uid`` itself.

    Raises:
        AccountHierarchyError: If the walk revisits an account (cycle).
    """
    children: dict[str, list[str]] = {}
    for child, parent in parent_map.items():
        if parent is not None:
            children.setdefault(parent, []).append(child)

    found: set[str] = set()
    stack = list(children.get(uid, ()))
    while stack:
        current = stack.pop()
        if current == uid or current in found:
            raise AccountHierarchyError(current, parent_map.get(current) or uid)
        found.add(current)
        stack.extend(children.get(current, ()))
    return found


def ancestors_of(parent_map: Mapping[str, str | None], uid: str) -> list[str]:
    """Parent chain of ``uid``, nearest first."""
    chain: list[str] = []
    seen = {uid}
    parent = parent_map.get(uid)
    while parent is not None:
        if parent in seen:
            raise AccountHierarchyError(uid, parent)
        chain.append(parent)
        seen.add(parent)
        parent = parent_map.get(parent)
    return chain


def would_create_cycle(
    parent_map: Mapping[str, str | None], uid: str, new_parent_uid: str | None
) -> bool:
    """True if placing ``uid`` under ``new_parent_uid`` closes a loop."""
    if new_parent_uid is None:
        return False
    if new_parent_uid == uid:
        return True
    return uid in ancestors_of(parent_map, new_parent_uid)


def expand_subtrees(parent_map: Mapping[str, str | None], uids: Iterable[str]) -> set[str]:
    """``uids`` plus every descendant of each of them."""
    result: set[str] = set()
    for uid in uids:
        result.add(uid)
        result |= descendants_of(parent_map, uid)
    return result
