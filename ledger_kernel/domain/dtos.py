"""
DTOs -- Immutable data crossing the service/selector boundary.

Responsibility:
    Input specs (AccountSpec, TransactionSpec, SplitSpec) describe what a
    caller wants written; Info records (AccountInfo, TransactionInfo,
    SplitInfo) are read-only snapshots of stored rows; SplitDeletionResult
    reports what the delete protocol did; BalanceWindow is the optional
    time filter of a balance query.

Architecture position:
    Kernel > Domain -- pure functional core, zero I/O.
    from_model() class methods are boundary converters invoked only from
    services and selectors.

Invariants enforced:
    - Split amounts are non-negative; SplitType carries the direction.
    - BalanceWindow bounds are timezone-aware and ordered.

Failure modes:
    - ValueError on a negative split amount, a naive datetime, or an
      inverted window.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import TYPE_CHECKING

from ledger_kernel.domain.accounts import (
    AccountType,
    NormalBalance,
    SplitType,
    normal_balance_sign,
)
from ledger_kernel.domain.money import Currency, Money

if TYPE_CHECKING:
    from ledger_kernel.models.account import Account as AccountModel
    from ledger_kernel.models.split import Split as SplitModel
    from ledger_kernel.models.transaction import Transaction as TransactionModel


def _require_aware(value: datetime | None, name: str) -> None:
    if value is not None and value.tzinfo is None:
        raise ValueError(f"{name} must be timezone-aware")


# ---------------------------------------------------------------------------
# Input specs
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class AccountSpec:
    """Fields of an account to create."""

    name: str
    account_type: AccountType
    currency: Currency
    parent_uid: str | None = None
    uid: str | None = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "account_type", AccountType(self.account_type))
        if isinstance(self.currency, str):
            object.__setattr__(self, "currency", Currency(self.currency))
        if not self.name or not self.name.strip():
            raise ValueError("Account name must not be empty")


@dataclass(frozen=True)
class TransactionSpec:
    """Header of a transaction to create; its splits are passed alongside."""

    timestamp: datetime
    currency: Currency
    description: str = ""
    is_template: bool = False
    uid: str | None = None

    def __post_init__(self) -> None:
        if isinstance(self.currency, str):
            object.__setattr__(self, "currency", Currency(self.currency))
        _require_aware(self.timestamp, "Transaction timestamp")


@dataclass(frozen=True)
class SplitSpec:
    """
    One split line to add or replace.

    Contract:
        ``value`` is in the transaction currency, ``quantity`` in the
        account currency.  When ``quantity`` is omitted it equals
        ``value`` (single-currency split).  ``uid`` selects the split to
        replace; a fresh uid is assigned when it is None.

    Guarantees:
        - value and quantity are non-negative; split_type gives direction.
    """

    account_uid: str
    split_type: SplitType
    value: Money
    quantity: Money | None = None
    transaction_uid: str | None = None
    memo: str = ""
    uid: str | None = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "split_type", SplitType(self.split_type))
        if self.quantity is None:
            object.__setattr__(self, "quantity", self.value)
        if self.value.is_negative or self.quantity.is_negative:
            raise ValueError("Split amounts must be non-negative; use split_type for direction")

    @property
    def signed_value(self) -> Money:
        """Value with debits positive and credits negative."""
        return self.value.scale(self.split_type.sign)

    @classmethod
    def create(
        cls,
        account_uid: str,
        split_type: SplitType | str,
        amount: str,
        currency: str,
        **kwargs,
    ) -> SplitSpec:
        """Convenience constructor for a single-currency split."""
        return cls(
            account_uid=account_uid,
            split_type=SplitType(split_type),
            value=Money.of(amount, currency),
            **kwargs,
        )


# ---------------------------------------------------------------------------
# Stored snapshots
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class AccountInfo:
    """
    Immutable snapshot of an account row.

    ``row_id`` is the storage-internal key; ``uid`` is the stable identifier
    every other operation takes.
    """

    row_id: int
    uid: str
    name: str
    account_type: AccountType
    currency: Currency
    parent_uid: str | None

    @property
    def normal_balance(self) -> NormalBalance:
        return normal_balance_sign(self.account_type)

    @classmethod
    def from_model(cls, model: AccountModel) -> AccountInfo:
        return cls(
            row_id=model.id,
            uid=model.uid,
            name=model.name,
            account_type=AccountType(model.account_type),
            currency=Currency(model.currency),
            parent_uid=model.parent_uid,
        )


@dataclass(frozen=True)
class SplitInfo:
    """Immutable snapshot of a split row."""

    row_id: int
    uid: str
    transaction_uid: str
    account_uid: str
    split_type: SplitType
    value: Money
    quantity: Money
    memo: str
    created_at: datetime

    @property
    def signed_value(self) -> Money:
        return self.value.scale(self.split_type.sign)

    @property
    def signed_quantity(self) -> Money:
        return self.quantity.scale(self.split_type.sign)

    @classmethod
    def from_model(cls, model: SplitModel) -> SplitInfo:
        return cls(
            row_id=model.id,
            uid=model.uid,
            transaction_uid=model.transaction_uid,
            account_uid=model.account_uid,
            split_type=SplitType(model.split_type),
            value=model.value,
            quantity=model.quantity,
            memo=model.memo or "",
            created_at=model.created_at,
        )


@dataclass(frozen=True)
class TransactionInfo:
    """Immutable snapshot of a transaction row and its splits."""

    row_id: int
    uid: str
    timestamp: datetime
    currency: Currency
    description: str
    is_template: bool
    exported: bool
    modified_at: datetime
    splits: tuple[SplitInfo, ...] = ()

    @property
    def imbalance(self) -> Money:
        """Signed sum of split values; zero for a balanced transaction."""
        return Money.total((s.signed_value for s in self.splits), self.currency)

    @classmethod
    def from_model(cls, model: TransactionModel) -> TransactionInfo:
        return cls(
            row_id=model.id,
            uid=model.uid,
            timestamp=model.timestamp,
            currency=Currency(model.currency),
            description=model.description or "",
            is_template=model.is_template,
            exported=model.exported,
            modified_at=model.modified_at,
            splits=tuple(
                SplitInfo.from_model(s) for s in sorted(model.splits, key=lambda s: s.id)
            ),
        )


# ---------------------------------------------------------------------------
# Results and query parameters
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class SplitDeletionResult:
    """Outcome of the split delete protocol."""

    split_uid: str
    transaction_uid: str
    transaction_deleted: bool


@dataclass(frozen=True)
class BalanceWindow:
    """
    Time filter on the owning transaction's timestamp.

    Both bounds are inclusive.  Either may be None for a one-sided filter;
    with both None the window matches everything.
    """

    start: datetime | None = None
    end: datetime | None = None

    def __post_init__(self) -> None:
        _require_aware(self.start, "Window start")
        _require_aware(self.end, "Window end")
        if self.start is not None and self.end is not None and self.start > self.end:
            raise ValueError(f"Window start {self.start} is after end {self.end}")

    @property
    def is_unbounded(self) -> bool:
        return self.start is None and self.end is None
