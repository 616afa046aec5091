"""
SplitService -- the Mutation Protocol for split lines.

Responsibility:
    Adds, replaces and deletes splits while keeping every transaction
    consistent with its splits.

Architecture position:
    Kernel > Services.  TransactionService reuses the prepare/apply steps
    below when it creates a transaction together with its first splits.

Invariants enforced:
    - A split references an existing transaction and account.
    - value is in the transaction currency and quantity in the account
      currency; they are equal when those currencies coincide.
    - A non-template transaction's split values sum to exactly zero.  The
      prospective split set (stored splits, minus the ones being replaced,
      plus the new ones) is checked before anything is written.
    - Writing the split, clearing ``exported`` and refreshing
      ``modified_at`` happen in one unit of work.
    - Deleting the last split of a transaction deletes the transaction.

Failure modes:
    - TransactionNotFoundError / AccountNotFoundError on dangling references.
    - SplitNotFoundError when deleting a split that does not exist; nothing
      is changed.
    - CurrencyMismatchError / SplitAmountMismatchError on bad amounts.
    - UnbalancedTransactionError when the result would not balance.
    - ValueError on a spec without a transaction uid, a uid repeated in one
      batch, or a uid that already belongs to another transaction.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from datetime import datetime

from sqlalchemy import func, select

from ledger_kernel.db.base import new_uid
from ledger_kernel.domain.accounts import SplitType
from ledger_kernel.domain.dtos import SplitDeletionResult, SplitInfo, SplitSpec
from ledger_kernel.domain.money import Currency
from ledger_kernel.domain.validation import validate_balanced, validate_split_amounts
from ledger_kernel.logging_config import LogContext, get_logger
from ledger_kernel.models.lookups import (
    find_by_uid,
    require_account,
    require_split,
    require_transaction,
    uid_for_row_id,
)
from ledger_kernel.models.split import Split
from ledger_kernel.models.transaction import Transaction
from ledger_kernel.services.base import BaseService

logger = get_logger("services.split")


class SplitService(BaseService):
    """
    Write side for splits.

    Contract:
        ``add_split``/``add_splits`` insert or replace by uid;
        ``delete_split``/``delete_split_by_row_id`` remove one split and
        cascade to the transaction when it was the last one.

    Non-goals:
        - Deleting a split does not re-check the balance law; removing one
          leg of a balanced transaction leaves it unbalanced until the
          caller adds a replacement.
    """

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    def get_split(self, uid: str) -> SplitInfo:
        """
        Raises:
            SplitNotFoundError: If the split doesn't exist.
        """
        return SplitInfo.from_model(require_split(self.session, uid))

    # ------------------------------------------------------------------
    # Add / replace
    # ------------------------------------------------------------------

    def add_split(self, spec: SplitSpec) -> SplitInfo:
        """Insert or replace one split (see add_splits)."""
        return self.add_splits([spec])[0]

    def add_splits(self, specs: Iterable[SplitSpec]) -> list[SplitInfo]:
        """
        Insert or replace a batch of splits in one unit of work.

        Specs may target several transactions; each touched transaction is
        validated against its own prospective split set, then marked not
        exported with a fresh ``modified_at``.

        Returns:
            SplitInfo for each spec, in input order.
        """
        specs = list(specs)
        if not specs:
            return []

        grouped: dict[str, list[int]] = {}
        for index, spec in enumerate(specs):
            if spec.transaction_uid is None:
                raise ValueError("SplitSpec.transaction_uid is required to add a split")
            grouped.setdefault(spec.transaction_uid, []).append(index)

        written: list[Split | None] = [None] * len(specs)
        with self.context.unit_of_work():
            now = self.clock.now()
            for transaction_uid, indices in grouped.items():
                transaction = require_transaction(self.session, transaction_uid)
                prepared = self.prepare(transaction, [specs[i] for i in indices])
                rows = self.apply(transaction, prepared, now)
                for index, row in zip(indices, rows):
                    written[index] = row
            self.session.flush()

        return [SplitInfo.from_model(row) for row in written]

    def prepare(
        self, transaction: Transaction, specs: Sequence[SplitSpec]
    ) -> list[tuple[str, SplitSpec]]:
        """
        Validate ``specs`` against ``transaction`` without writing.

        Returns ``(uid, spec)`` pairs with a uid assigned to every spec.
        """
        transaction_currency = Currency(transaction.currency)
        existing = {split.uid: split for split in transaction.splits}

        prepared: list[tuple[str, SplitSpec]] = []
        seen: set[str] = set()
        for spec in specs:
            if spec.transaction_uid not in (None, transaction.uid):
                raise ValueError(
                    f"Split for transaction {spec.transaction_uid} passed with {transaction.uid}"
                )
            uid = spec.uid or new_uid()
            if uid in seen:
                raise ValueError(f"Split uid repeated in one batch: {uid}")
            seen.add(uid)
            if uid not in existing and find_by_uid(self.session, Split, uid) is not None:
                raise ValueError(f"Split {uid} belongs to another transaction")

            account = require_account(self.session, spec.account_uid)
            validate_split_amounts(
                uid, spec.value, spec.quantity, transaction_currency, Currency(account.currency)
            )
            prepared.append((uid, spec))

        if not transaction.is_template:
            kept = [
                (SplitType(split.split_type), split.value)
                for uid, split in existing.items()
                if uid not in seen
            ]
            staged = [(spec.split_type, spec.value) for _, spec in prepared]
            validate_balanced(transaction.uid, transaction_currency, kept + staged)

        return prepared

    def apply(
        self,
        transaction: Transaction,
        prepared: Sequence[tuple[str, SplitSpec]],
        now: datetime,
    ) -> list[Split]:
        """Write validated splits and stamp the transaction as modified."""
        existing = {split.uid: split for split in transaction.splits}
        rows: list[Split] = []
        for uid, spec in prepared:
            row = existing.get(uid)
            replaced = row is not None
            if row is None:
                row = Split(uid=uid, created_at=now)
                transaction.splits.append(row)
            row.account_uid = spec.account_uid
            row.split_type = spec.split_type.value
            row.value = spec.value
            row.quantity = spec.quantity
            row.memo = spec.memo
            rows.append(row)
            logger.info(
                "split_added",
                extra={
                    "split_uid": uid,
                    "transaction_uid": transaction.uid,
                    "account_uid": spec.account_uid,
                    "split_type": spec.split_type.value,
                    "value": str(spec.value),
                    "replaced": replaced,
                },
            )

        transaction.exported = False
        transaction.modified_at = now
        return rows

    # ------------------------------------------------------------------
    # Delete
    # ------------------------------------------------------------------

    def delete_split(self, uid: str) -> SplitDeletionResult:
        """
        Delete a split; delete its transaction too if no split remains.

        Otherwise the transaction is marked not exported and its
        ``modified_at`` refreshed.

        Raises:
            SplitNotFoundError: If the split doesn't exist (nothing changes).
        """
        with LogContext.bind(split_uid=uid), self.context.unit_of_work():
            split = require_split(self.session, uid)
            transaction = split.transaction
            transaction_uid = transaction.uid

            transaction.splits.remove(split)
            self.session.flush()

            remaining = self.session.execute(
                select(func.count())
                .select_from(Split)
                .where(Split.transaction_uid == transaction_uid)
            ).scalar_one()

            if remaining == 0:
                self.session.delete(transaction)
            else:
                transaction.exported = False
                transaction.modified_at = self.clock.now()
            self.session.flush()

        logger.info(
            "split_deleted",
            extra={
                "split_uid": uid,
                "transaction_uid": transaction_uid,
                "remaining_splits": remaining,
            },
        )
        if remaining == 0:
            logger.info("transaction_deleted", extra={"transaction_uid": transaction_uid})

        return SplitDeletionResult(
            split_uid=uid,
            transaction_uid=transaction_uid,
            transaction_deleted=remaining == 0,
        )

    def delete_split_by_row_id(self, row_id: int) -> SplitDeletionResult:
        """
        Delete a split addressed by its storage row id.

        Raises:
            SplitNotFoundError: If no split has that row id.
        """
        return self.delete_split(uid_for_row_id(self.session, Split, row_id))
