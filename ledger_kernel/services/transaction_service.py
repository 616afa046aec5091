"""
Service layer for transactions.

Creates a transaction atomically with its first splits, deletes it with
all of them, and maintains the ``exported`` flag.  Returns
TransactionInfo DTOs.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from datetime import datetime

from sqlalchemy import select, update

from ledger_kernel.db.base import new_uid
from ledger_kernel.domain.dtos import SplitSpec, TransactionInfo, TransactionSpec
from ledger_kernel.exceptions import EmptyTransactionError
from ledger_kernel.logging_config import LogContext, get_logger
from ledger_kernel.models.lookups import (
    find_by_uid,
    require_by_row_id,
    require_transaction,
    row_id_for_uid,
    uid_for_row_id,
)
from ledger_kernel.models.transaction import Transaction
from ledger_kernel.services.base import BaseService
from ledger_kernel.services.split_service import SplitService

logger = get_logger("services.transaction")


class TransactionService(BaseService):
    """
    Service for transaction headers.

    Every transaction, template or not, is created with at least one
    split; non-template transactions must balance exactly.
    """

    def get_transaction(self, uid: str) -> TransactionInfo:
        """
        Raises:
            TransactionNotFoundError: If the transaction doesn't exist.
        """
        return TransactionInfo.from_model(require_transaction(self.session, uid))

    def get_transaction_by_row_id(self, row_id: int) -> TransactionInfo:
        return TransactionInfo.from_model(require_by_row_id(self.session, Transaction, row_id))

    def list_transactions(
        self,
        include_templates: bool = False,
        modified_since: datetime | None = None,
    ) -> list[TransactionInfo]:
        """Transactions ordered by timestamp, optionally only recently modified ones."""
        stmt = select(Transaction)
        if not include_templates:
            stmt = stmt.where(Transaction.is_template.is_(False))
        if modified_since is not None:
            stmt = stmt.where(Transaction.modified_at >= modified_since)
        stmt = stmt.order_by(Transaction.timestamp, Transaction.id)
        return [TransactionInfo.from_model(t) for t in self.session.execute(stmt).scalars()]

    def get_transaction_uid(self, row_id: int) -> str:
        """
        Raises:
            TransactionNotFoundError: If no transaction has that row id.
        """
        return uid_for_row_id(self.session, Transaction, row_id)

    def get_transaction_row_id(self, uid: str) -> int:
        """
        Raises:
            TransactionNotFoundError: If no transaction has that uid.
        """
        return row_id_for_uid(self.session, Transaction, uid)

    def create_transaction(
        self, spec: TransactionSpec, splits: Sequence[SplitSpec]
    ) -> TransactionInfo:
        """
        Create a transaction together with its splits.

        All checks run before the transaction row is added to the session.

        Raises:
            EmptyTransactionError: If ``splits`` is empty.
            ValueError: If ``spec.uid`` is already taken.
            UnbalancedTransactionError, CurrencyMismatchError,
            SplitAmountMismatchError, AccountNotFoundError: see SplitService.
        """
        uid = spec.uid or new_uid()
        if not splits:
            raise EmptyTransactionError(uid)

        splitter = SplitService(self.context)
        with LogContext.bind(transaction_uid=uid), self.context.unit_of_work():
            if find_by_uid(self.session, Transaction, uid) is not None:
                raise ValueError(f"Transaction uid already exists: {uid}")

            now = self.clock.now()
            transaction = Transaction(
                uid=uid,
                timestamp=spec.timestamp,
                currency=spec.currency.code,
                description=spec.description,
                is_template=spec.is_template,
                exported=False,
                modified_at=now,
            )
            prepared = splitter.prepare(transaction, splits)
            self.session.add(transaction)
            splitter.apply(transaction, prepared, now)
            self.session.flush()

            logger.info(
                "transaction_created",
                extra={
                    "currency": spec.currency.code,
                    "is_template": spec.is_template,
                    "split_count": len(prepared),
                },
            )
        return TransactionInfo.from_model(transaction)

    def delete_transaction(self, uid: str) -> None:
        """
        Delete a transaction and all of its splits.

        Raises:
            TransactionNotFoundError: If the transaction doesn't exist.
        """
        with self.context.unit_of_work():
            transaction = require_transaction(self.session, uid)
            split_count = len(transaction.splits)
            self.session.delete(transaction)
            self.session.flush()

        logger.info(
            "transaction_deleted",
            extra={"transaction_uid": uid, "split_count": split_count},
        )

    def mark_exported(self, uids: Iterable[str], exported: bool = True) -> int:
        """
        Set the ``exported`` flag of the given transactions.

        ``modified_at`` is left untouched: exporting is not an edit.

        Returns:
            Number of transactions updated.
        """
        uids = list(uids)
        if not uids:
            return 0
        with self.context.unit_of_work():
            count = self.session.execute(
                update(Transaction)
                .where(Transaction.uid.in_(uids))
                .values(exported=exported),
                execution_options={"synchronize_session": "fetch"},
            ).rowcount
        logger.info("transactions_marked_exported", extra={"count": count, "exported": exported})
        return count
