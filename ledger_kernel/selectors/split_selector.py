"""
Module: ledger_kernel.selectors.split_selector
Responsibility: Split lookups by owning transaction and by account.
Architecture position: Kernel > Selectors.  Read-only; returns SplitInfo.
"""

from __future__ import annotations

from sqlalchemy import select

from ledger_kernel.domain.dtos import SplitInfo
from ledger_kernel.models.split import Split
from ledger_kernel.models.transaction import Transaction
from ledger_kernel.selectors.base import BaseSelector


class SplitSelector(BaseSelector):
    """Foreign-key lookups over splits.  Unknown uids give empty lists."""

    def splits_for_transaction(self, transaction_uid: str) -> list[SplitInfo]:
        stmt = (
            select(Split)
            .where(Split.transaction_uid == transaction_uid)
            .order_by(Split.id)
        )
        return [SplitInfo.from_model(s) for s in self.session.execute(stmt).scalars()]

    def splits_for_account(self, account_uid: str) -> list[SplitInfo]:
        """Splits booked to an account, newest transaction first, templates excluded."""
        stmt = (
            select(Split)
            .join(Transaction, Split.transaction_uid == Transaction.uid)
            .where(Split.account_uid == account_uid)
            .where(Transaction.is_template.is_(False))
            .order_by(Transaction.timestamp.desc(), Split.id.desc())
        )
        return [SplitInfo.from_model(s) for s in self.session.execute(stmt).scalars()]

    def splits_for_transaction_in_account(
        self, transaction_uid: str, account_uid: str
    ) -> list[SplitInfo]:
        stmt = (
            select(Split)
            .where(Split.transaction_uid == transaction_uid)
            .where(Split.account_uid == account_uid)
            .order_by(Split.id)
        )
        return [SplitInfo.from_model(s) for s in self.session.execute(stmt).scalars()]
