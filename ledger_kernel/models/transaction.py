"""
Module: ledger_kernel.models.transaction
Responsibility: ORM persistence for transaction headers.
Architecture position: Kernel > Models.  May import from db/ and domain/.

Invariants enforced:
    - A transaction owns its splits: deleting it deletes them (ORM cascade
      plus ON DELETE CASCADE on the split FK).
    - ``exported`` and ``modified_at`` are only changed by the services,
      inside the same unit of work as the split write that caused them.
"""

from datetime import datetime
from typing import TYPE_CHECKING

from sqlalchemy import Boolean, Index
from sqlalchemy.orm import Mapped, mapped_column, relationship

from ledger_kernel.db.base import Base
from ledger_kernel.db.types import CurrencyCode, LongText

if TYPE_CHECKING:
    from ledger_kernel.models.split import Split


class Transaction(Base):
    """
    Transaction header: when, in which currency, and whether it is a
    template or has been exported.

    Non-goals:
        - Balance is not checked at the ORM level; SplitService and
          TransactionService validate the prospective split set before
          writing.
    """

    __tablename__ = "transactions"

    __table_args__ = (
        Index("idx_transaction_timestamp", "timestamp"),
        Index("idx_transaction_template", "is_template"),
    )

    timestamp: Mapped[datetime] = mapped_column(nullable=False)

    currency: Mapped[CurrencyCode] = mapped_column(nullable=False)

    description: Mapped[LongText] = mapped_column(default="", nullable=False)

    is_template: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)

    exported: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)

    modified_at: Mapped[datetime] = mapped_column(nullable=False)

    splits: Mapped[list["Split"]] = relationship(
        back_populates="transaction",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )

    def __repr__(self) -> str:
        return f"<Transaction {self.uid} @ {self.timestamp:%Y-%m-%d} ({self.currency})>"
