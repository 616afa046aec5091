"""
Module: ledger_kernel.models.split
Responsibility: ORM persistence for split lines.
Architecture position: Kernel > Models.  May import from db/ and domain/.

Each amount is stored as an integer numerator and a power-of-ten
denominator so balances can be summed exactly in SQL.  ``value`` is in the
transaction currency, ``quantity`` in the account currency.
"""

from datetime import datetime
from typing import TYPE_CHECKING

from sqlalchemy import ForeignKey, Index
from sqlalchemy.orm import Mapped, mapped_column, relationship

from ledger_kernel.db.base import Base
from ledger_kernel.db.types import AmountPart, CurrencyCode, LongText, ShortCode, UidRef
from ledger_kernel.domain.accounts import SplitType
from ledger_kernel.domain.money import Money

if TYPE_CHECKING:
    from ledger_kernel.models.account import Account
    from ledger_kernel.models.transaction import Transaction


class Split(Base):
    """
    One debit or credit line, owned by a transaction and booked to an
    account.

    Guarantees:
        - value_num/value_denom and quantity_num/quantity_denom are always
          written together through the ``value`` and ``quantity`` setters.
    """

    __tablename__ = "splits"

    __table_args__ = (
        Index("idx_split_transaction", "transaction_uid"),
        Index("idx_split_account", "account_uid"),
    )

    transaction_uid: Mapped[UidRef] = mapped_column(
        ForeignKey("transactions.uid", ondelete="CASCADE"),
        nullable=False,
    )

    account_uid: Mapped[UidRef] = mapped_column(
        ForeignKey("accounts.uid", ondelete="RESTRICT"),
        nullable=False,
    )

    split_type: Mapped[ShortCode] = mapped_column(nullable=False)

    value_num: Mapped[AmountPart] = mapped_column(nullable=False)
    value_denom: Mapped[AmountPart] = mapped_column(nullable=False)
    value_currency: Mapped[CurrencyCode] = mapped_column(nullable=False)

    quantity_num: Mapped[AmountPart] = mapped_column(nullable=False)
    quantity_denom: Mapped[AmountPart] = mapped_column(nullable=False)
    quantity_currency: Mapped[CurrencyCode] = mapped_column(nullable=False)

    memo: Mapped[LongText] = mapped_column(default="", nullable=False)

    created_at: Mapped[datetime] = mapped_column(nullable=False)

    transaction: Mapped["Transaction"] = relationship(back_populates="splits")
    account: Mapped["Account"] = relationship(back_populates="splits")

    def __repr__(self) -> str:
        return f"<Split {self.uid}: {self.split_type} {self.value} -> {self.account_uid}>"

    @property
    def value(self) -> Money:
        return Money(self.value_num, self.value_denom, self.value_currency)

    @value.setter
    def value(self, money: Money) -> None:
        self.value_num = money.numerator
        self.value_denom = money.denominator
        self.value_currency = money.currency.code

    @property
    def quantity(self) -> Money:
        return Money(self.quantity_num, self.quantity_denom, self.quantity_currency)

    @quantity.setter
    def quantity(self, money: Money) -> None:
        self.quantity_num = money.numerator
        self.quantity_denom = money.denominator
        self.quantity_currency = money.currency.code

    @property
    def signed_value(self) -> Money:
        return self.value.scale(SplitType(self.split_type).sign)
