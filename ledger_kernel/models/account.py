"""
Module: ledger_kernel.models.account
Responsibility: ORM persistence for the account tree -- the target of every
    split.
Architecture position: Kernel > Models.  May import from db/ and domain/.

Invariants enforced:
    - parent_uid references another account's uid (self-referential FK).
      Cycle prevention lives in AccountService, which checks the whole
      parent chain before writing.
    - An account referenced by splits or child accounts is never deleted
      (FK RESTRICT here, typed refusal in AccountService).

Failure modes:
    - IntegrityError if a raw delete bypasses AccountService.
"""

from typing import TYPE_CHECKING

from sqlalchemy import ForeignKey, Index, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from ledger_kernel.db.base import Base
from ledger_kernel.db.types import CurrencyCode, ShortCode
from ledger_kernel.domain.accounts import AccountType, NormalBalance, normal_balance_sign

if TYPE_CHECKING:
    from ledger_kernel.models.split import Split


class Account(Base):
    """
    One node of the account forest.

    Guarantees:
        - account_type is an AccountType value; the normal balance is
          derived from it, never stored.
        - currency is the unit of every split quantity booked here.
    """

    __tablename__ = "accounts"

    __table_args__ = (
        Index("idx_account_parent", "parent_uid"),
        Index("idx_account_type", "account_type"),
    )

    name: Mapped[str] = mapped_column(String(255), nullable=False)

    account_type: Mapped[ShortCode] = mapped_column(nullable=False)

    currency: Mapped[CurrencyCode] = mapped_column(nullable=False)

    parent_uid: Mapped[str | None] = mapped_column(
        String(32),
        ForeignKey("accounts.uid", ondelete="RESTRICT"),
        nullable=True,
    )

    splits: Mapped[list["Split"]] = relationship(
        back_populates="account",
        passive_deletes="all",
    )

    def __repr__(self) -> str:
        return f"<Account {self.uid}: {self.name} ({self.account_type})>"

    @property
    def normal_balance(self) -> NormalBalance:
        return normal_balance_sign(AccountType(self.account_type))
