"""
Module: ledger_kernel.selectors.balance_selector
Responsibility: The Balance Engine -- signed aggregate Money over a set of
    accounts, a currency and an optional time window.
Architecture position: Kernel > Selectors.  Read-only.

Algorithm:
    1. Empty account set -> zero in the query currency.
    2. Every account must exist and be denominated in the query currency.
    3. SQL sums integer numerators per (split type, transaction currency,
       denominators) over the
       splits of non-template transactions booked to those accounts,
       optionally filtered on the transaction timestamp (inclusive bounds).
       Each group is exact, so no precision is lost in the database.
    4. The groups are combined as Money: debits positive, credits negative.
    5. Credit-normal queries negate the total.
    6. compute_balance() rounds once, half-up, to the minor unit;
       compute_exact_balance() returns the unrounded total.

    The summed amount is the split's value when the transaction is in the
    query currency, otherwise its quantity (always in the account currency,
    which step 2 pins to the query currency).

Invariants enforced:
    - No stored balances: every result is derived from split rows.
    - One rounding step, at the end.

Failure modes:
    - AccountNotFoundError for an unknown account uid.
    - CurrencyMismatchError when an account is not in the query currency.
"""

from __future__ import annotations

from collections.abc import Iterable

from sqlalchemy import func, select

from ledger_kernel.domain import accounts as account_rules
from ledger_kernel.domain.accounts import AccountType, NormalBalance, SplitType
from ledger_kernel.domain.dtos import BalanceWindow
from ledger_kernel.domain.money import Currency, Money
from ledger_kernel.exceptions import AccountNotFoundError, CurrencyMismatchError
from ledger_kernel.logging_config import get_logger
from ledger_kernel.models.account import Account
from ledger_kernel.models.lookups import account_parent_map, require_account
from ledger_kernel.models.split import Split
from ledger_kernel.models.transaction import Transaction
from ledger_kernel.selectors.base import BaseSelector

logger = get_logger("selectors.balance")


class BalanceSelector(BaseSelector):
    """
    Balance queries over split rows.

    Guarantees:
        - Linear: the balance of disjoint account sets A and B equals the
          balance of A plus the balance of B. Stored amounts are whole minor
          units, so this holds for the rounded variant as well.
        - Template transactions never contribute.
    """

    def compute_exact_balance(
        self,
        account_uids: Iterable[str],
        currency: Currency | str,
        normal_balance: NormalBalance = NormalBalance.DEBIT,
        window: BalanceWindow | None = None,
    ) -> Money:
        """Unrounded balance; see the module docstring for the algorithm."""
        currency = Currency(currency) if isinstance(currency, str) else currency
        normal_balance = NormalBalance(normal_balance)
        uids = set(account_uids)
        if not uids:
            return Money.zero(currency)

        self._require_accounts_in(uids, currency)

        stmt = (
            select(
                Split.split_type,
                Transaction.currency,
                Split.value_denom,
                Split.quantity_denom,
                func.sum(Split.value_num),
                func.sum(Split.quantity_num),
            )
            .join(Transaction, Split.transaction_uid == Transaction.uid)
            .where(Split.account_uid.in_(uids))
            .where(Transaction.is_template.is_(False))
            .group_by(
                Split.split_type,
                Transaction.currency,
                Split.value_denom,
                Split.quantity_denom,
            )
        )
        if window is not None:
            if window.start is not None and window.end is not None:
                stmt = stmt.where(Transaction.timestamp.between(window.start, window.end))
            elif window.start is not None:
                stmt = stmt.where(Transaction.timestamp >= window.start)
            elif window.end is not None:
                stmt = stmt.where(Transaction.timestamp <= window.end)

        total = Money.zero(currency)
        for row in self.session.execute(stmt):
            split_type, transaction_currency, value_denom, quantity_denom, value_sum, quantity_sum = row
            if transaction_currency == currency.code:
                group = Money(int(value_sum), int(value_denom), currency)
            else:
                group = Money(int(quantity_sum), int(quantity_denom), currency)
            total = total + group.scale(SplitType(split_type).sign)

        if normal_balance is NormalBalance.CREDIT:
            total = -total

        logger.debug(
            "balance_computed",
            extra={
                "account_count": len(uids),
                "currency": currency.code,
                "normal_balance": normal_balance.value,
                "exact": str(total.amount),
            },
        )
        return total

    def compute_balance(
        self,
        account_uids: Iterable[str],
        currency: Currency | str,
        normal_balance: NormalBalance = NormalBalance.DEBIT,
        window: BalanceWindow | None = None,
    ) -> Money:
        """Balance rounded half-up to the currency's minor unit."""
        return self.compute_exact_balance(account_uids, currency, normal_balance, window).round()

    def compute_subtree_balance(
        self,
        account_uid: str,
        window: BalanceWindow | None = None,
        exact: bool = False,
    ) -> Money:
        """
        Balance of an account and all its descendants.

        Currency and normal balance come from the root account.

        Raises:
            AccountNotFoundError: If the account doesn't exist.
            CurrencyMismatchError: If a descendant uses another currency.
        """
        root = require_account(self.session, account_uid)
        uids = account_rules.expand_subtrees(account_parent_map(self.session), [account_uid])
        normal_balance = account_rules.normal_balance_sign(AccountType(root.account_type))
        balance = self.compute_exact_balance(uids, root.currency, normal_balance, window)
        return balance if exact else balance.round()

    def _require_accounts_in(self, uids: set[str], currency: Currency) -> None:
        rows = self.session.execute(
            select(Account.uid, Account.currency).where(Account.uid.in_(uids))
        ).all()
        found = {uid: code for uid, code in rows}
        missing = sorted(uids - found.keys())
        if missing:
            raise AccountNotFoundError(missing[0])
        for uid in sorted(found):
            if found[uid] != currency.code:
                raise CurrencyMismatchError(found[uid], currency.code, "compute balance")
