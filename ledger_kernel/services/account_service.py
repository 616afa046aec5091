"""
Service layer for the account tree.

Creates, edits and removes accounts while keeping the forest acyclic and
never orphaning splits or child accounts.  Returns AccountInfo DTOs, not
ORM rows.
"""

from __future__ import annotations

from sqlalchemy import func, select, update

from ledger_kernel.domain import accounts as account_rules
from ledger_kernel.domain.accounts import AccountType
from ledger_kernel.domain.dtos import AccountInfo, AccountSpec
from ledger_kernel.domain.money import Currency
from ledger_kernel.exceptions import (
    AccountHierarchyError,
    AccountReferencedError,
    CurrencyMismatchError,
)
from ledger_kernel.logging_config import LogContext, get_logger
from ledger_kernel.models.account import Account
from ledger_kernel.models.lookups import (
    account_parent_map,
    find_by_uid,
    require_account,
    require_by_row_id,
    row_id_for_uid,
    uid_for_row_id,
)
from ledger_kernel.models.split import Split
from ledger_kernel.models.transaction import Transaction
from ledger_kernel.services.base import BaseService

logger = get_logger("services.account")

# Distinguishes "leave parent unchanged" from "move to top level" (None)
_UNCHANGED = object()


class AccountService(BaseService):
    """
    Service for managing accounts.

    Enforces:
        - parents exist and reparenting never creates a cycle;
        - an account referenced by splits or children is never deleted;
        - an account's currency only changes while no split uses it.
    """

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    def get_account(self, uid: str) -> AccountInfo:
        """
        Get account by uid.

        Raises:
            AccountNotFoundError: If the account doesn't exist.
        """
        return AccountInfo.from_model(require_account(self.session, uid))

    def get_account_by_row_id(self, row_id: int) -> AccountInfo:
        return AccountInfo.from_model(require_by_row_id(self.session, Account, row_id))

    def list_accounts(self, account_type: AccountType | None = None) -> list[AccountInfo]:
        """All accounts, optionally of one type, ordered by name."""
        stmt = select(Account)
        if account_type is not None:
            stmt = stmt.where(Account.account_type == AccountType(account_type).value)
        stmt = stmt.order_by(Account.name, Account.id)
        return [AccountInfo.from_model(a) for a in self.session.execute(stmt).scalars()]

    def children_of(self, uid: str) -> list[AccountInfo]:
        """Direct children of an account."""
        require_account(self.session, uid)
        stmt = select(Account).where(Account.parent_uid == uid).order_by(Account.name, Account.id)
        return [AccountInfo.from_model(a) for a in self.session.execute(stmt).scalars()]

    def descendants_of(self, uid: str) -> set[str]:
        """Uids of every account below ``uid`` (not including it)."""
        require_account(self.session, uid)
        return account_rules.descendants_of(account_parent_map(self.session), uid)

    def get_account_uid(self, row_id: int) -> str:
        return uid_for_row_id(self.session, Account, row_id)

    def get_account_row_id(self, uid: str) -> int:
        return row_id_for_uid(self.session, Account, uid)

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------

    def create_account(self, spec: AccountSpec) -> AccountInfo:
        """
        Create an account.

        Raises:
            AccountNotFoundError: If ``spec.parent_uid`` does not exist.
            ValueError: If ``spec.uid`` is already taken.
        """
        with self.context.unit_of_work():
            if spec.uid is not None and find_by_uid(self.session, Account, spec.uid) is not None:
                raise ValueError(f"Account uid already exists: {spec.uid}")
            if spec.parent_uid is not None:
                require_account(self.session, spec.parent_uid)

            account = Account(
                name=spec.name,
                account_type=spec.account_type.value,
                currency=spec.currency.code,
                parent_uid=spec.parent_uid,
            )
            if spec.uid is not None:
                account.uid = spec.uid
            self.session.add(account)
            self.session.flush()

        logger.info(
            "account_created",
            extra={
                "account_uid": account.uid,
                "account_type": account.account_type,
                "currency": account.currency,
            },
        )
        return AccountInfo.from_model(account)

    def update_account(
        self,
        uid: str,
        *,
        name: str | None = None,
        account_type: AccountType | None = None,
        currency: Currency | str | None = None,
        parent_uid=_UNCHANGED,
    ) -> AccountInfo:
        """
        Rename, retype, reparent or change the currency of an account.

        Pass ``parent_uid=None`` to move the account to the top level.

        Raises:
            AccountNotFoundError: If the account or new parent doesn't exist.
            AccountHierarchyError: If the new parent is the account itself
                or one of its descendants.
            CurrencyMismatchError: If the currency changes while splits are
                booked to the account.
        """
        with self.context.unit_of_work():
            account = require_account(self.session, uid)

            if parent_uid is not _UNCHANGED and parent_uid != account.parent_uid:
                if parent_uid is not None:
                    require_account(self.session, parent_uid)
                if account_rules.would_create_cycle(
                    account_parent_map(self.session), uid, parent_uid
                ):
                    raise AccountHierarchyError(uid, parent_uid)
                account.parent_uid = parent_uid

            if currency is not None:
                new_currency = Currency(currency) if isinstance(currency, str) else currency
                if new_currency.code != account.currency:
                    if self._split_count(uid):
                        raise CurrencyMismatchError(
                            account.currency, new_currency.code, "change account currency"
                        )
                    account.currency = new_currency.code

            if name is not None:
                if not name.strip():
                    raise ValueError("Account name must not be empty")
                account.name = name
            if account_type is not None:
                account.account_type = AccountType(account_type).value

            self.session.flush()

        logger.info("account_updated", extra={"account_uid": uid})
        return AccountInfo.from_model(account)

    def delete_account(self, uid: str) -> None:
        """
        Delete an account that nothing references.

        Raises:
            AccountNotFoundError: If the account doesn't exist.
            AccountReferencedError: If splits or child accounts reference it.
        """
        with self.context.unit_of_work():
            account = require_account(self.session, uid)
            split_count = self._split_count(uid)
            child_count = self.session.execute(
                select(func.count()).select_from(Account).where(Account.parent_uid == uid)
            ).scalar_one()
            if split_count or child_count:
                raise AccountReferencedError(uid, split_count, child_count)
            self.session.delete(account)
            self.session.flush()

        logger.info("account_deleted", extra={"account_uid": uid})

    def reassign_splits(self, from_uid: str, to_uid: str) -> int:
        """
        Move every split of ``from_uid`` onto ``to_uid``.

        Transactions that own a moved split are marked not exported.  Both
        accounts must share a currency, since split quantities are in the
        account currency.

        Returns:
            Number of splits moved.

        Raises:
            AccountNotFoundError: If either account doesn't exist.
            CurrencyMismatchError: If the accounts use different currencies.
        """
        with LogContext.bind(account_uid=from_uid), self.context.unit_of_work():
            source = require_account(self.session, from_uid)
            target = require_account(self.session, to_uid)
            if source.currency != target.currency:
                raise CurrencyMismatchError(source.currency, target.currency, "reassign splits")

            transaction_uids = select(Split.transaction_uid).where(Split.account_uid == from_uid)
            self.session.execute(
                update(Transaction)
                .where(Transaction.uid.in_(transaction_uids))
                .values(exported=False, modified_at=self.clock.now()),
                execution_options={"synchronize_session": "fetch"},
            )
            moved = self.session.execute(
                update(Split)
                .where(Split.account_uid == from_uid)
                .values(account_uid=to_uid),
                execution_options={"synchronize_session": "fetch"},
            ).rowcount

        logger.info(
            "splits_reassigned",
            extra={"from_account_uid": from_uid, "to_account_uid": to_uid, "split_count": moved},
        )
        return moved

    def _split_count(self, uid: str) -> int:
        return self.session.execute(
            select(func.count()).select_from(Split).where(Split.account_uid == uid)
        ).scalar_one()
