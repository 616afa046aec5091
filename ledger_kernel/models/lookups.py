"""
Row lookups shared by services and selectors.

Each ``require_*`` helper returns the ORM row or raises the typed
NotFoundError for the entity, naming whether a uid or a row id was asked
for.
"""

from sqlalchemy import select
from sqlalchemy.orm import Session

from ledger_kernel.exceptions import (
    AccountNotFoundError,
    SplitNotFoundError,
    TransactionNotFoundError,
)
from ledger_kernel.models.account import Account
from ledger_kernel.models.split import Split
from ledger_kernel.models.transaction import Transaction

_ERRORS = {
    Account: AccountNotFoundError,
    Transaction: TransactionNotFoundError,
    Split: SplitNotFoundError,
}


def find_by_uid(session: Session, model, uid: str):
    """Row with ``uid``, or None."""
    return session.execute(select(model).where(model.uid == uid)).scalar_one_or_none()


def require_by_uid(session: Session, model, uid: str):
    row = find_by_uid(session, model, uid)
    if row is None:
        raise _ERRORS[model](uid)
    return row


def require_by_row_id(session: Session, model, row_id: int):
    row = session.get(model, row_id)
    if row is None:
        raise _ERRORS[model](row_id, id_kind="row_id")
    return row


def require_account(session: Session, uid: str) -> Account:
    return require_by_uid(session, Account, uid)


def require_transaction(session: Session, uid: str) -> Transaction:
    return require_by_uid(session, Transaction, uid)


def require_split(session: Session, uid: str) -> Split:
    return require_by_uid(session, Split, uid)


def uid_for_row_id(session: Session, model, row_id: int) -> str:
    """Translate a storage row id to its uid."""
    uid = session.execute(select(model.uid).where(model.id == row_id)).scalar_one_or_none()
    if uid is None:
        raise _ERRORS[model](row_id, id_kind="row_id")
    return uid


def row_id_for_uid(session: Session, model, uid: str) -> int:
    """Translate a uid to its storage row id."""
    row_id = session.execute(select(model.id).where(model.uid == uid)).scalar_one_or_none()
    if row_id is None:
        raise _ERRORS[model](uid)
    return row_id


def account_parent_map(session: Session) -> dict[str, str | None]:
    """``{uid: parent_uid}`` for every account."""
    rows = session.execute(select(Account.uid, Account.parent_uid)).all()
    return {uid: parent_uid for uid, parent_uid in rows}
