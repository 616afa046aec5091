"""
Tests for TransactionService.

Verifies:
- Transactions are created atomically with their splits
- The balance law is enforced before anything is written
- Templates are exempt from the balance law but not from owning a split
- Cascade delete, exported flag and row id translation
"""

from datetime import timedelta

import pytest
from sqlalchemy import func, select

from ledger_kernel.domain.accounts import SplitType
from ledger_kernel.domain.dtos import SplitSpec, TransactionSpec
from ledger_kernel.domain.money import Money
from ledger_kernel.exceptions import (
    AccountNotFoundError,
    CurrencyMismatchError,
    EmptyTransactionError,
    SplitAmountMismatchError,
    SubMinorUnitAmountError,
    TransactionNotFoundError,
    UnbalancedTransactionError,
)
from ledger_kernel.models.split import Split
from ledger_kernel.models.transaction import Transaction
from tests.conftest import T0


def count(session, model):
    return session.execute(select(func.count()).select_from(model)).scalar_one()


class TestCreateTransaction:
    def test_balanced_transaction(self, transactions, chart, clock):
        tx = transactions.create_transaction(
            TransactionSpec(timestamp=T0, currency="USD", description="Opening"),
            [
                SplitSpec(chart["checking"].uid, SplitType.DEBIT, Money.of("100.00", "USD")),
                SplitSpec(chart["opening"].uid, SplitType.CREDIT, Money.of("100.00", "USD")),
            ],
        )
        assert tx.description == "Opening"
        assert len(tx.splits) == 2
        assert tx.imbalance.is_zero
        assert not tx.exported
        assert tx.modified_at == clock.now()
        assert all(s.created_at == clock.now() for s in tx.splits)

    def test_signed_values_sum_to_zero(self, post, chart):
        tx = post(chart["groceries"], chart["checking"], "12.34")
        total = Money.total((s.signed_value for s in tx.splits), "USD")
        assert total == Money.zero("USD")

    def test_unbalanced_rejected_before_write(self, transactions, chart, session):
        with pytest.raises(UnbalancedTransactionError) as exc_info:
            transactions.create_transaction(
                TransactionSpec(timestamp=T0, currency="USD"),
                [
                    SplitSpec(chart["checking"].uid, SplitType.DEBIT, Money.of("100", "USD")),
                    SplitSpec(chart["opening"].uid, SplitType.CREDIT, Money.of("90", "USD")),
                ],
            )
        assert exc_info.value.imbalance == "10.00"
        assert count(session, Transaction) == 0
        assert count(session, Split) == 0

    def test_empty_rejected(self, transactions):
        with pytest.raises(EmptyTransactionError):
            transactions.create_transaction(TransactionSpec(timestamp=T0, currency="USD"), [])

    def test_unknown_account_rejected(self, transactions, chart, session):
        with pytest.raises(AccountNotFoundError):
            transactions.create_transaction(
                TransactionSpec(timestamp=T0, currency="USD"),
                [
                    SplitSpec(chart["checking"].uid, SplitType.DEBIT, Money.of("1", "USD")),
                    SplitSpec("ghost", SplitType.CREDIT, Money.of("1", "USD")),
                ],
            )
        assert count(session, Transaction) == 0

    def test_value_in_wrong_currency_rejected(self, transactions, chart):
        with pytest.raises(CurrencyMismatchError):
            transactions.create_transaction(
                TransactionSpec(timestamp=T0, currency="USD"),
                [SplitSpec(chart["checking"].uid, SplitType.DEBIT, Money.of("1", "EUR"))],
            )

    def test_same_currency_value_quantity_mismatch(self, transactions, chart):
        with pytest.raises(SplitAmountMismatchError):
            transactions.create_transaction(
                TransactionSpec(timestamp=T0, currency="USD"),
                [
                    SplitSpec(
                        chart["checking"].uid,
                        SplitType.DEBIT,
                        Money.of("1", "USD"),
                        quantity=Money.of("2", "USD"),
                    ),
                    SplitSpec(chart["opening"].uid, SplitType.CREDIT, Money.of("1", "USD")),
                ],
            )

    def test_sub_minor_value_rejected_before_write(self, transactions, chart, session):
        with pytest.raises(SubMinorUnitAmountError):
            transactions.create_transaction(
                TransactionSpec(timestamp=T0, currency="USD"),
                [
                    SplitSpec(chart["checking"].uid, SplitType.DEBIT, Money.of("0.125", "USD")),
                    SplitSpec(chart["opening"].uid, SplitType.CREDIT, Money.of("0.125", "USD")),
                ],
            )
        assert count(session, Transaction) == 0
        assert count(session, Split) == 0

    def test_cross_currency_split(self, transactions, chart):
        tx = transactions.create_transaction(
            TransactionSpec(timestamp=T0, currency="USD"),
            [
                SplitSpec(
                    chart["euro_bank"].uid,
                    SplitType.DEBIT,
                    Money.of("110.00", "USD"),
                    quantity=Money.of("100.00", "EUR"),
                ),
                SplitSpec(chart["checking"].uid, SplitType.CREDIT, Money.of("110.00", "USD")),
            ],
        )
        euro_split = next(s for s in tx.splits if s.account_uid == chart["euro_bank"].uid)
        assert euro_split.quantity == Money.of("100", "EUR")
        assert euro_split.value == Money.of("110", "USD")

    def test_template_may_be_unbalanced(self, transactions, chart):
        tx = transactions.create_transaction(
            TransactionSpec(timestamp=T0, currency="USD", is_template=True),
            [SplitSpec(chart["groceries"].uid, SplitType.DEBIT, Money.of("50", "USD"))],
        )
        assert tx.is_template
        assert not tx.imbalance.is_zero

    def test_duplicate_uid_rejected(self, post, transactions, chart):
        tx = post(chart["checking"], chart["opening"], "1.00")
        with pytest.raises(ValueError):
            transactions.create_transaction(
                TransactionSpec(timestamp=T0, currency="USD", uid=tx.uid),
                [
                    SplitSpec(chart["checking"].uid, SplitType.DEBIT, Money.of("1", "USD")),
                    SplitSpec(chart["opening"].uid, SplitType.CREDIT, Money.of("1", "USD")),
                ],
            )


class TestReadAndDelete:
    def test_get_missing(self, transactions):
        with pytest.raises(TransactionNotFoundError):
            transactions.get_transaction("missing")

    def test_row_id_translation(self, transactions, post, chart):
        tx = post(chart["checking"], chart["opening"], "1.00")
        assert transactions.get_transaction_row_id(tx.uid) == tx.row_id
        assert transactions.get_transaction_uid(tx.row_id) == tx.uid
        with pytest.raises(TransactionNotFoundError) as exc_info:
            transactions.get_transaction_uid(tx.row_id + 100)
        assert exc_info.value.id_kind == "row_id"

    def test_list_excludes_templates_by_default(self, transactions, post, chart):
        post(chart["checking"], chart["opening"], "1.00")
        post(chart["groceries"], chart["checking"], "1.00", is_template=True)
        assert len(transactions.list_transactions()) == 1
        assert len(transactions.list_transactions(include_templates=True)) == 2

    def test_list_modified_since(self, transactions, post, chart, clock):
        post(chart["checking"], chart["opening"], "1.00")
        clock.advance(60)
        later = post(chart["groceries"], chart["checking"], "2.00")
        recent = transactions.list_transactions(modified_since=clock.now() - timedelta(seconds=1))
        assert [t.uid for t in recent] == [later.uid]

    def test_delete_cascades_to_splits(self, transactions, post, chart, session):
        tx = post(chart["checking"], chart["opening"], "1.00")
        transactions.delete_transaction(tx.uid)
        assert count(session, Transaction) == 0
        assert count(session, Split) == 0

    def test_mark_exported(self, transactions, post, chart):
        a = post(chart["checking"], chart["opening"], "1.00")
        b = post(chart["groceries"], chart["checking"], "1.00")
        assert transactions.mark_exported([a.uid]) == 1
        assert transactions.get_transaction(a.uid).exported
        assert not transactions.get_transaction(b.uid).exported
        assert transactions.mark_exported([]) == 0
