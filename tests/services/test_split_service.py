"""
Tests for the split mutation protocol.

Verifies:
- Batches are validated against the prospective split set before writing
- Replacing a split keeps its identity and clears the exported flag
- Deleting the last split deletes the transaction
- Failed mutations leave storage unchanged
"""

import pytest
from sqlalchemy import func, select

from ledger_kernel.domain.accounts import SplitType
from ledger_kernel.domain.dtos import SplitSpec
from ledger_kernel.domain.money import Money
from ledger_kernel.exceptions import (
    AccountNotFoundError,
    CurrencyMismatchError,
    SplitNotFoundError,
    TransactionNotFoundError,
    UnbalancedTransactionError,
)
from ledger_kernel.models.split import Split


def usd(amount):
    return Money.of(amount, "USD")


def split_count(session):
    return session.execute(select(func.count()).select_from(Split)).scalar_one()


@pytest.fixture
def opening(post, chart, transactions):
    """A balanced 100.00 opening transaction, already exported."""
    tx = post(chart["checking"], chart["opening"], "100.00")
    transactions.mark_exported([tx.uid])
    return transactions.get_transaction(tx.uid)


def legs(tx, chart):
    debit = next(s for s in tx.splits if s.account_uid == chart["checking"].uid)
    credit = next(s for s in tx.splits if s.account_uid == chart["opening"].uid)
    return debit, credit


class TestAddSplits:
    def test_balanced_pair_added(self, splits, transactions, opening, chart, clock):
        clock.advance(30)
        added = splits.add_splits(
            [
                SplitSpec(chart["groceries"].uid, SplitType.DEBIT, usd("5"), transaction_uid=opening.uid),
                SplitSpec(chart["checking"].uid, SplitType.CREDIT, usd("5"), transaction_uid=opening.uid),
            ]
        )
        assert [s.account_uid for s in added] == [chart["groceries"].uid, chart["checking"].uid]
        assert all(s.created_at == clock.now() for s in added)

        tx = transactions.get_transaction(opening.uid)
        assert len(tx.splits) == 4
        assert tx.imbalance.is_zero
        assert not tx.exported
        assert tx.modified_at == clock.now()

    def test_single_leg_rejected_and_nothing_written(self, splits, transactions, opening, chart, session):
        before = split_count(session)
        with pytest.raises(UnbalancedTransactionError):
            splits.add_split(
                SplitSpec(chart["groceries"].uid, SplitType.DEBIT, usd("5"), transaction_uid=opening.uid)
            )
        assert split_count(session) == before
        assert transactions.get_transaction(opening.uid).exported

    def test_template_accepts_single_leg(self, splits, post, chart):
        template = post(chart["groceries"], chart["checking"], "10.00", is_template=True)
        added = splits.add_split(
            SplitSpec(chart["savings"].uid, SplitType.DEBIT, usd("3"), transaction_uid=template.uid)
        )
        assert added.transaction_uid == template.uid

    def test_transaction_uid_required(self, splits, chart):
        with pytest.raises(ValueError):
            splits.add_split(SplitSpec(chart["groceries"].uid, SplitType.DEBIT, usd("1")))

    def test_missing_transaction(self, splits, chart):
        with pytest.raises(TransactionNotFoundError):
            splits.add_split(
                SplitSpec(chart["groceries"].uid, SplitType.DEBIT, usd("1"), transaction_uid="ghost")
            )

    def test_missing_account(self, splits, opening):
        with pytest.raises(AccountNotFoundError):
            splits.add_split(
                SplitSpec("ghost", SplitType.DEBIT, usd("1"), transaction_uid=opening.uid)
            )

    def test_value_currency_must_match_transaction(self, splits, opening, chart):
        with pytest.raises(CurrencyMismatchError):
            splits.add_split(
                SplitSpec(
                    chart["groceries"].uid,
                    SplitType.DEBIT,
                    Money.of("1", "EUR"),
                    transaction_uid=opening.uid,
                )
            )

    def test_quantity_currency_must_match_account(self, splits, opening, chart):
        with pytest.raises(CurrencyMismatchError):
            splits.add_split(
                SplitSpec(
                    chart["euro_bank"].uid,
                    SplitType.DEBIT,
                    usd("1"),
                    transaction_uid=opening.uid,
                )
            )

    def test_uid_of_other_transaction_rejected(self, splits, post, opening, chart):
        other = post(chart["groceries"], chart["checking"], "1.00")
        with pytest.raises(ValueError):
            splits.add_split(
                SplitSpec(
                    chart["groceries"].uid,
                    SplitType.DEBIT,
                    usd("1"),
                    transaction_uid=opening.uid,
                    uid=other.splits[0].uid,
                )
            )

    def test_repeated_uid_in_batch_rejected(self, splits, opening, chart):
        spec = SplitSpec(
            chart["groceries"].uid, SplitType.DEBIT, usd("1"), transaction_uid=opening.uid, uid="a" * 32
        )
        with pytest.raises(ValueError):
            splits.add_splits([spec, spec])

    def test_empty_batch(self, splits):
        assert splits.add_splits([]) == []


class TestReplaceSplits:
    def test_replace_both_legs(self, splits, transactions, opening, chart, clock):
        debit, credit = legs(opening, chart)
        clock.advance(60)
        splits.add_splits(
            [
                SplitSpec(
                    chart["checking"].uid,
                    SplitType.DEBIT,
                    usd("80"),
                    transaction_uid=opening.uid,
                    uid=debit.uid,
                    memo="corrected",
                ),
                SplitSpec(
                    chart["opening"].uid,
                    SplitType.CREDIT,
                    usd("80"),
                    transaction_uid=opening.uid,
                    uid=credit.uid,
                ),
            ]
        )
        tx = transactions.get_transaction(opening.uid)
        new_debit, _ = legs(tx, chart)
        assert len(tx.splits) == 2
        assert new_debit.row_id == debit.row_id
        assert new_debit.created_at == debit.created_at
        assert new_debit.value == usd("80")
        assert new_debit.memo == "corrected"
        assert not tx.exported
        assert tx.modified_at == clock.now()

    def test_replacing_one_leg_must_keep_balance(self, splits, transactions, opening, chart):
        debit, _ = legs(opening, chart)
        with pytest.raises(UnbalancedTransactionError):
            splits.add_split(
                SplitSpec(
                    chart["checking"].uid,
                    SplitType.DEBIT,
                    usd("80"),
                    transaction_uid=opening.uid,
                    uid=debit.uid,
                )
            )
        assert legs(transactions.get_transaction(opening.uid), chart)[0].value == usd("100")

    def test_move_leg_to_other_account(self, splits, opening, chart):
        debit, _ = legs(opening, chart)
        moved = splits.add_split(
            SplitSpec(
                chart["savings"].uid,
                SplitType.DEBIT,
                usd("100"),
                transaction_uid=opening.uid,
                uid=debit.uid,
            )
        )
        assert moved.account_uid == chart["savings"].uid
        assert moved.row_id == debit.row_id


class TestDeleteSplit:
    def test_delete_non_last_split(self, splits, transactions, opening, chart, clock):
        debit, _ = legs(opening, chart)
        clock.advance(5)
        result = splits.delete_split(debit.uid)
        assert result.transaction_uid == opening.uid
        assert not result.transaction_deleted

        tx = transactions.get_transaction(opening.uid)
        assert len(tx.splits) == 1
        assert not tx.exported
        assert tx.modified_at == clock.now()

    def test_delete_last_split_deletes_transaction(self, splits, transactions, opening, chart):
        debit, credit = legs(opening, chart)
        splits.delete_split(debit.uid)
        result = splits.delete_split(credit.uid)
        assert result.transaction_deleted
        with pytest.raises(TransactionNotFoundError):
            transactions.get_transaction(opening.uid)

    def test_delete_missing_split_changes_nothing(self, splits, session, opening):
        before = split_count(session)
        with pytest.raises(SplitNotFoundError):
            splits.delete_split("missing")
        assert split_count(session) == before

    def test_delete_by_row_id(self, splits, opening, chart):
        debit, _ = legs(opening, chart)
        result = splits.delete_split_by_row_id(debit.row_id)
        assert result.split_uid == debit.uid
        with pytest.raises(SplitNotFoundError):
            splits.get_split(debit.uid)

    def test_delete_by_unknown_row_id(self, splits):
        with pytest.raises(SplitNotFoundError) as exc_info:
            splits.delete_split_by_row_id(9999)
        assert exc_info.value.id_kind == "row_id"

    def test_deletion_is_logged(self, splits, opening, chart, captured_logs):
        debit, credit = legs(opening, chart)
        splits.delete_split(debit.uid)
        splits.delete_split(credit.uid)

        messages = [r["message"] for r in captured_logs()]
        assert messages.count("split_deleted") == 2
        assert messages.count("transaction_deleted") == 1
        last = [r for r in captured_logs() if r["message"] == "split_deleted"][-1]
        assert last["split_uid"] == credit.uid
        assert last["remaining_splits"] == 0
