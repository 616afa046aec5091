"""
Tests for the account type table and hierarchy helpers.

Verifies:
- Every account type maps to exactly one normal balance, deterministically
- Descendant expansion over a parent map, with cycle detection
- Reparent cycle checks
"""

import pytest

from ledger_kernel.domain.accounts import (
    _NORMAL_BALANCE,
    AccountType,
    NormalBalance,
    SplitType,
    ancestors_of,
    descendants_of,
    expand_subtrees,
    normal_balance_sign,
    would_create_cycle,
)
from ledger_kernel.exceptions import AccountHierarchyError

DEBIT_NORMAL = {
    AccountType.CASH,
    AccountType.BANK,
    AccountType.ASSET,
    AccountType.STOCK,
    AccountType.MUTUAL,
    AccountType.RECEIVABLE,
    AccountType.EXPENSE,
}


class TestNormalBalance:
    @pytest.mark.parametrize("account_type", list(AccountType))
    def test_documented_table(self, account_type):
        expected = NormalBalance.DEBIT if account_type in DEBIT_NORMAL else NormalBalance.CREDIT
        assert normal_balance_sign(account_type) is expected

    @pytest.mark.parametrize("account_type", list(AccountType))
    def test_deterministic(self, account_type):
        results = {normal_balance_sign(account_type) for _ in range(5)}
        assert len(results) == 1

    def test_table_covers_every_account_type(self):
        assert set(_NORMAL_BALANCE) == set(AccountType)

    def test_accepts_string_values(self):
        assert normal_balance_sign("liability") is NormalBalance.CREDIT

    def test_unknown_type(self):
        with pytest.raises(ValueError):
            normal_balance_sign("bogus")

    def test_split_type_sign(self):
        assert SplitType.DEBIT.sign == 1
        assert SplitType.CREDIT.sign == -1


PARENTS = {
    "root": None,
    "assets": "root",
    "checking": "assets",
    "savings": "assets",
    "sub_savings": "savings",
    "expenses": "root",
    "orphan": None,
}


class TestHierarchy:
    def test_descendants(self):
        assert descendants_of(PARENTS, "assets") == {"checking", "savings", "sub_savings"}
        assert descendants_of(PARENTS, "root") == {
            "assets",
            "checking",
            "savings",
            "sub_savings",
            "expenses",
        }

    def test_leaf_has_no_descendants(self):
        assert descendants_of(PARENTS, "checking") == set()
        assert descendants_of(PARENTS, "unknown") == set()

    def test_cycle_detected(self):
        cyclic = {"a": "c", "b": "a", "c": "b"}
        with pytest.raises(AccountHierarchyError):
            descendants_of(cyclic, "a")

    def test_ancestors(self):
        assert ancestors_of(PARENTS, "sub_savings") == ["savings", "assets", "root"]
        assert ancestors_of(PARENTS, "root") == []

    def test_would_create_cycle(self):
        assert would_create_cycle(PARENTS, "assets", "assets")
        assert would_create_cycle(PARENTS, "assets", "sub_savings")
        assert not would_create_cycle(PARENTS, "savings", "expenses")
        assert not would_create_cycle(PARENTS, "savings", None)

    def test_expand_subtrees(self):
        assert expand_subtrees(PARENTS, ["savings", "expenses"]) == {
            "savings",
            "sub_savings",
            "expenses",
        }
