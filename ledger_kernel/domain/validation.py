"""
Pure ledger rule checks (no I/O).

Run by the services on in-memory state before anything is written, so a
rejected write never reaches the store.
"""

from __future__ import annotations

from collections.abc import Iterable

from ledger_kernel.domain.accounts import SplitType
from ledger_kernel.domain.money import Currency, Money
from ledger_kernel.exceptions import (
    CurrencyMismatchError,
    EmptyTransactionError,
    SplitAmountMismatchError,
    SubMinorUnitAmountError,
    UnbalancedTransactionError,
)


def imbalance(
    lines: Iterable[tuple[SplitType, Money]], currency: Currency | str
) -> Money:
    """Exact signed sum of ``(split_type, value)`` pairs, debits positive."""
    return Money.total((value.scale(split_type.sign) for split_type, value in lines), currency)


def validate_balanced(
    transaction_uid: str,
    currency: Currency | str,
    lines: Iterable[tuple[SplitType, Money]],
) -> None:
    """
    Enforce the double-entry balance law on a prospective split set.

    Raises:
        EmptyTransactionError: If there are no lines.
        CurrencyMismatchError: If a value is not in ``currency``.
        UnbalancedTransactionError: If the signed sum is not exactly zero.
    """
    lines = list(lines)
    if not lines:
        raise EmptyTransactionError(transaction_uid)
    total = imbalance(lines, currency)
    if not total.is_zero:
        raise UnbalancedTransactionError(
            transaction_uid, str(total.amount), total.currency.code
        )


def validate_split_amounts(
    split_uid: str,
    value: Money,
    quantity: Money,
    transaction_currency: Currency,
    account_currency: Currency,
) -> None:
    """
    Check a split's value/quantity pair against its transaction and account.

    Raises:
        CurrencyMismatchError: If value is not in the transaction currency or
            quantity is not in the account currency.
        SubMinorUnitAmountError: If value or quantity has a denominator
            other than its currency's minor unit.
        SplitAmountMismatchError: If both currencies agree but the amounts
            differ.
    """
    if value.currency != transaction_currency:
        raise CurrencyMismatchError(
            value.currency.code, transaction_currency.code, "record split value"
        )
    if quantity.currency != account_currency:
        raise CurrencyMismatchError(
            quantity.currency.code, account_currency.code, "record split quantity"
        )
    for amount in (value, quantity):
        if not amount.is_minor_unit_exact:
            raise SubMinorUnitAmountError(
                split_uid, str(amount.amount), amount.currency.code
            )
    if transaction_currency == account_currency and value != quantity:
        raise SplitAmountMismatchError(split_uid, str(value), str(quantity))
