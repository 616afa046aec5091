"""
Typed Exception Hierarchy for the Ledger Kernel.

===============================================================================
WHY TYPED EXCEPTIONS
===============================================================================

Callers of a ledger need to react to failures precisely: a currency mix-up
is a programming error in the caller, a missing transaction is a stale
reference in the UI, an unbalanced transaction is a user input problem.
Matching on message text for any of these is fragile, so:

  1. Every error has a TYPED exception class (catch by type, not message)
  2. Every exception has a CODE attribute (machine-readable, API-safe)
  3. Exceptions carry structured DATA (not just a message string)

Example:
    try:
        splits.add_split(spec)
    except UnbalancedTransactionError as e:
        show_error(f"Off by {e.imbalance}")
    except NotFoundError as e:
        refresh_view(e.identifier)

===============================================================================
EXCEPTION HIERARCHY
===============================================================================

All exceptions inherit from LedgerKernelError:

    LedgerKernelError (base)
    |
    +-- CurrencyError
    |   +-- InvalidCurrencyError
    |   +-- CurrencyMismatchError
    |
    +-- NotFoundError
    |   +-- AccountNotFoundError
    |   +-- TransactionNotFoundError
    |   +-- SplitNotFoundError
    |
    +-- InvariantViolationError
    |   +-- UnbalancedTransactionError
    |   +-- EmptyTransactionError
    |   +-- SplitAmountMismatchError
    |   +-- SubMinorUnitAmountError
    |   +-- AccountReferencedError
    |   +-- AccountHierarchyError
    |
    +-- ExportError
        +-- MalformedExportNameError
        +-- ExporterError

===============================================================================
ERROR CODES - QUICK REFERENCE
===============================================================================

Category   | Code                   | When Raised
-----------|------------------------|-------------------------------------------
Currency   | INVALID_CURRENCY       | Not a known ISO 4217 code
           | CURRENCY_MISMATCH      | Arithmetic or balance query mixes currencies
-----------|------------------------|-------------------------------------------
Not found  | ACCOUNT_NOT_FOUND      | Account uid / row id does not exist
           | TRANSACTION_NOT_FOUND  | Transaction uid / row id does not exist
           | SPLIT_NOT_FOUND        | Split uid / row id does not exist
-----------|------------------------|-------------------------------------------
Invariant  | UNBALANCED_TRANSACTION | Split values do not sum to zero
           | EMPTY_TRANSACTION      | Transaction persisted without splits
           | SPLIT_AMOUNT_MISMATCH  | value/quantity disagree for one currency
           | SUB_MINOR_UNIT_AMOUNT  | Split amount finer than the minor unit
           | ACCOUNT_REFERENCED     | Account delete would orphan splits/children
           | ACCOUNT_HIERARCHY      | Reparent would create a cycle
-----------|------------------------|-------------------------------------------
Export     | MALFORMED_EXPORT_NAME  | File name does not carry a timestamp
           | EXPORTER_FAILED        | A format writer failed to generate output

===============================================================================
HANDLING PATTERNS
===============================================================================

1. Invariant violations are raised before anything is written.  The unit
   of work that was open is rolled back and the store is unchanged.

2. MalformedExportNameError never escapes parse_export_time(); the export
   lifecycle logs it and reports the epoch instead.

3. ExporterError always names the format and chains the original cause
   (``raise ExporterError(...) from exc``).
"""


class LedgerKernelError(Exception):
    """
    Base exception for all ledger kernel errors.

    All subclasses must have a `code` class attribute for machine-readable
    error identification.
    """

    code: str = "LEDGER_KERNEL_ERROR"


# Currency-related exceptions


class CurrencyError(LedgerKernelError):
    """Base exception for currency-related errors."""

    code: str = "CURRENCY_ERROR"


class InvalidCurrencyError(CurrencyError, ValueError):
    """Invalid ISO 4217 currency code provided."""

    code: str = "INVALID_CURRENCY"

    def __init__(self, currency: str):
        self.currency = currency
        super().__init__(f"Invalid ISO 4217 currency code: '{currency}'")


class CurrencyMismatchError(CurrencyError):
    """Attempted operation on mismatched currencies."""

    code: str = "CURRENCY_MISMATCH"

    def __init__(self, currency1: str, currency2: str, operation: str | None = None):
        self.currency1 = currency1
        self.currency2 = currency2
        self.operation = operation
        prefix = f"Cannot {operation}: " if operation else ""
        super().__init__(f"{prefix}Currency mismatch: {currency1} vs {currency2}")


# Lookup exceptions


class NotFoundError(LedgerKernelError):
    """
    Base exception for lookups that miss.

    ``identifier`` is either a unique id (str) or a storage row id (int);
    ``id_kind`` says which one the caller asked for.
    """

    code: str = "NOT_FOUND"
    entity: str = "record"

    def __init__(self, identifier: str | int, id_kind: str = "uid"):
        self.identifier = identifier
        self.id_kind = id_kind
        super().__init__(f"{self.entity.capitalize()} not found: {id_kind}={identifier}")


class AccountNotFoundError(NotFoundError):
    """Account was not found."""

    code: str = "ACCOUNT_NOT_FOUND"
    entity: str = "account"


class TransactionNotFoundError(NotFoundError):
    """Transaction was not found."""

    code: str = "TRANSACTION_NOT_FOUND"
    entity: str = "transaction"


class SplitNotFoundError(NotFoundError):
    """Split was not found."""

    code: str = "SPLIT_NOT_FOUND"
    entity: str = "split"


# Invariant exceptions


class InvariantViolationError(LedgerKernelError):
    """Base exception for writes rejected because they would break the ledger."""

    code: str = "INVARIANT_VIOLATION"


class UnbalancedTransactionError(InvariantViolationError):
    """Signed split values of a transaction do not sum to zero."""

    code: str = "UNBALANCED_TRANSACTION"

    def __init__(self, transaction_uid: str, imbalance: str, currency: str):
        self.transaction_uid = transaction_uid
        self.imbalance = imbalance
        self.currency = currency
        super().__init__(
            f"Transaction {transaction_uid} is unbalanced by {imbalance} {currency}"
        )


class EmptyTransactionError(InvariantViolationError):
    """A transaction would be persisted without any splits."""

    code: str = "EMPTY_TRANSACTION"

    def __init__(self, transaction_uid: str):
        self.transaction_uid = transaction_uid
        super().__init__(f"Transaction {transaction_uid} must own at least one split")


class SplitAmountMismatchError(InvariantViolationError):
    """Split value and quantity disagree although both use the same currency."""

    code: str = "SPLIT_AMOUNT_MISMATCH"

    def __init__(self, split_uid: str, value: str, quantity: str):
        self.split_uid = split_uid
        self.value = value
        self.quantity = quantity
        super().__init__(
            f"Split {split_uid}: value {value} and quantity {quantity} "
            "must be equal when transaction and account share a currency"
        )


class SubMinorUnitAmountError(InvariantViolationError):
    """Stored split amount is finer than its currency's minor unit."""

    code: str = "SUB_MINOR_UNIT_AMOUNT"

    def __init__(self, split_uid: str, amount: str, currency: str):
        self.split_uid = split_uid
        self.amount = amount
        self.currency = currency
        super().__init__(
            f"Split {split_uid}: amount {amount} is not a whole number of "
            f"{currency} minor units"
        )


class AccountReferencedError(InvariantViolationError):
    """Account cannot be deleted because splits or child accounts reference it."""

    code: str = "ACCOUNT_REFERENCED"

    def __init__(self, account_uid: str, split_count: int, child_count: int):
        self.account_uid = account_uid
        self.split_count = split_count
        self.child_count = child_count
        super().__init__(
            f"Account {account_uid} cannot be deleted: referenced by "
            f"{split_count} split(s) and {child_count} child account(s)"
        )


class AccountHierarchyError(InvariantViolationError):
    """Reparenting would introduce a cycle into the account forest."""

    code: str = "ACCOUNT_HIERARCHY"

    def __init__(self, account_uid: str, parent_uid: str):
        self.account_uid = account_uid
        self.parent_uid = parent_uid
        super().__init__(
            f"Account {account_uid} cannot be placed under {parent_uid}: "
            "the parent is the account itself or one of its descendants"
        )


# Export exceptions


class ExportError(LedgerKernelError):
    """Base exception for export lifecycle errors."""

    code: str = "EXPORT_ERROR"


class MalformedExportNameError(ExportError):
    """Export file name does not start with a parseable timestamp."""

    code: str = "MALFORMED_EXPORT_NAME"

    def __init__(self, filename: str, reason: str):
        self.filename = filename
        self.reason = reason
        super().__init__(f"Cannot read export time from '{filename}': {reason}")


class ExporterError(ExportError):
    """A format writer failed; wraps the format name and, when known, the cause."""

    code: str = "EXPORTER_FAILED"

    def __init__(
        self,
        export_format: str,
        message: str | None = None,
        cause: BaseException | None = None,
    ):
        self.export_format = export_format
        self.cause = cause
        detail = message or (str(cause) if cause is not None else None)
        self.detail = detail
        text = f"Failed to generate {export_format}"
        if detail:
            text = f"{text}-{detail}"
        super().__init__(text)
