"""
Module: ledger_kernel.db.types
Responsibility: Annotated column aliases shared by the models, so every
    amount and identifier column is declared the same way.

Amounts are stored as two integer columns (numerator, denominator) rather
than a NUMERIC, so SUM() over them in SQL stays exact on every backend.
"""

from typing import Annotated

from sqlalchemy import BigInteger, String

# Numerator or power-of-ten denominator of a stored amount
AmountPart = Annotated[int, BigInteger]

# ISO 4217 currency code (e.g., "USD", "EUR", "JPY")
CurrencyCode = Annotated[str, String(3)]

# Reference to another row's uid
UidRef = Annotated[str, String(32)]

# Split direction ("debit" / "credit") and account type names
ShortCode = Annotated[str, String(20)]

# Free text (descriptions, memos)
LongText = Annotated[str, String(2048)]
