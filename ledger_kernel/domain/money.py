"""
Money -- Immutable exact-rational monetary value objects.

Responsibility:
    Provides Currency and Money, the value types used for every amount in
    the ledger.  Money is a numerator/denominator pair tied to a currency,
    so sums over any number of splits are exact; the only lossy step is an
    explicit presentation rounding (``round()`` / ``to_decimal_string()``).

Architecture position:
    Kernel > Domain -- pure functional core, zero I/O.
    Imported by every other domain module, by the ORM models (to rebuild
    amounts from stored numerator/denominator columns) and by selectors.

Invariants enforced:
    - denominator is always a positive power of ten and never smaller than
      the currency's minor-unit denominator (100 for USD, 1 for JPY).
      Values are kept in canonical form: trailing factors of ten above the
      minor unit are reduced away, so equal amounts compare equal field
      by field.
    - Arithmetic and ordering between different currencies raise
      CurrencyMismatchError; no partial result is produced.
    - Floats are rejected at construction.

Failure modes:
    - InvalidCurrencyError on unknown currency codes.
    - CurrencyMismatchError on cross-currency add/subtract/compare.
    - TypeError on float amounts or non-integer numerators/factors.
    - ValueError on a denominator that is not a positive power of ten.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from decimal import Decimal, InvalidOperation

from ledger_kernel.domain.currency import CurrencyRegistry
from ledger_kernel.exceptions import CurrencyMismatchError


@dataclass(frozen=True, slots=True)
class Currency:
    """
    ISO 4217 currency code value object.

    Contract:
        Wraps a three-letter ISO 4217 code, normalized to uppercase.
        Unknown codes are rejected immediately with InvalidCurrencyError.
    """

    code: str

    def __post_init__(self) -> None:
        object.__setattr__(self, "code", CurrencyRegistry.validate(self.code))

    @property
    def decimal_places(self) -> int:
        """Number of minor-unit digits (2 for USD, 0 for JPY, 3 for KWD)."""
        return CurrencyRegistry.get_decimal_places(self.code)

    @property
    def minor_unit_denominator(self) -> int:
        """Denominator of one minor unit (100 for USD, 1 for JPY)."""
        return 10**self.decimal_places

    @property
    def name(self) -> str:
        info = CurrencyRegistry.get_info(self.code)
        return info.name if info else self.code

    def __str__(self) -> str:
        return self.code

    def __repr__(self) -> str:
        return f"Currency({self.code!r})"


def _is_power_of_ten(value: int) -> bool:
    while value > 1 and value % 10 == 0:
        value //= 10
    return value == 1


def _digits(denominator: int) -> int:
    """Decimal digits represented by a power-of-ten denominator."""
    return len(str(denominator)) - 1


def _round_half_up(numerator: int, factor: int) -> int:
    """Divide by ``factor``, rounding halves away from zero."""
    quotient, remainder = divmod(abs(numerator), factor)
    if remainder * 2 >= factor:
        quotient += 1
    return -quotient if numerator < 0 else quotient


@dataclass(frozen=True, slots=True)
class Money:
    """
    Exact monetary amount: ``numerator / denominator`` units of ``currency``.

    Contract:
        Immutable.  Every arithmetic operation returns a new Money.  The
        amount is never rounded implicitly; callers round for display with
        ``round()`` or ``to_decimal_string()``, both ROUND_HALF_UP (halves go
        away from zero).

    Guarantees:
        - Same-currency add/subtract/compare only (CurrencyMismatchError).
        - add/subtract work over the common denominator (the lcm of two
          powers of ten is the larger one) and renormalize.
        - scale() multiplies the numerator; the denominator is unchanged.

    Non-goals:
        - No currency conversion and no division.
    """

    numerator: int
    denominator: int
    currency: Currency

    def __post_init__(self) -> None:
        if isinstance(self.currency, str):
            object.__setattr__(self, "currency", Currency(self.currency))
        elif not isinstance(self.currency, Currency):
            raise TypeError(f"currency must be Currency or str, got {type(self.currency)}")

        for name in ("numerator", "denominator"):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, int):
                raise TypeError(f"Money {name} must be int, got {type(value).__name__}")

        if self.denominator <= 0 or not _is_power_of_ten(self.denominator):
            raise ValueError(
                f"Money denominator must be a positive power of ten, got {self.denominator}"
            )

        numerator, denominator = self.numerator, self.denominator
        minor = self.currency.minor_unit_denominator
        if denominator < minor:
            numerator *= minor // denominator
            denominator = minor
        while denominator > minor and numerator % 10 == 0:
            numerator //= 10
            denominator //= 10
        object.__setattr__(self, "numerator", numerator)
        object.__setattr__(self, "denominator", denominator)

    # ------------------------------------------------------------------
    # Construction
    # ------------------------------------------------------------------

    @classmethod
    def of(cls, amount: Decimal | str | int, currency: str | Currency) -> Money:
        """
        Build Money from a decimal amount, exactly.

        Raises:
            TypeError: If amount is a float.
            ValueError: If amount is not a finite number.
        """
        if isinstance(amount, float):
            raise TypeError("Money cannot be built from float; pass a str or Decimal")
        if isinstance(amount, int) and not isinstance(amount, bool):
            return cls(amount, 1, currency)
        try:
            value = amount if isinstance(amount, Decimal) else Decimal(str(amount).strip())
        except InvalidOperation as e:
            raise ValueError(f"Invalid amount: {amount}") from e
        if not value.is_finite():
            raise ValueError(f"Invalid amount: {amount}")
        sign, digits, exponent = value.as_tuple()
        numerator = int("".join(map(str, digits)) or "0")
        if sign:
            numerator = -numerator
        if exponent >= 0:
            return cls(numerator * 10**exponent, 1, currency)
        return cls(numerator, 10**-exponent, currency)

    @classmethod
    def zero(cls, currency: str | Currency) -> Money:
        """Create a zero amount in the given currency."""
        return cls(0, 1, currency)

    @classmethod
    def from_minor_units(cls, units: int, currency: str | Currency) -> Money:
        """Money from an integer count of minor units (cents for USD)."""
        if isinstance(currency, str):
            currency = Currency(currency)
        return cls(units, currency.minor_unit_denominator, currency)

    @classmethod
    def total(cls, values: Iterable[Money], currency: str | Currency) -> Money:
        """Exact sum of ``values``; zero in ``currency`` when empty."""
        result = cls.zero(currency)
        for value in values:
            result = result.add(value)
        return result

    # ------------------------------------------------------------------
    # Inspection
    # ------------------------------------------------------------------

    @property
    def amount(self) -> Decimal:
        """The exact amount as a Decimal (no rounding)."""
        return Decimal(f"{self.numerator}E-{_digits(self.denominator)}")

    @property
    def is_zero(self) -> bool:
        return self.numerator == 0

    @property
    def is_positive(self) -> bool:
        return self.numerator > 0

    @property
    def is_negative(self) -> bool:
        return self.numerator < 0

    @property
    def is_minor_unit_exact(self) -> bool:
        """True when no rounding is needed to present this amount."""
        return self.denominator == self.currency.minor_unit_denominator

    # ------------------------------------------------------------------
    # Arithmetic
    # ------------------------------------------------------------------

    def _require_same_currency(self, other: Money, operation: str) -> None:
        if self.currency != other.currency:
            raise CurrencyMismatchError(self.currency.code, other.currency.code, operation)

    def _aligned(self, other: Money) -> tuple[int, int, int]:
        """Both numerators over the common denominator, plus that denominator."""
        common = max(self.denominator, other.denominator)
        return (
            self.numerator * (common // self.denominator),
            other.numerator * (common // other.denominator),
            common,
        )

    def add(self, other: Money) -> Money:
        self._require_same_currency(other, "add")
        left, right, common = self._aligned(other)
        return Money(left + right, common, self.currency)

    def subtract(self, other: Money) -> Money:
        self._require_same_currency(other, "subtract")
        left, right, common = self._aligned(other)
        return Money(left - right, common, self.currency)

    def negate(self) -> Money:
        return Money(-self.numerator, self.denominator, self.currency)

    def scale(self, by: int) -> Money:
        """Multiply by an integer factor; the denominator is unchanged."""
        if isinstance(by, bool) or not isinstance(by, int):
            raise TypeError(f"Money can only be scaled by int, got {type(by).__name__}")
        return Money(self.numerator * by, self.denominator, self.currency)

    def compare(self, other: Money) -> int:
        """-1, 0 or 1 as self is less than, equal to or greater than other."""
        self._require_same_currency(other, "compare")
        left = self.numerator * other.denominator
        right = other.numerator * self.denominator
        return (left > right) - (left < right)

    # ------------------------------------------------------------------
    # Presentation rounding
    # ------------------------------------------------------------------

    def _numerator_at(self, digits: int) -> int:
        """Numerator over ``10**digits``, rounded half-up when precision drops."""
        current = _digits(self.denominator)
        if digits >= current:
            return self.numerator * 10 ** (digits - current)
        return _round_half_up(self.numerator, 10 ** (current - digits))

    def round(self) -> Money:
        """Round to the currency's minor unit (ROUND_HALF_UP)."""
        digits = self.currency.decimal_places
        return Money(self._numerator_at(digits), 10**digits, self.currency)

    def to_decimal_string(self, precision: int | None = None) -> str:
        """
        Fixed-point string with ``precision`` fractional digits.

        Defaults to the currency's minor-unit count.  This is the only lossy
        conversion of a Money value and uses ROUND_HALF_UP.
        """
        if precision is None:
            precision = self.currency.decimal_places
        if precision < 0:
            raise ValueError(f"precision must be >= 0, got {precision}")
        scaled = self._numerator_at(precision)
        sign = "-" if scaled < 0 else ""
        whole, fraction = divmod(abs(scaled), 10**precision)
        if precision == 0:
            return f"{sign}{whole}"
        return f"{sign}{whole}.{fraction:0{precision}d}"

    # ------------------------------------------------------------------
    # Operators
    # ------------------------------------------------------------------

    def __add__(self, other: Money) -> Money:
        if not isinstance(other, Money):
            return NotImplemented
        return self.add(other)

    def __sub__(self, other: Money) -> Money:
        if not isinstance(other, Money):
            return NotImplemented
        return self.subtract(other)

    def __neg__(self) -> Money:
        return self.negate()

    def __abs__(self) -> Money:
        return self.negate() if self.is_negative else self

    def __mul__(self, factor: int) -> Money:
        if isinstance(factor, bool) or not isinstance(factor, int):
            return NotImplemented
        return self.scale(factor)

    def __rmul__(self, factor: int) -> Money:
        return self.__mul__(factor)

    def __lt__(self, other: Money) -> bool:
        if not isinstance(other, Money):
            return NotImplemented
        return self.compare(other) < 0

    def __le__(self, other: Money) -> bool:
        if not isinstance(other, Money):
            return NotImplemented
        return self.compare(other) <= 0

    def __gt__(self, other: Money) -> bool:
        if not isinstance(other, Money):
            return NotImplemented
        return self.compare(other) > 0

    def __ge__(self, other: Money) -> bool:
        if not isinstance(other, Money):
            return NotImplemented
        return self.compare(other) >= 0

    def __str__(self) -> str:
        return f"{self.amount} {self.currency.code}"

    def __repr__(self) -> str:
        return f"Money({self.numerator}, {self.denominator}, {self.currency.code!r})"
