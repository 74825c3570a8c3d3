"""
Arbitrary-Precision Scalars.

``Real`` pairs a :class:`decimal.Decimal` with the number of significant
digits it was parsed at. Addition, subtraction, multiplication and negation
are exact; operations whose result is generally not a terminating decimal
(division, roots, powers, pi) are rounded to the value's precision. Dot and
cross products of exact inputs therefore stay exact. Two Reals of different
precision cannot be combined; doing so raises
:class:`~nanoparticle_geometry.errors.PrecisionMismatchError`.

Plain numbers and numeric strings combined with a Real are parsed at the
Real's precision, which is how scale factors such as ``"-1"`` or ``"0.5"``
enter the vector algebra.

Example:
    >>> half = Real("0.5", 10)
    >>> str(half * 3)
    '1.5'
    >>> str(Real(2, 10).sqrt())
    '1.414213562'
"""

from __future__ import annotations

from decimal import (
    MAX_EMAX,
    MAX_PREC,
    MIN_EMIN,
    ROUND_CEILING,
    ROUND_FLOOR,
    ROUND_HALF_EVEN,
    Context,
    Decimal,
    DivisionByZero,
    InvalidOperation,
    Overflow,
)
from functools import lru_cache, total_ordering
from typing import Union

from mpmath import mp

from .config import DEFAULT_PRECISION
from .errors import DivideByZeroError, PrecisionMismatchError

ScalarLike = Union["Real", int, float, str, Decimal]

# Unbounded context for the ring operations; never divide in it
_EXACT = Context(
    prec=MAX_PREC,
    Emax=MAX_EMAX,
    Emin=MIN_EMIN,
    traps=[InvalidOperation, DivisionByZero, Overflow],
)


@lru_cache(maxsize=64)
def _context(precision: int) -> Context:
    """Decimal context for a precision; traps make invalid results raise."""
    return Context(
        prec=precision,
        rounding=ROUND_HALF_EVEN,
        traps=[InvalidOperation, DivisionByZero, Overflow],
    )


def _parse(value: ScalarLike, precision: int) -> Decimal:
    """Parse ``value`` into a Decimal rounded to ``precision`` digits."""
    if isinstance(value, Real):
        if value.precision != precision:
            raise PrecisionMismatchError(value.precision, precision)
        return value.value
    if isinstance(value, bool):
        raise TypeError("Booleans are not numeric values")
    if isinstance(value, float):
        # repr gives the shortest string that round-trips
        value = repr(value)
    if isinstance(value, str):
        value = value.strip()
    if not isinstance(value, (int, str, Decimal)):
        raise TypeError(f"Cannot interpret {type(value).__name__} as a number")
    try:
        parsed = Decimal(value)
    except InvalidOperation:
        raise ValueError(f"Not a number: {value!r}") from None
    if not parsed.is_finite():
        raise ValueError(f"Value must be finite, got {value!r}")
    return _context(precision).plus(parsed)


@total_ordering
class Real:
    """Immutable decimal scalar with a fixed number of significant digits."""

    __slots__ = ("_value", "_precision")

    def __init__(self, value: ScalarLike, precision: int | None = None):
        if precision is None:
            precision = value.precision if isinstance(value, Real) else DEFAULT_PRECISION
        if precision < 1:
            raise ValueError(f"Precision must be positive, got {precision}")
        self._set(_parse(value, precision), precision)

    def _set(self, value: Decimal, precision: int) -> None:
        if value.is_zero():
            value = value.copy_abs()  # no negative zero
        object.__setattr__(self, "_value", value)
        object.__setattr__(self, "_precision", precision)

    @classmethod
    def _wrap(cls, value: Decimal, precision: int) -> Real:
        obj = cls.__new__(cls)
        obj._set(value, precision)
        return obj

    def __setattr__(self, name, value):
        raise AttributeError("Real is immutable")

    @property
    def value(self) -> Decimal:
        return self._value

    @property
    def precision(self) -> int:
        return self._precision

    @property
    def context(self) -> Context:
        return _context(self._precision)

    def coerce(self, other: ScalarLike) -> Decimal:
        """Parse ``other`` at this value's precision."""
        return _parse(other, self._precision)

    def with_precision(self, precision: int) -> Real:
        """Re-parse this value at a different precision."""
        return Real(self._value, precision)

    # ------------------------------------------------------------------
    # Arithmetic
    # ------------------------------------------------------------------

    def __add__(self, other: ScalarLike) -> Real:
        try:
            rhs = self.coerce(other)
        except TypeError:
            return NotImplemented
        return Real._wrap(_EXACT.add(self._value, rhs), self._precision)

    __radd__ = __add__

    def __sub__(self, other: ScalarLike) -> Real:
        try:
            rhs = self.coerce(other)
        except TypeError:
            return NotImplemented
        return Real._wrap(_EXACT.subtract(self._value, rhs), self._precision)

    def __rsub__(self, other: ScalarLike) -> Real:
        try:
            lhs = self.coerce(other)
        except TypeError:
            return NotImplemented
        return Real._wrap(_EXACT.subtract(lhs, self._value), self._precision)

    def __mul__(self, other: ScalarLike) -> Real:
        try:
            rhs = self.coerce(other)
        except TypeError:
            return NotImplemented
        return Real._wrap(_EXACT.multiply(self._value, rhs), self._precision)

    __rmul__ = __mul__

    def __truediv__(self, other: ScalarLike) -> Real:
        try:
            rhs = self.coerce(other)
        except TypeError:
            return NotImplemented
        if rhs.is_zero():
            raise DivideByZeroError(f"Cannot divide {self} by zero")
        return Real._wrap(self.context.divide(self._value, rhs), self._precision)

    def __rtruediv__(self, other: ScalarLike) -> Real:
        try:
            lhs = self.coerce(other)
        except TypeError:
            return NotImplemented
        if self._value.is_zero():
            raise DivideByZeroError(f"Cannot divide {lhs} by zero")
        return Real._wrap(self.context.divide(lhs, self._value), self._precision)

    def __mod__(self, other: ScalarLike) -> Real:
        try:
            rhs = self.coerce(other)
        except TypeError:
            return NotImplemented
        if rhs.is_zero():
            raise DivideByZeroError(f"Cannot take {self} modulo zero")
        return Real._wrap(_EXACT.remainder(self._value, rhs), self._precision)

    def __pow__(self, exponent: ScalarLike) -> Real:
        try:
            exp = self.coerce(exponent)
        except TypeError:
            return NotImplemented
        try:
            result = self.context.power(self._value, exp)
        except InvalidOperation:
            raise ValueError(f"Cannot raise {self} to the power {exponent}") from None
        except DivisionByZero:
            raise DivideByZeroError(f"Cannot raise zero to the power {exponent}") from None
        return Real._wrap(result, self._precision)

    def __neg__(self) -> Real:
        return Real._wrap(_EXACT.minus(self._value), self._precision)

    def __pos__(self) -> Real:
        return self

    def __abs__(self) -> Real:
        return Real._wrap(_EXACT.abs(self._value), self._precision)

    def sqrt(self) -> Real:
        if self._value < 0:
            raise ValueError(f"Square root of negative value {self}")
        return Real._wrap(self.context.sqrt(self._value), self._precision)

    def cbrt(self) -> Real:
        """Real cube root, defined for negative values as well."""
        if self._value.is_zero():
            return self
        # mpmath returns the principal complex root for negative input
        with mp.workdps(self._precision + 5):
            root = mp.cbrt(mp.mpf(str(self._value.copy_abs())))
            digits = mp.nstr(root, self._precision + 5)
        value = self.context.plus(Decimal(digits))
        return Real._wrap(value.copy_negate() if self._value < 0 else value, self._precision)

    def sign(self) -> int:
        if self._value.is_zero():
            return 0
        return -1 if self._value.is_signed() else 1

    def is_zero(self) -> bool:
        return self._value.is_zero()

    def ceil(self) -> Real:
        return Real._wrap(
            self._value.to_integral_value(rounding=ROUND_CEILING, context=self.context),
            self._precision,
        )

    def floor(self) -> Real:
        return Real._wrap(
            self._value.to_integral_value(rounding=ROUND_FLOOR, context=self.context),
            self._precision,
        )

    # ------------------------------------------------------------------
    # Comparison and conversion
    # ------------------------------------------------------------------

    def __eq__(self, other: object) -> bool:
        """Exact value comparison.

        Comparing against a Real of another precision raises
        ``PrecisionMismatchError`` rather than answering False. Equal values
        hash alike whatever their precision, so a set or dict holding Reals
        of two precisions can raise on a hash collision; keep one precision
        per container.
        """
        try:
            rhs = self.coerce(other)  # type: ignore[arg-type]
        except TypeError:
            return NotImplemented
        return self._value == rhs

    def __lt__(self, other: ScalarLike) -> bool:
        try:
            rhs = self.coerce(other)
        except TypeError:
            return NotImplemented
        return self._value < rhs

    def __hash__(self) -> int:
        return hash(self._value)

    def __float__(self) -> float:
        return float(self._value)

    def __int__(self) -> int:
        return int(self._value)

    def __str__(self) -> str:
        return format(self._value.normalize(self.context), "f")

    def __repr__(self) -> str:
        return f"Real('{self}', precision={self._precision})"

    def __reduce__(self):
        return (Real, (str(self._value), self._precision))


def to_real(value: ScalarLike, precision: int | None = None) -> Real:
    """Return ``value`` as a Real, reusing it when it already matches."""
    if isinstance(value, Real) and (precision is None or value.precision == precision):
        return value
    if isinstance(value, Real):
        raise PrecisionMismatchError(value.precision, precision)
    return Real(value, precision)


def common_precision(*values: Real) -> int:
    """Precision shared by all ``values``.

    Raises:
        PrecisionMismatchError: If the values disagree.
    """
    precisions = {v.precision for v in values}
    if len(precisions) != 1:
        raise PrecisionMismatchError(*(v.precision for v in values))
    return precisions.pop()


@lru_cache(maxsize=16)
def pi(precision: int = DEFAULT_PRECISION) -> Real:
    """Pi to ``precision`` significant digits."""
    with mp.workdps(precision + 5):
        digits = mp.nstr(mp.pi, precision + 5)
    return Real(digits, precision)
