"""Numeric domains for expression evaluation.

An expression can be evaluated over one of three number types:
- float: IEEE-754 doubles; division by zero and invalid powers yield
  inf/nan instead of raising
- decimal: decimal.Decimal under a context with every trap disabled, so it
  behaves like float (Infinity/NaN) but with 28 significant digits
- integer: arbitrary precision ints; division truncates toward zero

Each domain knows how to parse a numeric literal and how to apply the five
binary operators.
"""

import math
from decimal import Context, Decimal, InvalidOperation
from enum import Enum
from typing import Union

from pemdas.errors import ArithmeticErrorKind, DomainArithmeticError

Number = Union[float, Decimal, int]


class NumberDomain(Enum):
    """Number type an expression is evaluated in."""

    FLOAT = "float"
    DECIMAL = "decimal"
    INTEGER = "integer"

    @classmethod
    def from_name(cls, name: "str | NumberDomain") -> "NumberDomain":
        """Look up a domain by its name (case-insensitive)."""
        if isinstance(name, cls):
            return name
        try:
            return cls(str(name).strip().lower())
        except ValueError:
            choices = ", ".join(d.value for d in cls)
            raise ValueError(f"Unknown number domain '{name}'. Expected one of: {choices}")


class Arithmetic:
    """Operator semantics for one numeric domain."""

    domain: NumberDomain

    def parse_constant(self, text: str) -> Number:
        raise NotImplementedError

    def add(self, left, right):
        return left + right

    def subtract(self, left, right):
        return left - right

    def multiply(self, left, right):
        return left * right

    def divide(self, left, right):
        raise NotImplementedError

    def power(self, base, exponent):
        raise NotImplementedError


class FloatArithmetic(Arithmetic):
    domain = NumberDomain.FLOAT

    def parse_constant(self, text: str) -> float:
        return float(text)

    def divide(self, left: float, right: float) -> float:
        if right == 0:
            if left == 0 or math.isnan(left):
                return math.nan
            return math.copysign(math.inf, left) * math.copysign(1.0, right)
        return left / right

    def power(self, base: float, exponent: float) -> float:
        try:
            return math.pow(base, exponent)
        except OverflowError:
            if math.copysign(1.0, base) < 0 and _is_odd_integer(exponent):
                return -math.inf
            return math.inf
        except ValueError:
            # math.pow rejects 0 ** negative and negative ** fractional
            if base == 0:
                if math.copysign(1.0, base) < 0 and _is_odd_integer(exponent):
                    return -math.inf
                return math.inf
            return math.nan


class DecimalArithmetic(Arithmetic):
    domain = NumberDomain.DECIMAL

    def __init__(self, precision: int = 28):
        self.precision = precision

    def _context(self) -> Context:
        # Fresh per operation: contexts accumulate signal flags.
        return Context(prec=self.precision, traps=[])

    def parse_constant(self, text: str) -> Decimal:
        try:
            value = Decimal(text)
        except InvalidOperation:
            raise ValueError(f"Invalid decimal literal: {text!r}")
        if not value.is_finite():
            raise ValueError(f"Invalid decimal literal: {text!r}")
        return value

    def add(self, left: Decimal, right: Decimal) -> Decimal:
        return self._context().add(left, right)

    def subtract(self, left: Decimal, right: Decimal) -> Decimal:
        return self._context().subtract(left, right)

    def multiply(self, left: Decimal, right: Decimal) -> Decimal:
        return self._context().multiply(left, right)

    def divide(self, left: Decimal, right: Decimal) -> Decimal:
        return self._context().divide(left, right)

    def power(self, base: Decimal, exponent: Decimal) -> Decimal:
        return self._context().power(base, exponent)


# Results wider than this raise RESULT_TOO_LARGE (about 60,000 decimal digits).
MAX_INTEGER_BITS = 200_000

# Digits per chunk when converting between int and str; stays below the
# interpreter's int/str conversion limit (sys.get_int_max_str_digits).
_STR_CHUNK_DIGITS = 4000
_STR_CHUNK = 10**_STR_CHUNK_DIGITS


def is_wide_integer(value: int) -> bool:
    """True when value is too wide for a plain str() conversion."""
    return not -_STR_CHUNK < value < _STR_CHUNK


def format_integer(value: int) -> str:
    """Decimal text of an int of any size."""
    if not is_wide_integer(value):
        return str(value)
    sign = "-" if value < 0 else ""
    value = abs(value)
    chunks = []
    while value >= _STR_CHUNK:
        value, remainder = divmod(value, _STR_CHUNK)
        chunks.append(str(remainder).zfill(_STR_CHUNK_DIGITS))
    chunks.append(str(value))
    return sign + "".join(reversed(chunks))


def format_number(value: Number) -> str:
    """Plain text of a value from any domain."""
    if isinstance(value, int):
        return format_integer(value)
    return str(value)


def parse_integer(text: str) -> int:
    """Parse a run of ASCII digits of any length."""
    if not text or not text.isascii() or not text.isdigit():
        raise ValueError(f"Invalid integer literal: {text!r}")
    value = 0
    for start in range(0, len(text), _STR_CHUNK_DIGITS):
        chunk = text[start:start + _STR_CHUNK_DIGITS]
        value = value * 10 ** len(chunk) + int(chunk)
    return value


class IntegerArithmetic(Arithmetic):
    """Integer-only arithmetic.

    Division truncates toward zero. A negative exponent yields the real
    power truncated toward zero: 1 for base 1, +/-1 for base -1 and 0 for
    every other non-zero base. Zero divisors and zero raised to a negative
    power raise DomainArithmeticError, as do products and powers wider than
    MAX_INTEGER_BITS.
    """

    domain = NumberDomain.INTEGER

    def parse_constant(self, text: str) -> int:
        return parse_integer(text)

    def multiply(self, left: int, right: int) -> int:
        # a product has at least this many bits
        if left and right and left.bit_length() + right.bit_length() - 1 > MAX_INTEGER_BITS:
            raise _too_large()
        return left * right

    def divide(self, left: int, right: int) -> int:
        if right == 0:
            raise DomainArithmeticError(ArithmeticErrorKind.DIVISION_BY_ZERO)
        quotient = abs(left) // abs(right)
        return -quotient if (left < 0) != (right < 0) else quotient

    def power(self, base: int, exponent: int) -> int:
        if exponent >= 0:
            if abs(base) > 1 and exponent * (abs(base).bit_length() - 1) > MAX_INTEGER_BITS:
                raise _too_large()
            return base**exponent
        if base == 0:
            raise DomainArithmeticError(
                ArithmeticErrorKind.DIVISION_BY_ZERO,
                "Zero raised to a negative power",
            )
        if base == 1:
            return 1
        if base == -1:
            return 1 if exponent % 2 == 0 else -1
        return 0


def _too_large() -> DomainArithmeticError:
    return DomainArithmeticError(
        ArithmeticErrorKind.RESULT_TOO_LARGE,
        f"Integer result exceeds {MAX_INTEGER_BITS} bits",
    )


def _is_odd_integer(value: float) -> bool:
    return math.isfinite(value) and value.is_integer() and int(value) % 2 == 1


_ARITHMETIC: dict[NumberDomain, Arithmetic] = {
    NumberDomain.FLOAT: FloatArithmetic(),
    NumberDomain.DECIMAL: DecimalArithmetic(),
    NumberDomain.INTEGER: IntegerArithmetic(),
}


def arithmetic_for(domain: NumberDomain | str) -> Arithmetic:
    """Return the shared (stateless) arithmetic for a domain."""
    return _ARITHMETIC[NumberDomain.from_name(domain)]


def parse_constant(text: str, domain: NumberDomain | str = NumberDomain.FLOAT) -> Number:
    """Parse a numeric literal in the given domain.

    Raises:
        ValueError: If the text is not a valid literal for the domain.
    """
    return arithmetic_for(domain).parse_constant(text)
