"""Exact rational arithmetic for ratcalc.

All values are fractions.Fraction, so results never lose precision.
This module provides:
- Literal parsing and display formatting
- Operators with restricted domains (division, remainder, exponent)
- Combinatorics (factorial, derangement) over arbitrary-size integers
- Dispatch tables used by the reducer to apply a token to its operands
"""

import math
import re
from decimal import Decimal
from fractions import Fraction
from typing import Callable

from ratcalc.errors import InvalidNumberError, OperIllegalValuesError
from ratcalc.tokens import BinaryOp, Block, Token, UnaryLeft, UnaryRight

# Exponents must fit a signed 32-bit integer
EXPONENT_MIN = -(2**31)
EXPONENT_MAX = 2**31 - 1

# Digits with optional single underscores between them, optional fraction part
_LITERAL_PATTERN = re.compile(r"(?:\d+(?:_\d+)*)?(?:\.(?:\d+(?:_\d+)*)?)?")


# -----------------------------------------------------------------------------
# Literals and formatting
# -----------------------------------------------------------------------------


def parse_number(literal: str, position: int = -1) -> Fraction:
    """Parse a decimal literal such as "42", "4.8" or "1_000.5" exactly.

    Raises:
        InvalidNumberError: If the literal is not a well-formed number
    """
    if not any(c.isdigit() for c in literal) or not _LITERAL_PATTERN.fullmatch(literal):
        raise InvalidNumberError(literal, position)
    return Fraction(Decimal(literal.replace("_", "")))


def format_rational(value: Fraction) -> str:
    """Display form of a rational: "<integer>" or "<numerator>/<denominator>"."""
    return str(Fraction(value))


def format_decimal(value: Fraction, precision: int = 20) -> str:
    """Decimal rendering rounded half-even to at most `precision` digits.

    Trailing zeros are stripped, so 1/4 renders as "0.25" and 1/3 as
    "0.33333333333333333333" with the default precision.
    """
    if precision < 0:
        raise ValueError(f"precision must be non-negative, got {precision}")

    scaled = round(Fraction(value) * 10**precision)
    sign = "-" if scaled < 0 else ""
    digits = str(abs(scaled)).rjust(precision + 1, "0")

    if precision == 0:
        return sign + digits

    whole, fraction = digits[:-precision], digits[-precision:].rstrip("0")
    if not fraction:
        return sign + whole if whole != "0" else "0"
    return f"{sign}{whole}.{fraction}"


# -----------------------------------------------------------------------------
# Restricted-domain operators
# -----------------------------------------------------------------------------


def _binary_span(left: Fraction, op: BinaryOp, right: Fraction) -> list[Token]:
    return [Token.number(left), Token.binary(op), Token.number(right)]


def divide(left: Fraction, right: Fraction) -> Fraction:
    if right == 0:
        raise OperIllegalValuesError(
            _binary_span(left, BinaryOp.DIV, right), "division by zero"
        )
    return left / right


def remainder(left: Fraction, right: Fraction) -> Fraction:
    """Truncated remainder: the result takes the sign of the dividend."""
    if right == 0:
        raise OperIllegalValuesError(
            _binary_span(left, BinaryOp.MOD, right), "modulo by zero"
        )
    return left - right * math.trunc(left / right)


def exponent(base: Fraction, exp: Fraction) -> Fraction:
    """Raise a rational base to an integer power.

    The exponent must be an integer within the signed 32-bit range. A
    negative base yields a positive result for even exponents and a
    negative one for odd exponents.
    """
    base, exp = Fraction(base), Fraction(exp)
    span = _binary_span(base, BinaryOp.EXP, exp)

    if exp.denominator != 1:
        raise OperIllegalValuesError(span, "exponent must be an integer")
    power = exp.numerator
    if not EXPONENT_MIN <= power <= EXPONENT_MAX:
        raise OperIllegalValuesError(span, "exponent out of range")
    if base == 0 and power < 0:
        raise OperIllegalValuesError(span, "zero raised to a negative power")

    magnitude = Fraction(abs(base.numerator) ** abs(power), base.denominator ** abs(power))
    if power < 0:
        magnitude = 1 / magnitude
    if base < 0 and power % 2 == 1:
        return -magnitude
    return magnitude


# -----------------------------------------------------------------------------
# Combinatorics
# -----------------------------------------------------------------------------


def product_range(first: int, last: int) -> int:
    """Product of all integers in [first, last], split at the midpoint.

    Multiplying balanced halves keeps operands of similar size, which is
    much cheaper for big integers than a running product.
    """
    if first > last:
        return 1
    if first == last:
        return first
    mid = (first + last) // 2
    return product_range(first, mid) * product_range(mid + 1, last)


def _natural(value: Fraction, span: list[Token]) -> int:
    """Return value as a non-negative int or raise for the given span."""
    value = Fraction(value)
    if value.denominator != 1 or value < 0:
        raise OperIllegalValuesError(span, "operand must be a non-negative integer")
    return value.numerator


def factorial(value: Fraction) -> Fraction:
    """n! for a non-negative integer n."""
    span = [Token.number(value), Token.unary_right(UnaryRight.FACTORIAL)]
    n = _natural(value, span)
    return Fraction(product_range(1, n))


def derangement(value: Fraction) -> Fraction:
    """Number of permutations of n elements with no fixed point.

    D(n) = sum over i in [2, n] of (-1)^i * n!/i!, with D(0) = 1.
    """
    span = [Token.unary_left(UnaryLeft.DERANGEMENT), Token.number(value)]
    n = _natural(value, span)
    if n == 0:
        return Fraction(1)

    term = product_range(1, n)  # n!/1!
    total = 0
    for i in range(2, n + 1):
        term //= i
        total += term if i % 2 == 0 else -term
    return Fraction(total)


# -----------------------------------------------------------------------------
# Dispatch tables
# -----------------------------------------------------------------------------


BINARY_OPERATIONS: dict[BinaryOp, Callable[[Fraction, Fraction], Fraction]] = {
    BinaryOp.ADD: lambda left, right: left + right,
    BinaryOp.SUB: lambda left, right: left - right,
    BinaryOp.MUL: lambda left, right: left * right,
    BinaryOp.DIV: divide,
    BinaryOp.MOD: remainder,
    BinaryOp.EXP: exponent,
}

UNARY_LEFT_OPERATIONS: dict[UnaryLeft, Callable[[Fraction], Fraction]] = {
    UnaryLeft.POS: lambda value: value,
    UnaryLeft.NEG: lambda value: -value,
    UnaryLeft.DERANGEMENT: derangement,
}

UNARY_RIGHT_OPERATIONS: dict[UnaryRight, Callable[[Fraction], Fraction]] = {
    UnaryRight.FACTORIAL: factorial,
}

BLOCK_OPERATIONS: dict[Block, Callable[[Fraction], Fraction]] = {
    Block.BRACKET: lambda value: value,
    Block.ABS: abs,
}
