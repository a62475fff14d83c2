"""Tests for exact rational arithmetic."""

import math
from fractions import Fraction

import pytest

from ratcalc import (
    InvalidNumberError,
    OperIllegalValuesError,
    derangement,
    exponent,
    factorial,
    format_decimal,
    format_rational,
    parse_number,
    product_range,
    remainder,
)
from ratcalc.arithmetic import EXPONENT_MAX, divide


class TestParseNumber:
    def test_integer(self):
        assert parse_number("42") == 42

    def test_decimal(self):
        assert parse_number("4.8") == Fraction(24, 5)

    def test_underscores(self):
        assert parse_number("1_000.000_5") == Fraction(10000005, 10000)

    def test_invalid(self):
        with pytest.raises(InvalidNumberError) as exc_info:
            parse_number("1..2", position=7)

        assert exc_info.value.position == 7


class TestFormatting:
    def test_rational(self):
        assert format_rational(Fraction(3)) == "3"
        assert format_rational(Fraction(-6228, 7)) == "-6228/7"
        assert format_rational(Fraction(2, 4)) == "1/2"

    @pytest.mark.parametrize(
        "literal, expected",
        [
            ("0", "0"),
            ("42", "42"),
            ("007", "7"),
            ("0.25", "1/4"),
            ("4.80", "24/5"),
            ("2.000", "2"),
            (".5", "1/2"),
            ("5.", "5"),
            ("1_000.5", "2001/2"),
        ],
    )
    def test_parsed_literal_formats_reduced(self, literal, expected):
        assert format_rational(parse_number(literal)) == expected

    @pytest.mark.parametrize(
        "value, precision, expected",
        [
            (Fraction(1, 4), 20, "0.25"),
            (Fraction(1, 3), 5, "0.33333"),
            (Fraction(2, 3), 5, "0.66667"),
            (Fraction(-3, 25), 5, "-0.12"),
            (Fraction(5), 5, "5"),
            (Fraction(0), 5, "0"),
            (Fraction(5, 2), 0, "2"),
            (Fraction(7, 2), 0, "4"),
            (Fraction(888, 5), 3, "177.6"),
        ],
    )
    def test_decimal(self, value, precision, expected):
        assert format_decimal(value, precision) == expected

    def test_default_precision(self):
        assert format_decimal(Fraction(1, 3)) == "0." + "3" * 20

    def test_negative_precision(self):
        with pytest.raises(ValueError):
            format_decimal(Fraction(1, 3), -1)


class TestDivisionAndRemainder:
    def test_divide(self):
        assert divide(Fraction(1), Fraction(3)) == Fraction(1, 3)

    def test_divide_by_zero(self):
        with pytest.raises(OperIllegalValuesError) as exc_info:
            divide(Fraction(1), Fraction(0))

        assert exc_info.value.reason == "division by zero"

    @pytest.mark.parametrize(
        "left, right, expected",
        [
            (10, 3, 1),
            (-7, 2, -1),
            (7, -2, 1),
            (-7, -2, -1),
            (Fraction(7, 2), 1, Fraction(1, 2)),
            (Fraction(-7, 2), 1, Fraction(-1, 2)),
        ],
    )
    def test_remainder_takes_sign_of_dividend(self, left, right, expected):
        assert remainder(Fraction(left), Fraction(right)) == expected

    def test_remainder_by_zero(self):
        with pytest.raises(OperIllegalValuesError):
            remainder(Fraction(5), Fraction(0))


class TestExponent:
    def test_rational_base(self):
        assert exponent(Fraction(5, 2), Fraction(4)) == Fraction(625, 16)

    def test_negative_base(self):
        assert exponent(Fraction(-2), Fraction(3)) == -8
        assert exponent(Fraction(-2), Fraction(2)) == 4

    def test_negative_exponent(self):
        assert exponent(Fraction(2), Fraction(-2)) == Fraction(1, 4)
        assert exponent(Fraction(-2, 3), Fraction(-3)) == Fraction(-27, 8)

    def test_zero_exponent(self):
        assert exponent(Fraction(0), Fraction(0)) == 1
        assert exponent(Fraction(-5), Fraction(0)) == 1

    def test_fractional_exponent(self):
        with pytest.raises(OperIllegalValuesError) as exc_info:
            exponent(Fraction(2), Fraction(1, 2))

        assert exc_info.value.reason == "exponent must be an integer"

    def test_exponent_out_of_range(self):
        with pytest.raises(OperIllegalValuesError):
            exponent(Fraction(1), Fraction(EXPONENT_MAX + 1))

    def test_zero_to_negative_power(self):
        with pytest.raises(OperIllegalValuesError):
            exponent(Fraction(0), Fraction(-1))


class TestCombinatorics:
    def test_product_range(self):
        assert product_range(4, 6) == 120
        assert product_range(7, 7) == 7
        assert product_range(5, 4) == 1

    def test_factorial(self):
        assert factorial(Fraction(10)) == 3628800
        assert factorial(Fraction(0)) == 1
        assert factorial(Fraction(1)) == 1

    def test_large_factorial_is_exact(self):
        assert factorial(Fraction(100)) == math.factorial(100)

    @pytest.mark.parametrize("value", [Fraction(5, 2), Fraction(-1)])
    def test_factorial_domain(self, value):
        with pytest.raises(OperIllegalValuesError):
            factorial(value)

    def test_derangement_sequence(self):
        assert [derangement(Fraction(n)) for n in range(7)] == [1, 0, 1, 2, 9, 44, 265]

    def test_derangement_of_ten(self):
        assert derangement(Fraction(10)) == 1334961

    def test_derangement_domain(self):
        with pytest.raises(OperIllegalValuesError):
            derangement(Fraction(-2))
