"""Tests for the ratcalc solver.

Tests cover:
- Operator priority and associativity
- Blocks, signs, factorial and derangement
- Domain errors raised while reducing
- The full evaluate() pipeline with fix and check rules
"""

from fractions import Fraction

import pytest

from ratcalc import (
    BinaryOp,
    BrokenCheckRuleError,
    CalcError,
    CheckRule,
    ExprWithNoResultError,
    FixRule,
    InvalidTokenError,
    OperIllegalValuesError,
    Solver,
    Token,
    evaluate,
    solve,
    tokenize,
    validate,
)


class TestEvaluate:
    """Expression results."""

    @pytest.mark.parametrize(
        "source, expected",
        [
            ("12 + 34 * 45", 1542),
            ("-|-12|+34*45", 1518),
            ("-3++1-+-+5", 3),
            ("10 % 9 + 3 * 5 * 2 / 5 - -6", 13),
            ("10 % (6 / (9 - 3) * 3) * 5 * 3 / 5 - -6", 9),
            ("10 % (6 / |9 - 15| * 3) * 5 * 3 / 5 - -6", 9),
            ("(|-37|*4.8)", Fraction(888, 5)),
            ("1 -5 *-(|-37|*4.8)+5 %99/7", Fraction(6228, 7)),
            ("1_000*3", 3000),
            ("0.1 + 0.2", Fraction(3, 10)),
        ],
    )
    def test_expressions(self, source, expected):
        assert evaluate(source) == expected

    @pytest.mark.parametrize(
        "source, expected",
        [
            ("1+2*(3+4)", 15),
            ("(1+1)/4/2", Fraction(1, 4)),
            ("10-3-2", 5),
            ("2*3+4*5", 26),
            ("2^3^2", 64),
            ("2*3^2", 18),
        ],
    )
    def test_priority_and_associativity(self, source, expected):
        assert evaluate(source) == expected

    @pytest.mark.parametrize(
        "source, expected",
        [
            ("-2^2", 4),
            ("2^-2", Fraction(1, 4)),
            ("7%-2", 1),
            ("-7%2", -1),
            ("|2-5|*|1-3|", 6),
            ("|(|-3|)|", 3),
        ],
    )
    def test_signs_and_blocks(self, source, expected):
        assert evaluate(source) == expected

    @pytest.mark.parametrize(
        "source, expected",
        [
            ("2*3!", 12),
            ("-3!", -6),
            ("3!!", 720),
            ("(1+2)!", 6),
            ("!4", 9),
            ("2*!3", 4),
            ("!(2+2)", 9),
            ("!3!", 265),
        ],
    )
    def test_factorial_and_derangement(self, source, expected):
        assert evaluate(source) == expected

    def test_result_is_fraction(self):
        assert isinstance(evaluate("1/3"), Fraction)

    def test_deterministic(self):
        source = "1 -5 *-(|-37|*4.8)+5 %99/7"

        assert evaluate(source) == evaluate(source)


class TestDomainErrors:
    """Illegal operand values found during reduction."""

    @pytest.mark.parametrize(
        "source",
        ["1/0", "5%(3-3)", "2^0.5", "0^-1", "(-3)!", "2.5!", "!(0-1)"],
    )
    def test_illegal_values(self, source):
        with pytest.raises(OperIllegalValuesError):
            evaluate(source)

    def test_error_names_the_span(self):
        with pytest.raises(OperIllegalValuesError) as exc_info:
            evaluate("4 + 1/0")

        assert exc_info.value.tokens[1] == Token.binary(BinaryOp.DIV)
        assert "1 / 0" in str(exc_info.value)


class TestSolver:
    """Direct use of the Solver."""

    def test_reduces_in_place(self):
        tokens = tokenize("2 * (3 + 4)")
        result = solve(tokens)

        assert result == 14
        assert len(tokens) == 1
        assert tokens[0] == Token.number(14)

    def test_next_reduction_picks_lowest_priority(self):
        reduction = Solver(tokenize("1 + 2 * 4")).next_reduction()

        assert reduction.operator == Token.binary(BinaryOp.MUL)
        assert (reduction.start, reduction.stop) == (2, 5)
        assert reduction.priority == 4

    def test_next_reduction_prefers_blocks(self):
        reduction = Solver(tokenize("2 * (3)")).next_reduction()

        assert (reduction.start, reduction.stop) == (2, 5)
        assert reduction.priority == 0

    def test_nothing_to_reduce(self):
        assert Solver(tokenize("1")).next_reduction() is None

    def test_empty_tokens(self):
        with pytest.raises(OperIllegalValuesError):
            solve([])

    def test_unvalidated_dead_end(self):
        with pytest.raises(OperIllegalValuesError):
            solve(tokenize("1 +"))

    def test_validated_tokens_always_solve(self):
        tokens = tokenize("-(|2-7|!)")
        validate(tokens)

        assert solve(tokens) == -120


class TestPipeline:
    """evaluate() with rules."""

    def test_fix_rules(self):
        assert evaluate("(2)(3", [FixRule.BLOCK_PRODUCT, FixRule.CLOSE_BLOCKS]) == 6

    def test_block_product_required(self):
        with pytest.raises(ExprWithNoResultError):
            evaluate("(2)(3)")

        assert evaluate("(2)(3)", {FixRule.BLOCK_PRODUCT}) == 6

    def test_check_rules(self):
        with pytest.raises(BrokenCheckRuleError):
            evaluate("1/2", check_rules={CheckRule.DENY_DIVISION})

        assert evaluate("1*2", check_rules={CheckRule.DENY_DIVISION}) == 2

    def test_first_failing_stage_wins(self):
        with pytest.raises(InvalidTokenError):
            evaluate("1/0 + x")

    @pytest.mark.parametrize("source", ["1 $ 2", "(1", "1/0", ""])
    def test_calc_error_catches_every_stage(self, source):
        with pytest.raises(CalcError):
            evaluate(source)
