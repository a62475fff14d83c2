"""Reducer for ratcalc token sequences.

Evaluates a validated token list by repeatedly picking the next operation
and splicing its span with a single NUMBER token, until one number is
left. The next operation is the lowest-priority token whose neighbours
form one of the reducible shapes:

- NUMBER BINARY_OP NUMBER
- START_BLOCK NUMBER END_BLOCK
- UNARY_LEFT NUMBER
- NUMBER UNARY_RIGHT

Ties go to the leftmost candidate. An operator is only a candidate when
no tighter-binding operator is still waiting for one of its operands, so
"1+2*(3+4)" and "(1+1)/4/2" keep their conventional meaning.
"""

import logging
from collections.abc import Iterable
from dataclasses import dataclass
from fractions import Fraction

from ratcalc.arithmetic import (
    BINARY_OPERATIONS,
    BLOCK_OPERATIONS,
    UNARY_LEFT_OPERATIONS,
    UNARY_RIGHT_OPERATIONS,
)
from ratcalc.errors import OperIllegalValuesError
from ratcalc.fixer import FixRule, fix
from ratcalc.lexer import tokenize
from ratcalc.tokens import Token, TokenType, render
from ratcalc.validator import CheckRule, validate

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Reduction:
    """A reducible span of tokens.

    Attributes:
        start: Index of the first token of the span
        stop: Index one past the last token of the span
        operator: The token that drives the reduction
    """

    start: int
    stop: int
    operator: Token

    @property
    def priority(self) -> int:
        return self.operator.priority


class Solver:
    """Reduces a token list to a single rational value.

    The list is modified in place.

    Usage:
        tokens = tokenize("12 + 34 * 45")
        result = Solver(tokens).solve()
    """

    def __init__(self, tokens: list[Token]):
        self.tokens = tokens

    def solve(self) -> Fraction:
        """Reduce the tokens and return the resulting value."""
        while not self._is_solved():
            reduction = self.next_reduction()
            if reduction is None:
                raise OperIllegalValuesError(self.tokens, "expression cannot be reduced")
            self._apply(reduction)

        return self.tokens[0].value

    def next_reduction(self) -> Reduction | None:
        """Find the next operation to perform, or None if nothing reduces."""
        best: Reduction | None = None

        for index, token in enumerate(self.tokens):
            priority = token.priority
            if priority is None:
                continue
            if best is not None and priority >= best.priority:
                continue

            reduction = self._match(index)
            if reduction is None:
                continue

            best = reduction
            if priority == 0:
                # Nothing binds tighter than a block unwrap
                break

        return best

    # -------------------------------------------------------------------------
    # Helper methods
    # -------------------------------------------------------------------------

    def _is_solved(self) -> bool:
        return len(self.tokens) == 1 and self.tokens[0].type == TokenType.NUMBER

    def _at(self, index: int) -> Token | None:
        """Token at index, or None outside the list."""
        if 0 <= index < len(self.tokens):
            return self.tokens[index]
        return None

    def _is_number(self, index: int) -> bool:
        token = self._at(index)
        return token is not None and token.type == TokenType.NUMBER

    def _match(self, index: int) -> Reduction | None:
        """Return the reduction driven by the token at index, if ready."""
        token = self.tokens[index]

        if token.type == TokenType.BINARY_OP:
            if not (self._is_number(index - 1) and self._is_number(index + 1)):
                return None
            if not self._binds_left(token, self._at(index - 2)):
                return None
            if not self._binds_right(token, self._at(index + 2)):
                return None
            return Reduction(index - 1, index + 2, token)

        if token.type == TokenType.START_BLOCK:
            end = self._at(index + 2)
            if (
                self._is_number(index + 1)
                and end is not None
                and end.is_(TokenType.END_BLOCK, token.value)
            ):
                return Reduction(index, index + 3, token)
            return None

        if token.type == TokenType.UNARY_LEFT:
            if not self._is_number(index + 1):
                return None
            following = self._at(index + 2)
            if following is not None and following.type == TokenType.UNARY_RIGHT:
                return None
            return Reduction(index, index + 2, token)

        if token.type == TokenType.UNARY_RIGHT:
            if self._is_number(index - 1):
                return Reduction(index - 1, index + 1, token)
            return None

        return None

    @staticmethod
    def _binds_left(operator: Token, outer: Token | None) -> bool:
        """True if the left operand is not claimed by the token before it."""
        if outer is None or outer.type == TokenType.START_BLOCK:
            return True
        return outer.type == TokenType.BINARY_OP and outer.priority > operator.priority

    @staticmethod
    def _binds_right(operator: Token, outer: Token | None) -> bool:
        """True if the right operand is not claimed by the token after it."""
        if outer is None or outer.type == TokenType.END_BLOCK:
            return True
        return outer.type == TokenType.BINARY_OP and outer.priority >= operator.priority

    def _apply(self, reduction: Reduction) -> None:
        """Compute the span's value and splice it into the token list."""
        span = self.tokens[reduction.start:reduction.stop]
        operator = reduction.operator

        if operator.type == TokenType.BINARY_OP:
            left, _, right = span
            value = BINARY_OPERATIONS[operator.value](left.value, right.value)
        elif operator.type == TokenType.START_BLOCK:
            value = BLOCK_OPERATIONS[operator.value](span[1].value)
        elif operator.type == TokenType.UNARY_LEFT:
            value = UNARY_LEFT_OPERATIONS[operator.value](span[1].value)
        else:
            value = UNARY_RIGHT_OPERATIONS[operator.value](span[0].value)

        logger.debug("Reduced '%s' to %s", render(span), value)
        self.tokens[reduction.start:reduction.stop] = [
            Token.number(value, span[0].position)
        ]


# -----------------------------------------------------------------------------
# Convenience functions
# -----------------------------------------------------------------------------


def solve(tokens: list[Token]) -> Fraction:
    """Reduce a validated token list in place and return its value.

    Raises:
        OperIllegalValuesError: If an operator gets values outside its
            domain, or the tokens cannot be reduced to a single number
    """
    return Solver(tokens).solve()


def evaluate(
    source: str,
    fix_rules: Iterable[FixRule] = (),
    check_rules: Iterable[CheckRule] = (),
) -> Fraction:
    """Evaluate an expression string to an exact rational.

    This is the main entry point: tokenize, fix, validate, then solve.
    The first stage that fails aborts the evaluation.

    Args:
        source: The expression string
        fix_rules: Fix rules applied before validation
        check_rules: Check rules enforced during validation

    Returns:
        The exact result as a Fraction

    Raises:
        CalcError: The first ParseError, CheckError or SolveError raised

    Example:
        evaluate("-|-12|+34*45")
        # Fraction(1518, 1)
    """
    tokens = tokenize(source)
    fix(tokens, fix_rules)
    validate(tokens, check_rules)
    result = solve(tokens)
    logger.debug("Evaluated %r to %s", source, result)
    return result
