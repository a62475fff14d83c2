"""Validation of token sequences before reduction.

Validation runs two passes over the tokens:
1. Adjacency rules: optional restrictions selected by the caller, such as
   denying division or repeated signs
2. Structure: blocks must nest correctly and the sequence must collapse
   to a single number under the expression grammar

The grammar pass keeps a stack of token types and collapses its top with
a small set of reducible patterns after every push. A valid expression
leaves exactly one NUMBER behind.
"""

import logging
from collections.abc import Iterable, Sequence
from enum import Enum
from typing import Callable

from ratcalc.errors import (
    BrokenCheckRuleError,
    ExprWithNoResultError,
    UnbalancedBlocksError,
)
from ratcalc.tokens import BinaryOp, Token, TokenType, UnaryLeft, UnaryRight

logger = logging.getLogger(__name__)


class CheckRule(Enum):
    """Optional restrictions on the accepted expressions."""

    DENY_MULTIPLE_SIGN = "deny-multiple-sign"
    DENY_MULTIPLE_SIGN_STRICT = "deny-multiple-sign-strict"
    DENY_DIVISION = "deny-division"
    DENY_MODULO = "deny-modulo"
    DENY_EXPONENT = "deny-exponent"
    DENY_FACTORIAL = "deny-factorial"
    DENY_DERANGEMENT = "deny-derangement"


# -----------------------------------------------------------------------------
# Adjacency rules
# -----------------------------------------------------------------------------


def _is_sign(token: Token | None) -> bool:
    return (
        token is not None
        and token.type == TokenType.UNARY_LEFT
        and token.value.is_sign
    )


def _multiple_sign(previous: Token | None, current: Token) -> bool:
    """Two prefix signs in a row, as in "--5"."""
    return _is_sign(previous) and _is_sign(current)


def _multiple_sign_strict(previous: Token | None, current: Token) -> bool:
    """Any sign following another sign, as in "--5" or "3+-5"."""
    if not _is_sign(current) or previous is None:
        return False
    if _is_sign(previous):
        return True
    return previous.is_(TokenType.BINARY_OP, BinaryOp.ADD) or previous.is_(
        TokenType.BINARY_OP, BinaryOp.SUB
    )


def _denies(token_type: TokenType, value) -> Callable[[Token | None, Token], bool]:
    def check(previous: Token | None, current: Token) -> bool:
        return current.is_(token_type, value)

    return check


ADJACENCY_RULES: dict[CheckRule, Callable[[Token | None, Token], bool]] = {
    CheckRule.DENY_MULTIPLE_SIGN: _multiple_sign,
    CheckRule.DENY_MULTIPLE_SIGN_STRICT: _multiple_sign_strict,
    CheckRule.DENY_DIVISION: _denies(TokenType.BINARY_OP, BinaryOp.DIV),
    CheckRule.DENY_MODULO: _denies(TokenType.BINARY_OP, BinaryOp.MOD),
    CheckRule.DENY_EXPONENT: _denies(TokenType.BINARY_OP, BinaryOp.EXP),
    CheckRule.DENY_FACTORIAL: _denies(TokenType.UNARY_RIGHT, UnaryRight.FACTORIAL),
    CheckRule.DENY_DERANGEMENT: _denies(TokenType.UNARY_LEFT, UnaryLeft.DERANGEMENT),
}


def check_rules(tokens: Sequence[Token], rules: Iterable[CheckRule]) -> None:
    """Check each token against its predecessor for every enabled rule.

    Raises:
        BrokenCheckRuleError: On the first denied pattern
    """
    selected = frozenset(rules)
    # Declaration order keeps the reported rule deterministic
    enabled = [rule for rule in CheckRule if rule in selected]
    if not enabled:
        return

    previous: Token | None = None
    for token in tokens:
        for rule in enabled:
            if ADJACENCY_RULES[rule](previous, token):
                span = [previous, token] if previous is not None else [token]
                raise BrokenCheckRuleError(rule, span)
        previous = token


# -----------------------------------------------------------------------------
# Structure
# -----------------------------------------------------------------------------

N = TokenType.NUMBER
S = TokenType.START_BLOCK
E = TokenType.END_BLOCK
L = TokenType.UNARY_LEFT
R = TokenType.UNARY_RIGHT
B = TokenType.BINARY_OP

# (pattern on top of the stack, replacement), longest patterns first
COLLAPSE_PATTERNS: list[tuple[tuple[TokenType, ...], tuple[TokenType, ...]]] = [
    ((N, B, L, N), (N,)),
    ((S, L, N), (S, N)),
    ((N, B, N), (N,)),
    ((S, N, E), (N,)),
    ((L, N), (N,)),
    ((N, R), (N,)),
]


def collapse(stack: list[TokenType]) -> None:
    """Collapse the top of a type stack until no pattern matches."""
    collapsed = True
    while collapsed:
        collapsed = False
        for pattern, replacement in COLLAPSE_PATTERNS:
            size = len(pattern)
            if len(stack) >= size and tuple(stack[-size:]) == pattern:
                stack[-size:] = replacement
                collapsed = True
                break


def check_structure(tokens: Sequence[Token]) -> None:
    """Check block balance and that the tokens collapse to one number.

    Raises:
        UnbalancedBlocksError: On a mismatched close or unclosed blocks
        ExprWithNoResultError: If the grammar leaves more than a number
    """
    blocks: list[Token] = []
    types: list[TokenType] = []

    for token in tokens:
        if token.type == TokenType.START_BLOCK:
            blocks.append(token)
        elif token.type == TokenType.END_BLOCK:
            if not blocks:
                raise UnbalancedBlocksError([token])
            if blocks[-1].value != token.value:
                raise UnbalancedBlocksError([blocks[-1], token])
            blocks.pop()

        types.append(token.type)
        collapse(types)

    if blocks:
        raise UnbalancedBlocksError(blocks)
    if types != [TokenType.NUMBER]:
        raise ExprWithNoResultError(types)


def validate(tokens: Sequence[Token], rules: Iterable[CheckRule] = ()) -> None:
    """Validate a token sequence against the grammar and the given rules.

    Args:
        tokens: Token sequence, usually after fixing
        rules: Check rules to enforce on top of the grammar

    Raises:
        BrokenCheckRuleError: If an enabled rule is broken
        UnbalancedBlocksError: If blocks do not nest correctly
        ExprWithNoResultError: If the expression does not reduce to a number
    """
    check_rules(tokens, rules)
    check_structure(tokens)
    logger.debug("Validated %d token(s)", len(tokens))
