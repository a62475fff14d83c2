"""Structural normalization of token sequences.

Fix rules are opt-in rewrites applied between tokenizing and validation:
- BLOCK_PRODUCT: "(a)(b)" becomes "(a)*(b)"
- CLOSE_BLOCKS: blocks still open at the end of input are closed

Fixing never fails; it rewrites the list in place.
"""

import logging
from collections.abc import Iterable
from enum import Enum

from ratcalc.tokens import BinaryOp, Token, TokenType

logger = logging.getLogger(__name__)


class FixRule(Enum):
    """Available token-sequence normalizations."""

    BLOCK_PRODUCT = "block-product"
    CLOSE_BLOCKS = "close-blocks"


def open_blocks(tokens: Iterable[Token]) -> list[Token]:
    """Replay the block stack and return the START_BLOCK tokens left open.

    A close that does not match the innermost open block leaves the
    stack untouched, the same way the lexer treats it.
    """
    stack: list[Token] = []
    for token in tokens:
        if token.type == TokenType.START_BLOCK:
            stack.append(token)
        elif token.type == TokenType.END_BLOCK:
            if stack and stack[-1].value == token.value:
                stack.pop()
    return stack


def close_blocks(tokens: list[Token]) -> int:
    """Append closing tokens for every open block, innermost first.

    Returns:
        The number of tokens appended
    """
    pending = open_blocks(tokens)
    for start in reversed(pending):
        tokens.append(Token.end(start.value))
    return len(pending)


def block_product(tokens: list[Token]) -> int:
    """Insert a multiplication between each END_BLOCK/START_BLOCK pair.

    Returns:
        The number of tokens inserted
    """
    positions = [
        index + 1
        for index, (current, following) in enumerate(zip(tokens, tokens[1:]))
        if current.type == TokenType.END_BLOCK
        and following.type == TokenType.START_BLOCK
    ]
    # Highest index first so earlier positions stay valid
    for position in reversed(positions):
        tokens.insert(position, Token.binary(BinaryOp.MUL))
    return len(positions)


_FIXERS = (
    (FixRule.CLOSE_BLOCKS, close_blocks),
    (FixRule.BLOCK_PRODUCT, block_product),
)


def fix(tokens: list[Token], rules: Iterable[FixRule] = ()) -> list[Token]:
    """Apply the enabled fix rules to tokens in place.

    Args:
        tokens: Token list produced by the lexer
        rules: Fix rules to apply

    Returns:
        The same list, for chaining
    """
    enabled = frozenset(rules)
    for rule, fixer in _FIXERS:
        if rule in enabled:
            changed = fixer(tokens)
            logger.debug("Fix rule %s changed %d token(s)", rule.value, changed)
    return tokens
