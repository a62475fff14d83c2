"""Lexer/tokenizer for ratcalc expressions.

Converts expression strings into a list of tokens. Some symbols mean
different things depending on where they appear:
- `+` and `-` are infix after an operand (number, closed block, postfix
  operator) and prefix signs anywhere else
- `!` is the postfix factorial after an operand and the prefix
  derangement (subfactorial) anywhere else
- `|` closes the innermost block when that block is an open abs block,
  and opens a new abs block otherwise

The lexer never rejects unbalanced blocks: balance is checked by the
validator, which lets the fixer close dangling blocks first.
"""

import logging
from typing import Iterator

from ratcalc.arithmetic import parse_number
from ratcalc.errors import InvalidTokenError
from ratcalc.tokens import BinaryOp, Block, Token, UnaryLeft, UnaryRight

logger = logging.getLogger(__name__)

# Characters accumulated into a number literal
LITERAL_CHARS = frozenset("0123456789._")

BINARY_SYMBOLS = {
    "*": BinaryOp.MUL,
    "/": BinaryOp.DIV,
    "%": BinaryOp.MOD,
    "^": BinaryOp.EXP,
}

SIGN_SYMBOLS = {
    "+": (BinaryOp.ADD, UnaryLeft.POS),
    "-": (BinaryOp.SUB, UnaryLeft.NEG),
}


class Lexer:
    """Tokenizer for ratcalc expressions.

    Usage:
        lexer = Lexer("-3 + |2 - 7|!")
        for token in lexer:
            print(token)
    """

    def __init__(self, source: str):
        self.source = source
        self._reset()

    def _reset(self) -> None:
        """Clear the scan state so every iteration starts from scratch."""
        self._blocks: list[Block] = []
        self._previous: Token | None = None
        self._literal = ""
        self._literal_start = -1

    def __iter__(self) -> Iterator[Token]:
        """Iterate over all tokens in the source."""
        self._reset()
        for position, char in enumerate(self.source):
            if char in LITERAL_CHARS:
                if not self._literal:
                    self._literal_start = position
                self._literal += char
                continue

            if self._literal:
                yield self._emit(self._flush_literal())

            if char.isspace():
                continue

            yield self._emit(self._read_symbol(char, position))

        if self._literal:
            yield self._emit(self._flush_literal())

    def tokenize(self) -> list[Token]:
        """Tokenize the entire source and return the list of tokens."""
        return list(self)

    # -------------------------------------------------------------------------
    # Helper methods
    # -------------------------------------------------------------------------

    def _emit(self, token: Token) -> Token:
        self._previous = token
        return token

    def _flush_literal(self) -> Token:
        """Turn the pending literal into a NUMBER token."""
        literal, start = self._literal, self._literal_start
        self._literal = ""
        self._literal_start = -1
        return Token.number(parse_number(literal, start), start)

    def _after_operand(self) -> bool:
        return self._previous is not None and self._previous.closes_operand

    def _read_symbol(self, char: str, position: int) -> Token:
        """Classify a single non-literal character."""
        if char in SIGN_SYMBOLS:
            binary, sign = SIGN_SYMBOLS[char]
            if self._after_operand():
                return Token.binary(binary, position)
            return Token.unary_left(sign, position)

        if char in BINARY_SYMBOLS:
            return Token.binary(BINARY_SYMBOLS[char], position)

        if char == "!":
            if self._after_operand():
                return Token.unary_right(UnaryRight.FACTORIAL, position)
            return Token.unary_left(UnaryLeft.DERANGEMENT, position)

        if char == "(":
            self._blocks.append(Block.BRACKET)
            return Token.start(Block.BRACKET, position)

        if char == ")":
            # A mismatched close is kept and reported by the validator
            if self._blocks and self._blocks[-1] is Block.BRACKET:
                self._blocks.pop()
            return Token.end(Block.BRACKET, position)

        if char == "|":
            if self._blocks and self._blocks[-1] is Block.ABS:
                self._blocks.pop()
                return Token.end(Block.ABS, position)
            self._blocks.append(Block.ABS)
            return Token.start(Block.ABS, position)

        raise InvalidTokenError(char, position)


def tokenize(source: str) -> list[Token]:
    """Convenience function to tokenize an expression string.

    Args:
        source: The expression string

    Returns:
        The list of tokens

    Raises:
        InvalidTokenError: On a character outside the expression alphabet
        InvalidNumberError: On a malformed number literal
    """
    tokens = Lexer(source).tokenize()
    logger.debug("Tokenized %r into %d token(s)", source, len(tokens))
    return tokens
