"""Token model for ratcalc expressions.

A token is a (type, value) pair where the type is one of a closed set of
TokenType members and the value carries the variant payload:

- NUMBER: an exact Fraction
- START_BLOCK / END_BLOCK: the Block kind (bracket or abs)
- UNARY_LEFT: a prefix operator (sign or derangement)
- UNARY_RIGHT: a postfix operator (factorial)
- BINARY_OP: an infix operator

Priorities drive the reducer: lower values are evaluated first.
"""

from dataclasses import dataclass, field
from enum import Enum, auto
from fractions import Fraction


class TokenType(Enum):
    """Variant tag of a token."""

    NUMBER = auto()
    START_BLOCK = auto()
    END_BLOCK = auto()
    UNARY_LEFT = auto()
    UNARY_RIGHT = auto()
    BINARY_OP = auto()


class Block(Enum):
    """Kinds of delimited blocks."""

    BRACKET = "bracket"
    ABS = "abs"

    @property
    def opener(self) -> str:
        return "(" if self is Block.BRACKET else "|"

    @property
    def closer(self) -> str:
        return ")" if self is Block.BRACKET else "|"


class UnaryLeft(Enum):
    """Prefix operators."""

    POS = "+"
    NEG = "-"
    DERANGEMENT = "!"

    @property
    def is_sign(self) -> bool:
        return self in (UnaryLeft.POS, UnaryLeft.NEG)


class UnaryRight(Enum):
    """Postfix operators."""

    FACTORIAL = "!"


class BinaryOp(Enum):
    """Infix operators."""

    ADD = "+"
    SUB = "-"
    MUL = "*"
    DIV = "/"
    MOD = "%"
    EXP = "^"


# Binary operator priorities (lower binds tighter)
BINARY_PRIORITY: dict[BinaryOp, int] = {
    BinaryOp.EXP: 3,
    BinaryOp.MUL: 4,
    BinaryOp.DIV: 4,
    BinaryOp.MOD: 4,
    BinaryOp.ADD: 5,
    BinaryOp.SUB: 5,
}

TokenValue = Fraction | Block | UnaryLeft | UnaryRight | BinaryOp


@dataclass(frozen=True)
class Token:
    """A single token of an expression.

    Attributes:
        type: The token type
        value: The variant payload (Fraction, Block or operator enum)
        position: Character position in the source string, -1 for tokens
            that were synthesized rather than read
    """

    type: TokenType
    value: TokenValue
    position: int = field(default=-1, compare=False)

    # -------------------------------------------------------------------------
    # Constructors
    # -------------------------------------------------------------------------

    @classmethod
    def number(cls, value: Fraction | int | str, position: int = -1) -> "Token":
        return cls(TokenType.NUMBER, Fraction(value), position)

    @classmethod
    def start(cls, block: Block, position: int = -1) -> "Token":
        return cls(TokenType.START_BLOCK, block, position)

    @classmethod
    def end(cls, block: Block, position: int = -1) -> "Token":
        return cls(TokenType.END_BLOCK, block, position)

    @classmethod
    def unary_left(cls, op: UnaryLeft, position: int = -1) -> "Token":
        return cls(TokenType.UNARY_LEFT, op, position)

    @classmethod
    def unary_right(cls, op: UnaryRight, position: int = -1) -> "Token":
        return cls(TokenType.UNARY_RIGHT, op, position)

    @classmethod
    def binary(cls, op: BinaryOp, position: int = -1) -> "Token":
        return cls(TokenType.BINARY_OP, op, position)

    # -------------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------------

    @property
    def priority(self) -> int | None:
        """Evaluation priority, or None for tokens that are never selected."""
        if self.type == TokenType.START_BLOCK:
            return 0
        if self.type == TokenType.UNARY_RIGHT:
            return 1
        if self.type == TokenType.UNARY_LEFT:
            return 2
        if self.type == TokenType.BINARY_OP:
            return BINARY_PRIORITY[self.value]
        return None

    def is_(self, token_type: TokenType, value: TokenValue | None = None) -> bool:
        """Check the token type and, optionally, its payload."""
        if self.type != token_type:
            return False
        return value is None or self.value == value

    @property
    def closes_operand(self) -> bool:
        """True if a following +, - or ! must be read as infix/postfix."""
        return self.type in (
            TokenType.NUMBER,
            TokenType.END_BLOCK,
            TokenType.UNARY_RIGHT,
        )

    def __str__(self) -> str:
        if self.type == TokenType.NUMBER:
            return str(self.value)
        if self.type == TokenType.START_BLOCK:
            return self.value.opener
        if self.type == TokenType.END_BLOCK:
            return self.value.closer
        return self.value.value

    def __repr__(self) -> str:
        if self.type == TokenType.NUMBER:
            return f"Token(NUMBER, {self})"
        return f"Token({self.type.name}, {self.value.name})"


def render(tokens) -> str:
    """Render tokens back into surface syntax, space separated."""
    return " ".join(str(token) for token in tokens)
