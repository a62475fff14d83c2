"""Error taxonomy for ratcalc.

Every stage raises its own family of errors:
- ParseError: raised by the tokenizer (bad characters, bad literals)
- CheckError: raised by the validator (unbalanced blocks, ungrammatical
  sequences, denied operators)
- SolveError: raised by the reducer (illegal operand values)

All of them derive from CalcError so callers can catch the whole pipeline
with a single except clause.
"""

from collections.abc import Sequence
from typing import TYPE_CHECKING

from ratcalc.tokens import Token, TokenType, render

if TYPE_CHECKING:
    from ratcalc.validator import CheckRule


class CalcError(Exception):
    """Base class for all expression errors."""
    pass


# -----------------------------------------------------------------------------
# Parse errors
# -----------------------------------------------------------------------------


class ParseError(CalcError):
    """Error during tokenization."""
    pass


class InvalidTokenError(ParseError):
    """A character that does not belong to the expression alphabet."""

    def __init__(self, char: str, position: int = -1):
        self.char = char
        self.position = position
        location = f" at position {position}" if position >= 0 else ""
        super().__init__(f"Invalid token '{char}'{location}")


class InvalidNumberError(ParseError):
    """A number literal that cannot be read as a rational."""

    def __init__(self, literal: str, position: int = -1):
        self.literal = literal
        self.position = position
        location = f" at position {position}" if position >= 0 else ""
        super().__init__(f"Invalid number '{literal}'{location}")


# -----------------------------------------------------------------------------
# Check errors
# -----------------------------------------------------------------------------


class CheckError(CalcError):
    """Error during validation."""
    pass


class UnbalancedBlocksError(CheckError):
    """Blocks that are closed by the wrong delimiter or never closed."""

    def __init__(self, tokens: Sequence[Token]):
        self.tokens = list(tokens)
        super().__init__(f"Unbalanced blocks: {render(self.tokens)}")


class ExprWithNoResultError(CheckError):
    """A token sequence that does not collapse into a single number."""

    def __init__(self, token_types: Sequence[TokenType]):
        self.token_types = list(token_types)
        names = ", ".join(t.name for t in self.token_types) or "empty expression"
        super().__init__(f"Expression has no result: {names}")


class BrokenCheckRuleError(CheckError):
    """A token pattern denied by an active check rule."""

    def __init__(self, rule: "CheckRule", tokens: Sequence[Token] = ()):
        self.rule = rule
        self.tokens = list(tokens)
        detail = f" near '{render(self.tokens)}'" if self.tokens else ""
        super().__init__(f"Check rule '{rule.value}' broken{detail}")


# -----------------------------------------------------------------------------
# Solve errors
# -----------------------------------------------------------------------------


class SolveError(CalcError):
    """Error during reduction."""
    pass


class OperIllegalValuesError(SolveError):
    """An operator applied to values outside its domain."""

    def __init__(self, tokens: Sequence[Token], reason: str | None = None):
        self.tokens = list(tokens)
        self.reason = reason
        detail = f" ({reason})" if reason else ""
        super().__init__(f"Illegal values for operation: {render(self.tokens)}{detail}")
