"""Exact rational expression evaluation.

This package provides:
- Lexer: Tokenizes expression strings
- Fixer: Optional structural normalization of token sequences
- Validator: Block balance, grammar and caller-selected check rules
- Solver: Priority-driven reduction to a single Fraction
- evaluate: The whole pipeline in one call
"""

from ratcalc.arithmetic import (
    derangement,
    exponent,
    factorial,
    format_decimal,
    format_rational,
    parse_number,
    product_range,
    remainder,
)
from ratcalc.errors import (
    BrokenCheckRuleError,
    CalcError,
    CheckError,
    ExprWithNoResultError,
    InvalidNumberError,
    InvalidTokenError,
    OperIllegalValuesError,
    ParseError,
    SolveError,
    UnbalancedBlocksError,
)
from ratcalc.fixer import FixRule, fix
from ratcalc.lexer import Lexer, tokenize
from ratcalc.solver import Solver, evaluate, solve
from ratcalc.tokens import (
    BinaryOp,
    Block,
    Token,
    TokenType,
    UnaryLeft,
    UnaryRight,
)
from ratcalc.validator import CheckRule, validate

__all__ = [
    # Arithmetic
    "derangement",
    "exponent",
    "factorial",
    "format_decimal",
    "format_rational",
    "parse_number",
    "product_range",
    "remainder",
    # Errors
    "BrokenCheckRuleError",
    "CalcError",
    "CheckError",
    "ExprWithNoResultError",
    "InvalidNumberError",
    "InvalidTokenError",
    "OperIllegalValuesError",
    "ParseError",
    "SolveError",
    "UnbalancedBlocksError",
    # Fixer
    "FixRule",
    "fix",
    # Lexer
    "Lexer",
    "tokenize",
    # Solver
    "Solver",
    "evaluate",
    "solve",
    # Tokens
    "BinaryOp",
    "Block",
    "Token",
    "TokenType",
    "UnaryLeft",
    "UnaryRight",
    # Validator
    "CheckRule",
    "validate",
]
