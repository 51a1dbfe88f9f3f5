"""Arithmetic expression evaluation.

This package provides:
- Lexer: Tokenizes expression strings
- Parser: Produces an AST honoring precedence and associativity
- Evaluator: Collapses the AST into a number in a chosen numeric domain
"""

from pemdas.errors import (
    ArithmeticErrorKind,
    DomainArithmeticError,
    EvaluationError,
    LexError,
    LexErrorKind,
    StructuralError,
    StructuralErrorKind,
)
from pemdas.evaluator import Evaluator, evaluate, evaluate_from_string
from pemdas.lexer import Lexer, Token, TokenType, tokenize
from pemdas.numeric import NumberDomain, parse_constant
from pemdas.parser import (
    ASTNode,
    Binary,
    BinaryOperation,
    Constant,
    Parser,
    TokenCursor,
    parse,
    parse_expression,
)

__all__ = [
    # Errors
    "ArithmeticErrorKind",
    "DomainArithmeticError",
    "EvaluationError",
    "LexError",
    "LexErrorKind",
    "StructuralError",
    "StructuralErrorKind",
    # Evaluator
    "Evaluator",
    "evaluate",
    "evaluate_from_string",
    # Lexer
    "Lexer",
    "Token",
    "TokenType",
    "tokenize",
    # Numeric domains
    "NumberDomain",
    "parse_constant",
    # Parser
    "ASTNode",
    "Binary",
    "BinaryOperation",
    "Constant",
    "Parser",
    "TokenCursor",
    "parse",
    "parse_expression",
]
