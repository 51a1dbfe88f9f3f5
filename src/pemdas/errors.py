"""Error types shared by the lexer, parser and evaluator.

Every failure raised by the core derives from EvaluationError, so a driver
only needs to catch one type:
- LexError: malformed numeric literal or unrecognized character
- StructuralError: unbalanced parentheses or a token sequence that does not
  reduce to a single expression
- DomainArithmeticError: arithmetic the integer domain cannot represent
"""

from enum import Enum
from typing import Any


class LexErrorKind(Enum):
    """Kinds of lexical failure."""

    INVALID_CONSTANT = "invalid_constant"
    UNKNOWN_SYMBOL = "unknown_symbol"


class StructuralErrorKind(Enum):
    """Kinds of structural (parse) failure."""

    UNBALANCED_PARENTHESIS = "unbalanced_parenthesis"
    MALFORMED_EXPRESSION = "malformed_expression"


class ArithmeticErrorKind(Enum):
    """Kinds of arithmetic failure (integer domain only)."""

    DIVISION_BY_ZERO = "division_by_zero"
    RESULT_TOO_LARGE = "result_too_large"


class EvaluationError(Exception):
    """Base class for every error produced while evaluating an expression."""

    category = "evaluation"

    def __init__(self, message: str, kind: Enum, index: int | None = None):
        self.kind = kind
        self.index = index
        self.message = message
        super().__init__(message)

    def to_dict(self) -> dict[str, Any]:
        return {
            "category": self.category,
            "kind": self.kind.value,
            "index": self.index,
            "message": self.message,
        }


class LexError(EvaluationError):
    """Error during lexical analysis.

    Attributes:
        kind: INVALID_CONSTANT or UNKNOWN_SYMBOL
        index: 0-based character index of the fault
    """

    category = "lexical"

    def __init__(self, kind: LexErrorKind, index: int, text: str = ""):
        self.text = text
        if kind is LexErrorKind.INVALID_CONSTANT:
            message = f"Invalid constant '{text}' at index {index}"
        else:
            message = f"Unknown symbol '{text}' at index {index}"
        super().__init__(message, kind, index)


class StructuralError(EvaluationError):
    """Error in the shape of the token sequence.

    ``position`` is the character index of the offending token, or None when
    the failure concerns the whole input (balance check, empty input).
    """

    category = "structural"

    def __init__(
        self,
        kind: StructuralErrorKind,
        detail: str | None = None,
        position: int | None = None,
    ):
        if kind is StructuralErrorKind.UNBALANCED_PARENTHESIS:
            message = detail or "Unbalanced parenthesis"
        else:
            message = detail or "Malformed expression"
        if position is not None:
            message = f"{message} at position {position}"
        super().__init__(message, kind, position)

    @property
    def position(self) -> int | None:
        return self.index


class DomainArithmeticError(EvaluationError):
    """Arithmetic failure the active numeric domain has no value for."""

    category = "arithmetic"

    def __init__(self, kind: ArithmeticErrorKind, detail: str = "Division by zero"):
        super().__init__(detail, kind)
