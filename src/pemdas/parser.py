"""Parser for arithmetic expressions.

Converts a stream of tokens into an Abstract Syntax Tree (AST).
Uses operator-precedence parsing with explicit operand and operator stacks,
so neither parenthesis depth nor chain length is bounded by the
interpreter's recursion limit.

Grammar (lowest to highest precedence):
    sum      := product (('+' | '-') product)*
    product  := power (('*' | '/') power)*
    power    := atom ('^' power)?
    atom     := '(' sum ')' | NUMBER

Sums and products are left-associative; exponentiation is right-associative.
"""

import json
import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Iterable, TypeVar

from pemdas.errors import StructuralError, StructuralErrorKind
from pemdas.lexer import Lexer, Token, TokenType
from pemdas.numeric import Number, NumberDomain, format_number

logger = logging.getLogger(__name__)

T = TypeVar("T")


# -----------------------------------------------------------------------------
# Operations
# -----------------------------------------------------------------------------


class BinaryOperation(Enum):
    """Binary operators, with their symbol, precedence tier and associativity."""

    SUBTRACT = ("-", 0, "left")
    ADD = ("+", 0, "left")
    MULTIPLY = ("*", 1, "left")
    DIVIDE = ("/", 1, "left")
    EXPONENT = ("^", 2, "right")

    def __init__(self, symbol: str, precedence: int, associativity: str):
        self.symbol = symbol
        self.precedence = precedence
        self.associativity = associativity

    @classmethod
    def from_token_type(cls, token_type: TokenType) -> "BinaryOperation | None":
        return _TOKEN_OPERATIONS.get(token_type)

    def binds_before(self, incoming: "BinaryOperation") -> bool:
        """Whether this pending operator is reduced before ``incoming`` is pushed."""
        if self.precedence != incoming.precedence:
            return self.precedence > incoming.precedence
        return incoming.associativity == "left"


_TOKEN_OPERATIONS = {
    TokenType.MINUS: BinaryOperation.SUBTRACT,
    TokenType.PLUS: BinaryOperation.ADD,
    TokenType.ASTERISK: BinaryOperation.MULTIPLY,
    TokenType.SLASH: BinaryOperation.DIVIDE,
    TokenType.CARET: BinaryOperation.EXPONENT,
}


# -----------------------------------------------------------------------------
# AST Node Types
# -----------------------------------------------------------------------------


@dataclass(frozen=True)
class ASTNode:
    """Base class for AST nodes."""

    def render(self) -> str:
        """Fully parenthesized infix form, e.g. ((2 - 3) - 4)."""
        return fold_tree(
            self,
            lambda node: format_number(node.value),
            lambda node, left, right: f"({left} {node.operation.symbol} {right})",
        )

    def to_dict(self) -> dict[str, Any]:
        return fold_tree(
            self,
            lambda node: {"type": "constant", "value": format_number(node.value)},
            lambda node, left, right: {
                "type": "binary",
                "operation": node.operation.name.lower(),
                "left": left,
                "right": right,
            },
        )

    def to_json(self) -> str:
        """JSON text of to_dict(), built without json's nesting limit."""
        return fold_tree(
            self,
            lambda node: json.dumps(
                {"type": "constant", "value": format_number(node.value)}
            ),
            lambda node, left, right: (
                '{"type": "binary", "operation": '
                f'{json.dumps(node.operation.name.lower())}, '
                f'"left": {left}, "right": {right}}}'
            ),
        )


@dataclass(frozen=True)
class Constant(ASTNode):
    """A numeric literal."""
    value: Number


@dataclass(frozen=True)
class Binary(ASTNode):
    """Binary operation (e.g., a + b, x ^ y)."""
    operation: BinaryOperation
    left: ASTNode
    right: ASTNode


def fold_tree(
    root: ASTNode,
    on_constant: Callable[[Constant], T],
    on_binary: Callable[[Binary, T, T], T],
) -> T:
    """Combine a tree bottom-up in post-order (left, right, node).

    Uses an explicit stack, so tree depth is not limited by recursion.
    """
    results: list[T] = []
    pending: list[tuple[ASTNode, bool]] = [(root, False)]

    while pending:
        node, children_done = pending.pop()

        if isinstance(node, Constant):
            results.append(on_constant(node))
        elif isinstance(node, Binary):
            if children_done:
                right = results.pop()
                left = results.pop()
                results.append(on_binary(node, left, right))
            else:
                pending.append((node, True))
                pending.append((node.right, False))
                pending.append((node.left, False))
        else:
            raise TypeError(f"Unknown node type: {type(node).__name__}")

    return results.pop()


# -----------------------------------------------------------------------------
# Cursor
# -----------------------------------------------------------------------------


class TokenCursor:
    """Read position over a materialized token sequence.

    Past the last token, ``current`` returns a synthesized EOF token located
    at ``end_position``.
    """

    def __init__(self, tokens: Iterable[Token], end_position: int | None = None):
        self.tokens: tuple[Token, ...] = tuple(tokens)
        self.index = 0
        if end_position is None:
            end_position = self.tokens[-1].position + 1 if self.tokens else 0
        self.end_position = end_position

    @property
    def current(self) -> Token:
        if self.index >= len(self.tokens):
            return Token(TokenType.EOF, None, self.end_position)
        return self.tokens[self.index]

    def at_end(self) -> bool:
        return self.current.type == TokenType.EOF

    def advance(self) -> Token:
        """Consume and return current token."""
        token = self.current
        if token.type != TokenType.EOF:
            self.index += 1
        return token


def _malformed(message: str, token: Token) -> StructuralError:
    return StructuralError(
        StructuralErrorKind.MALFORMED_EXPRESSION, message, token.position
    )


def _describe(token: Token) -> str:
    if token.type == TokenType.EOF:
        return "end of input"
    if token.type == TokenType.NUMBER:
        return f"'{format_number(token.value)}'"
    return f"'{token.value}'"


def check_balance(tokens: Iterable[Token]) -> None:
    """Reject token sequences whose open and close parentheses differ in count.

    The count is global: ")(" passes here and is rejected by the parser.
    """
    depth = 0
    for token in tokens:
        if token.type == TokenType.LPAREN:
            depth += 1
        elif token.type == TokenType.RPAREN:
            depth -= 1
    if depth > 0:
        raise StructuralError(
            StructuralErrorKind.UNBALANCED_PARENTHESIS,
            f"Unbalanced parenthesis: {depth} unclosed '('",
        )
    if depth < 0:
        raise StructuralError(
            StructuralErrorKind.UNBALANCED_PARENTHESIS,
            f"Unbalanced parenthesis: {-depth} unmatched ')'",
        )


# -----------------------------------------------------------------------------
# Parser
# -----------------------------------------------------------------------------


class Parser:
    """Operator-precedence parser for arithmetic expressions.

    The parser alternates between expecting an operand (a number or '(')
    and expecting an operator (a binary operator, ')' or end of input).
    Pending operators wait on a stack until an operator that binds no
    tighter arrives, then each is reduced with the top two operands.

    Usage:
        parser = Parser(Lexer("(5 - 2) * 5"))
        ast = parser.parse()
    """

    def __init__(self, tokens: Iterable[Token], end_position: int | None = None):
        self.cursor = TokenCursor(tokens, end_position)
        self._operands: list[ASTNode] = []
        # BinaryOperation entries, or the LPAREN token that opened a group
        self._operators: list[BinaryOperation | Token] = []

    def parse(self) -> ASTNode:
        """Parse the whole token sequence and return the AST root."""
        check_balance(self.cursor.tokens)

        if self.cursor.at_end():
            raise StructuralError(
                StructuralErrorKind.MALFORMED_EXPRESSION, "Empty expression"
            )

        self._operands.clear()
        self._operators.clear()
        expect_operand = True

        while True:
            token = self.cursor.advance()
            if expect_operand:
                expect_operand = self._shift_operand(token)
            elif self._shift_operator(token):
                expect_operand = True
            elif token.type == TokenType.EOF:
                break

        ast = self._operands.pop()
        logger.debug("Parsed %d tokens", len(self.cursor.tokens))
        return ast

    # -------------------------------------------------------------------------
    # Shift/reduce steps
    # -------------------------------------------------------------------------

    def _shift_operand(self, token: Token) -> bool:
        """Handle a token where an operand is due; returns whether one is still due."""
        if token.type == TokenType.NUMBER:
            self._operands.append(Constant(token.value))
            return False

        if token.type == TokenType.LPAREN:
            self._operators.append(token)
            return True

        raise _malformed(f"Expected a number or '(' but found {_describe(token)}", token)

    def _shift_operator(self, token: Token) -> bool:
        """Handle a token after a complete operand; returns whether an operand is now due."""
        operation = BinaryOperation.from_token_type(token.type)
        if operation is not None:
            while self._pending_operation_binds_before(operation):
                self._reduce()
            self._operators.append(operation)
            return True

        if token.type == TokenType.RPAREN:
            self._close_group(token)
            return False

        if token.type == TokenType.EOF:
            while self._operators:
                if isinstance(self._operators[-1], Token):
                    raise _malformed("Expected ')' after expression", token)
                self._reduce()
            return False

        raise _malformed(f"Unexpected token {_describe(token)}", token)

    def _pending_operation_binds_before(self, incoming: BinaryOperation) -> bool:
        if not self._operators:
            return False
        top = self._operators[-1]
        return isinstance(top, BinaryOperation) and top.binds_before(incoming)

    def _close_group(self, token: Token) -> None:
        while self._operators and isinstance(self._operators[-1], BinaryOperation):
            self._reduce()
        if not self._operators:
            raise _malformed("Unexpected token ')'", token)
        self._operators.pop()

    def _reduce(self) -> None:
        operation = self._operators.pop()
        right = self._operands.pop()
        left = self._operands.pop()
        self._operands.append(Binary(operation, left, right))


def parse(tokens: Iterable[Token], end_position: int | None = None) -> ASTNode:
    """Parse a token sequence (a list, or a Lexer) into an AST.

    Raises:
        LexError: If the tokens come from a lexer that hits invalid input
        StructuralError: If the tokens do not form exactly one expression
    """
    if end_position is None and isinstance(tokens, Lexer):
        end_position = len(tokens.source)
    return Parser(tokens, end_position).parse()


def parse_expression(
    source: str,
    strict: bool = True,
    domain: NumberDomain | str = NumberDomain.FLOAT,
) -> ASTNode:
    """Convenience function to lex and parse an expression string.

    Args:
        source: The expression string
        strict: Report unknown characters instead of skipping them
        domain: Number type used for numeric literals

    Returns:
        The AST root node
    """
    return parse(Lexer(source, strict=strict, domain=domain))
