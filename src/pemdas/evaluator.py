"""Evaluator for arithmetic expressions.

Walks the AST in post-order (left subtree, right subtree, then the node)
and applies each operator in the configured numeric domain.
"""

import logging
from typing import Callable

from pemdas.lexer import Lexer
from pemdas.numeric import Arithmetic, Number, NumberDomain, arithmetic_for
from pemdas.parser import ASTNode, Binary, BinaryOperation, Constant, fold_tree, parse

logger = logging.getLogger(__name__)


_OPERATIONS: dict[BinaryOperation, Callable[[Arithmetic], Callable]] = {
    BinaryOperation.SUBTRACT: lambda arithmetic: arithmetic.subtract,
    BinaryOperation.ADD: lambda arithmetic: arithmetic.add,
    BinaryOperation.MULTIPLY: lambda arithmetic: arithmetic.multiply,
    BinaryOperation.DIVIDE: lambda arithmetic: arithmetic.divide,
    BinaryOperation.EXPONENT: lambda arithmetic: arithmetic.power,
}

_unhandled = set(BinaryOperation) - set(_OPERATIONS)
if _unhandled:
    raise RuntimeError(
        "No evaluation rule for: " + ", ".join(sorted(op.name for op in _unhandled))
    )


class Evaluator:
    """Evaluates an expression AST in a numeric domain.

    The walk uses an explicit stack, so long operator chains such as
    ``1+1+...+1`` are not limited by the interpreter's recursion depth.

    Usage:
        evaluator = Evaluator(NumberDomain.FLOAT)
        result = evaluator.evaluate(ast)
    """

    def __init__(self, domain: NumberDomain | str = NumberDomain.FLOAT):
        self.arithmetic = arithmetic_for(domain)
        self.domain = self.arithmetic.domain

    def evaluate(self, node: ASTNode) -> Number:
        """Evaluate an AST node and return the result."""
        return fold_tree(node, self._eval_constant, self._eval_binary)

    def _eval_constant(self, node: Constant) -> Number:
        return node.value

    def _eval_binary(self, node: Binary, left: Number, right: Number) -> Number:
        return _OPERATIONS[node.operation](self.arithmetic)(left, right)


# -----------------------------------------------------------------------------
# Convenience functions
# -----------------------------------------------------------------------------


def evaluate(ast: ASTNode, domain: NumberDomain | str = NumberDomain.FLOAT) -> Number:
    """Evaluate an already parsed expression."""
    return Evaluator(domain).evaluate(ast)


def evaluate_from_string(
    expression: str,
    *,
    strict: bool = True,
    domain: NumberDomain | str = NumberDomain.FLOAT,
) -> Number:
    """Evaluate an expression string.

    This is the main entry point for drivers (shell, CLI, HTTP service). Each
    call is independent; nothing is shared between calls.

    Args:
        expression: The expression string to evaluate
        strict: Report unknown characters instead of skipping them
        domain: Number type the expression is evaluated in

    Returns:
        The numeric result

    Raises:
        EvaluationError: LexError, StructuralError, or DomainArithmeticError

    Example:
        result = evaluate_from_string("2^3^2")
        # result = 512.0
    """
    ast = parse(Lexer(expression, strict=strict, domain=domain))
    evaluator = Evaluator(domain)
    result = evaluator.evaluate(ast)
    logger.debug("Evaluated %r in the %s domain", expression, evaluator.domain.value)
    return result
