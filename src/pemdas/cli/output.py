"""Terminal formatting for results and errors."""

import math
from decimal import Decimal

import click

from pemdas.errors import EvaluationError, LexError
from pemdas.numeric import Number, format_integer


def format_result(value: Number, precision: int) -> str:
    """Format a result with a fixed number of digits after the point."""
    if isinstance(value, float):
        if math.isnan(value):
            return "nan"
        if math.isinf(value):
            return "inf" if value > 0 else "-inf"
        return f"{value:.{precision}f}"
    if isinstance(value, Decimal):
        if not value.is_finite():
            return str(value)
        return f"{value:.{precision}f}"
    return format_integer(value)


def format_error(error: EvaluationError, expression: str) -> str:
    """Describe an error; lexical errors point at the offending character."""
    lines = [f"{error.category.capitalize()} error: {error.message}"]
    if isinstance(error, LexError) and 0 <= error.index < len(expression):
        lines.append(f"  {expression}")
        lines.append("  " + " " * error.index + "^")
    return "\n".join(lines)


def echo_error(error: EvaluationError, expression: str) -> None:
    click.echo(click.style(format_error(error, expression), fg="red"), err=True)
