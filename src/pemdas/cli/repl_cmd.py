"""Interactive shell."""

import click

from pemdas.cli.output import echo_error, format_result
from pemdas.config import CalculatorConfig
from pemdas.errors import EvaluationError
from pemdas.evaluator import evaluate_from_string

BANNER = """
Supported arithmetic:
- -> Subtraction
+ -> Addition
* -> Multiplication
/ -> Division
^ -> Exponentiation
"""

EXIT_WORDS = {"exit", "quit"}


@click.command()
@click.pass_obj
def repl(config: CalculatorConfig):
    """Read expressions line by line and print their results.

    Errors are reported and the shell keeps going; it stops at end of
    input or on 'exit' / 'quit'.
    """
    click.echo(BANNER)
    while True:
        try:
            line = click.prompt(
                "Enter an expression",
                default="",
                show_default=False,
                prompt_suffix=": ",
            )
        except click.Abort:
            click.echo()
            break

        expression = line.strip()
        if not expression:
            continue
        if expression.lower() in EXIT_WORDS:
            break

        try:
            result = evaluate_from_string(
                expression, strict=config.strict, domain=config.domain
            )
        except EvaluationError as e:
            echo_error(e, expression)
            continue

        click.echo(f"Result: {format_result(result, config.precision)}")
