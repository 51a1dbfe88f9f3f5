"""Single-expression commands: eval, tokens, parse."""

import click

from pemdas.cli.output import echo_error, format_result
from pemdas.config import CalculatorConfig
from pemdas.errors import EvaluationError
from pemdas.evaluator import evaluate_from_string
from pemdas.lexer import Lexer, TokenType
from pemdas.numeric import format_number
from pemdas.parser import parse


@click.command("eval")
@click.argument("expression")
@click.pass_obj
def eval_cmd(config: CalculatorConfig, expression: str):
    """Evaluate EXPRESSION and print the result."""
    try:
        result = evaluate_from_string(
            expression, strict=config.strict, domain=config.domain
        )
    except EvaluationError as e:
        echo_error(e, expression)
        raise SystemExit(1)

    click.echo(format_result(result, config.precision))


@click.command("tokens")
@click.argument("expression")
@click.pass_obj
def tokens_cmd(config: CalculatorConfig, expression: str):
    """Print the tokens of EXPRESSION, one per line."""
    lexer = Lexer(expression, strict=config.strict, domain=config.domain)
    try:
        for token in lexer:
            value = format_number(token.value) if token.type == TokenType.NUMBER else token.value
            click.echo(f"{token.position:>4}  {token.type.name:<8} {value}")
    except EvaluationError as e:
        echo_error(e, expression)
        raise SystemExit(1)


@click.command("parse")
@click.argument("expression")
@click.option("--json", "as_json", is_flag=True, default=False, help="Print the tree as JSON.")
@click.pass_obj
def parse_cmd(config: CalculatorConfig, expression: str, as_json: bool):
    """Print the syntax tree of EXPRESSION."""
    try:
        ast = parse(Lexer(expression, strict=config.strict, domain=config.domain))
    except EvaluationError as e:
        echo_error(e, expression)
        raise SystemExit(1)

    if as_json:
        click.echo(ast.to_json())
    else:
        click.echo(ast.render())
