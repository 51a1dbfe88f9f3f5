"""pemdas CLI entry point."""

import logging
from pathlib import Path

import click

from pemdas.config import CalculatorConfig
from pemdas.numeric import NumberDomain


@click.group()
@click.option(
    "--config",
    "config_path",
    default=None,
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help="YAML settings file (defaults to $PEMDAS_CONFIG).",
)
@click.option(
    "--strict/--permissive",
    default=None,
    help="Report unknown characters (strict) or skip them (permissive).",
)
@click.option(
    "--domain",
    type=click.Choice([d.value for d in NumberDomain], case_sensitive=False),
    default=None,
    help="Number type used for evaluation.",
)
@click.option(
    "--precision",
    type=click.IntRange(min=0),
    default=None,
    help="Digits printed after the decimal point.",
)
@click.option("--log-level", default=None, help="Logging level (e.g. DEBUG).")
@click.pass_context
def cli(ctx, config_path, strict, domain, precision, log_level):
    """pemdas: arithmetic expression calculator."""
    try:
        config = CalculatorConfig.load(config_path)
        config = CalculatorConfig.from_mapping(
            {
                "strict": strict,
                "domain": domain,
                "precision": precision,
                "log_level": log_level,
            },
            config,
        )
    except ValueError as e:
        raise click.UsageError(str(e))

    logging.basicConfig(
        level=config.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    ctx.obj = config


# Register subcommands
from pemdas.cli.expression_cmd import eval_cmd, parse_cmd, tokens_cmd  # noqa: E402
from pemdas.cli.repl_cmd import repl  # noqa: E402
from pemdas.cli.serve_cmd import serve  # noqa: E402

cli.add_command(eval_cmd)
cli.add_command(tokens_cmd)
cli.add_command(parse_cmd)
cli.add_command(repl)
cli.add_command(serve)
