"""Run the HTTP service."""

import click

from pemdas.config import CalculatorConfig


@click.command()
@click.option("--host", default="127.0.0.1", show_default=True)
@click.option("--port", default=8000, show_default=True, type=int)
@click.pass_obj
def serve(config: CalculatorConfig, host: str, port: int):
    """Serve POST /api/evaluate with uvicorn."""
    import uvicorn

    from pemdas.api.app import create_app

    uvicorn.run(
        create_app(config),
        host=host,
        port=port,
        log_level=config.log_level.lower(),
    )
