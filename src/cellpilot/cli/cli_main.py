"""CLI entry point for CellPilot."""

from __future__ import annotations

import click

from cellpilot import __version__

# Import commands
from cellpilot.cli.commands import access, analyze, formula, serve
from cellpilot.utils.config import load_config
from cellpilot.utils.logging import setup_logging


@click.group()
@click.version_option(version=__version__)
@click.option(
    "--config",
    type=click.Path(exists=True),
    help="Path to config.yml file",
)
@click.option(
    "--log-level",
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"], case_sensitive=False),
    default="INFO",
    help="Logging level",
)
@click.pass_context
def cli(ctx, config, log_level):
    """CellPilot - spreadsheet structure analysis and formula building.

    \b
    Examples:
        # Find relationships between exported sheets
        cellpilot analyze ./data/sheets

        # Generate a cross-sheet formula
        cellpilot formula lookup.yml --tables-dir ./data/sheets

        # Check feature access for a tier
        cellpilot access automation --tier starter
    """
    ctx.ensure_object(dict)

    # Setup logging
    setup_logging(level=log_level)

    # Load config if provided
    if config:
        ctx.obj["config"] = load_config(config)


# Register commands
cli.add_command(analyze.analyze_cmd)
cli.add_command(formula.formula_cmd)
cli.add_command(access.access_cmd)
cli.add_command(serve.serve_cmd)


def main():
    """Main entry point."""
    cli(obj={})


if __name__ == "__main__":
    main()
