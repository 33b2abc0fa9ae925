"""Cross-sheet formula synthesis command."""

from __future__ import annotations

import json
from pathlib import Path

import click

from cellpilot.cli.decorators import handle_errors, with_output_file, with_pattern
from cellpilot.cli.handlers import FormulaHandler
from cellpilot.cli.output import OutputFormatter
from cellpilot.utils.config import get_config

out = OutputFormatter()


@click.command(name="formula")
@click.argument("request_file", type=click.Path(exists=True, dir_okay=False))
@click.option(
    "--tables-dir",
    "-t",
    type=click.Path(exists=True, file_okay=False),
    help="Directory of CSV tables used to resolve columns and check sheet names",
)
@with_pattern
@with_output_file
@handle_errors
def formula_cmd(request_file, tables_dir, pattern, output):
    """Generate a cross-sheet formula from a request file.

    REQUEST_FILE is YAML or JSON with an "operation" (lookup, aggregate,
    filter, join, pivot) and its parameters.

    \b
    Examples:
        # Build a lookup formula
        cellpilot formula lookup.yml

        # Resolve header names against exported sheets
        cellpilot formula lookup.yml --tables-dir ./data/sheets
    """
    handler = FormulaHandler(get_config())

    request = handler.load_request(request_file)
    result = handler.synthesize(request, tables_dir=tables_dir, pattern=pattern)

    out.formula_result(result)

    if output:
        path = Path(output)
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, "w") as f:
            json.dump(handler.to_dict(result), f, indent=2)
        out.success(f"Result saved to {path}")
