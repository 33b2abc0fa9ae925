"""Common CLI option decorators."""

from __future__ import annotations

import click


def with_output_file(f):
    """Add --output option to command.

    Example:
        @click.command()
        @with_output_file
        def my_command(output):
            pass
    """
    return click.option(
        "--output",
        "-o",
        type=click.Path(),
        help="Write the result as JSON to this file",
    )(f)


def with_pattern(f):
    """Add --pattern option for selecting CSV files.

    Example:
        @click.command()
        @with_pattern
        def my_command(pattern):
            pass
    """
    return click.option(
        "--pattern",
        "-p",
        default="*.csv",
        show_default=True,
        help="Glob pattern for table files",
    )(f)
