"""CLI decorators for common options and error handling."""

from cellpilot.cli.decorators.error_handling import handle_errors
from cellpilot.cli.decorators.options import with_output_file, with_pattern

__all__ = [
    "handle_errors",
    "with_output_file",
    "with_pattern",
]
