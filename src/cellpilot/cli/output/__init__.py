"""CLI output helpers."""

from cellpilot.cli.output.formatters import OutputFormatter

__all__ = ["OutputFormatter"]
