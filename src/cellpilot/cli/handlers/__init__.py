"""CLI command handlers containing business logic."""

from cellpilot.cli.handlers.access_handler import AccessHandler
from cellpilot.cli.handlers.analysis_handler import AnalysisHandler
from cellpilot.cli.handlers.formula_handler import FormulaHandler

__all__ = [
    "AccessHandler",
    "AnalysisHandler",
    "FormulaHandler",
]
