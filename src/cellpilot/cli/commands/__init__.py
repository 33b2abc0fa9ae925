"""CLI command modules."""

from . import access, analyze, formula, serve

__all__ = ["access", "analyze", "formula", "serve"]
