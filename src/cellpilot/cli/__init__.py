"""Command-line interface for CellPilot."""
