"""HTTP API for CellPilot."""
