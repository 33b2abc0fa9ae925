"""Utility helpers for CellPilot."""
