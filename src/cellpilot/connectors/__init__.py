"""Table sources for CellPilot."""

from cellpilot.connectors.base import BaseConnector
from cellpilot.connectors.csv_loader import CSVLoader
from cellpilot.connectors.frame_connector import FrameConnector

__all__ = [
    "BaseConnector",
    "CSVLoader",
    "FrameConnector",
]
