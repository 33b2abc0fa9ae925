"""Base connector interface."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Dict, List

import pandas as pd

from cellpilot.core.schema.scanner import MAX_SAMPLE_SIZE, raw_table_from_frame
from cellpilot.core.schema.types import RawTable
from cellpilot.utils.logging import get_logger


class BaseConnector(ABC):
    """Abstract base class for table sources."""

    def __init__(self, **kwargs):
        """Initialize connector.

        Args:
            **kwargs: Connector-specific configuration
        """
        self.config = kwargs
        self.logger = get_logger(f"{__name__}.{self.__class__.__name__}")

    @abstractmethod
    def load_tables(self) -> Dict[str, pd.DataFrame]:
        """Load tables into memory.

        Returns:
            Dict mapping table_name -> DataFrame

        Raises:
            NotImplementedError: Must be implemented by subclasses
        """
        pass

    @abstractmethod
    def get_table_names(self) -> List[str]:
        """Get list of available table names.

        Returns:
            List of table names

        Raises:
            NotImplementedError: Must be implemented by subclasses
        """
        pass

    def load_raw_tables(self, sample_size: int = MAX_SAMPLE_SIZE) -> List[RawTable]:
        """Load tables as RawTable snapshots for schema scanning.

        Args:
            sample_size: Leading rows kept per table

        Returns:
            List of RawTable objects, in table load order
        """
        tables = self.load_tables()
        return [
            raw_table_from_frame(name, df, sample_size=sample_size)
            for name, df in tables.items()
        ]

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self.config})"
