"""Connector over DataFrames that are already in memory."""

from __future__ import annotations

from typing import Dict, List

import pandas as pd

from cellpilot.connectors.base import BaseConnector


class FrameConnector(BaseConnector):
    """Serve tables from a dict of DataFrames.

    Example:
        >>> connector = FrameConnector({"Orders": orders_df})
        >>> raw_tables = connector.load_raw_tables()
    """

    def __init__(self, tables: Dict[str, pd.DataFrame]):
        super().__init__(tables=list(tables))
        self.tables = dict(tables)

    def load_tables(self) -> Dict[str, pd.DataFrame]:
        return dict(self.tables)

    def get_table_names(self) -> List[str]:
        return list(self.tables)
