"""CSV connector: a directory of exported sheets, one CSV file per table."""

from __future__ import annotations

from pathlib import Path
from typing import Dict, List

import pandas as pd

from cellpilot.connectors.base import BaseConnector


class CSVLoader(BaseConnector):
    """Load tables from CSV files, naming each table after its file stem.

    Example:
        >>> loader = CSVLoader("./exports", file_pattern="*.csv")
        >>> loader.get_table_names()
        ['Customers', 'Orders']
    """

    def __init__(
        self,
        data_dir: str | Path,
        file_pattern: str = "*.csv",
        **pandas_kwargs,
    ):
        """Initialize CSV loader.

        Args:
            data_dir: Directory containing the exported sheets
            file_pattern: Glob pattern selecting table files
            **pandas_kwargs: Passed through to ``pd.read_csv``

        Raises:
            FileNotFoundError: If ``data_dir`` does not exist
            NotADirectoryError: If ``data_dir`` is not a directory
        """
        super().__init__(data_dir=str(data_dir), file_pattern=file_pattern, **pandas_kwargs)

        self.data_dir = Path(data_dir)
        self.file_pattern = file_pattern
        self.pandas_kwargs = pandas_kwargs

        if not self.data_dir.exists():
            raise FileNotFoundError(f"Data directory not found: {self.data_dir}")
        if not self.data_dir.is_dir():
            raise NotADirectoryError(f"Not a directory: {self.data_dir}")

    def _table_files(self) -> List[Path]:
        # Sorted so table order, and therefore relationship order, is stable
        return sorted(p for p in self.data_dir.glob(self.file_pattern) if p.is_file())

    def _read(self, path: Path) -> pd.DataFrame:
        try:
            return pd.read_csv(path, **self.pandas_kwargs)
        except pd.errors.EmptyDataError:
            # A sheet with no header row at all
            self.logger.warning(f"{path.name} is empty; loading it as a table without columns")
            return pd.DataFrame()

    def load_tables(self) -> Dict[str, pd.DataFrame]:
        """Read every matching file.

        Returns:
            Dict mapping table name -> DataFrame, in file-name order

        Raises:
            ValueError: If no file matches the pattern
        """
        files = self._table_files()
        if not files:
            raise ValueError(
                f"No CSV files found in {self.data_dir} matching pattern '{self.file_pattern}'"
            )

        self.logger.info(f"Loading {len(files)} tables from {self.data_dir}")

        tables: Dict[str, pd.DataFrame] = {}
        for path in files:
            df = self._read(path)
            tables[path.stem] = df
            self.logger.debug(f"  {path.stem}: {len(df)} rows, {len(df.columns)} columns")

        return tables

    def get_table_names(self) -> List[str]:
        return [path.stem for path in self._table_files()]

    def load_single_table(self, table_name: str) -> pd.DataFrame:
        """Read one table by name.

        Args:
            table_name: File stem of the table

        Returns:
            DataFrame

        Raises:
            FileNotFoundError: If ``<table_name>.csv`` does not exist
        """
        path = self.data_dir / f"{table_name}.csv"
        if not path.exists():
            raise FileNotFoundError(f"CSV file not found: {path}")
        return self._read(path)
