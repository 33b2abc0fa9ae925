"""Schema scanning and column type detection."""

from __future__ import annotations

import math
import re
from datetime import date, datetime
from typing import Any, Dict, Iterable, List, Optional, Sequence

import pandas as pd

from cellpilot.core.schema.types import ColumnType, RawTable, TableSchema
from cellpilot.utils.config import get_config
from cellpilot.utils.logging import get_logger

logger = get_logger(__name__)

MAX_SAMPLE_SIZE = 10

# Checked in this order; the first pattern that matches wins.
ID_PATTERN = re.compile(r"^[A-Z]+-\d+$")
EMAIL_PATTERN = re.compile(r"^[\w.-]+@[\w.-]+\.\w+$")
CURRENCY_PATTERN = re.compile(r"^\$?[\d,]+\.?\d*$")
PERCENTAGE_PATTERN = re.compile(r"^\d+\.?\d*%$")


def _is_empty(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, float) and math.isnan(value):
        return True
    return isinstance(value, str) and not value.strip()


def _is_numeric(value: Any) -> bool:
    if isinstance(value, bool):
        return False
    if isinstance(value, (int, float)):
        return math.isfinite(value)
    try:
        return math.isfinite(float(str(value).strip()))
    except ValueError:
        return False


def classify_value(value: Any) -> ColumnType:
    """Classify a single non-empty cell value.

    Args:
        value: Raw cell value

    Returns:
        ColumnType for the value
    """
    text = str(value)

    if ID_PATTERN.match(text):
        return ColumnType.ID
    if EMAIL_PATTERN.match(text):
        return ColumnType.EMAIL
    if CURRENCY_PATTERN.match(text):
        return ColumnType.CURRENCY
    if PERCENTAGE_PATTERN.match(text):
        return ColumnType.PERCENTAGE
    if isinstance(value, (datetime, date)):
        return ColumnType.DATE
    if _is_numeric(value):
        return ColumnType.NUMBER
    return ColumnType.TEXT


def detect_data_type(
    samples: Iterable[Any], sample_size: int = MAX_SAMPLE_SIZE
) -> ColumnType:
    """Infer a column type by majority vote over sample values.

    Empty values are skipped. Ties go to the type declared first in
    ``ColumnType``, so a sample with no usable values yields ``NUMBER``.

    Args:
        samples: Raw column values, in source order
        sample_size: Maximum number of non-empty values to look at

    Returns:
        Winning ColumnType

    Example:
        >>> detect_data_type(["10%", "25%", "50%"])
        <ColumnType.PERCENTAGE: 'percentage'>
    """
    votes: Dict[ColumnType, int] = {tag: 0 for tag in ColumnType}

    counted = 0
    for value in samples:
        if counted >= sample_size:
            break
        if _is_empty(value):
            continue
        votes[classify_value(value)] += 1
        counted += 1

    best = ColumnType.NUMBER
    for tag in ColumnType:
        if votes[tag] > votes[best]:
            best = tag
    return best


class SchemaScanner:
    """Build TableSchema objects from raw table snapshots."""

    def __init__(self, sample_size: Optional[int] = None):
        """Initialize scanner.

        Args:
            sample_size: Values per column used for type detection
                (uses config ``analysis.sample_size`` if None, capped at 10)
        """
        if sample_size is None:
            sample_size = get_config().get("analysis.sample_size", MAX_SAMPLE_SIZE)
        self.sample_size = max(0, min(int(sample_size), MAX_SAMPLE_SIZE))

    def scan(self, tables: Sequence[RawTable]) -> List[TableSchema]:
        """Scan every table.

        Args:
            tables: Raw table snapshots

        Returns:
            One TableSchema per input table, in input order
        """
        logger.info(f"Scanning {len(tables)} tables")
        return [self.scan_table(table) for table in tables]

    def scan_table(self, table: RawTable) -> TableSchema:
        """Scan a single table.

        Blank header cells are skipped and short rows are padded with
        empty values, so malformed input degrades instead of failing.

        Args:
            table: Raw table snapshot

        Returns:
            TableSchema for the table
        """
        header_row = list(table.header_row or [])
        sample_rows = list(table.sample_rows or [])[: self.sample_size]

        columns: List[str] = []
        column_types: Dict[str, ColumnType] = {}

        for index, header in enumerate(header_row):
            if _is_empty(header):
                continue
            name = str(header)
            if name in column_types:
                logger.debug(f"Table {table.name}: duplicate header '{name}' ignored")
                continue

            values = [row[index] if index < len(row) else None for row in sample_rows]
            columns.append(name)
            column_types[name] = detect_data_type(values, self.sample_size)

        row_count = (
            table.row_count if table.row_count is not None else len(table.sample_rows or [])
        )

        schema = TableSchema(
            name=table.name,
            columns=tuple(columns),
            column_types=column_types,
            row_count=max(0, int(row_count)),
            column_count=len(header_row),
            named_ranges=tuple(table.named_ranges or ()),
        )

        logger.debug(
            f"Table {schema.name}: {len(schema.columns)} columns, "
            f"{schema.row_count} rows, types={[t.value for t in column_types.values()]}"
        )
        return schema


def _to_native(value: Any) -> Any:
    """Convert a pandas/numpy cell value into a plain Python value."""
    if pd.api.types.is_scalar(value) and pd.isna(value):
        return None
    if isinstance(value, pd.Timestamp):
        return value.to_pydatetime()
    if hasattr(value, "item") and not isinstance(value, (str, bytes)):
        try:
            return value.item()
        except (ValueError, TypeError):
            return value
    return value


def raw_table_from_frame(
    name: str, df: pd.DataFrame, sample_size: int = MAX_SAMPLE_SIZE
) -> RawTable:
    """Build a RawTable snapshot from a DataFrame.

    Args:
        name: Table name
        df: DataFrame whose columns are the header row
        sample_size: Number of leading rows to keep as samples

    Returns:
        RawTable snapshot
    """
    sample_rows = [
        [_to_native(value) for value in row]
        for row in df.head(sample_size).itertuples(index=False, name=None)
    ]

    return RawTable(
        name=name,
        header_row=[str(col) for col in df.columns],
        sample_rows=sample_rows,
        row_count=len(df),
    )
