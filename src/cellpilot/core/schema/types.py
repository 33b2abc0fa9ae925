"""Schema data types and models."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence, Tuple

from cellpilot.utils.logging import get_logger

logger = get_logger(__name__)


class ColumnType(str, Enum):
    """Inferred column type tags.

    Declaration order doubles as the tie-break order when two types
    receive the same number of votes.
    """

    NUMBER = "number"
    DATE = "date"
    TEXT = "text"
    CURRENCY = "currency"
    PERCENTAGE = "percentage"
    EMAIL = "email"
    ID = "id"


class RelationshipKind(str, Enum):
    """How a relationship between two columns was found."""

    EXACT = "exact"  # Same key-like column name in both tables
    POSSIBLE = "possible"  # Similar column names


class Confidence(str, Enum):
    """Coarse confidence rating."""

    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


@dataclass(frozen=True)
class NamedRange:
    """Named range defined on a table."""

    name: str
    address: str  # A1 notation, e.g. "A1:C20"


@dataclass
class RawTable:
    """Snapshot of one table handed in by a table source."""

    name: str
    header_row: Sequence[Any]
    sample_rows: Sequence[Sequence[Any]] = field(default_factory=list)
    named_ranges: Sequence[NamedRange] = field(default_factory=list)
    row_count: Optional[int] = None  # Data rows; defaults to len(sample_rows)

    def __repr__(self) -> str:
        return f"RawTable({self.name}, headers={len(self.header_row)}, samples={len(self.sample_rows)})"


@dataclass(frozen=True)
class TableSchema:
    """Inferred schema for a single table."""

    name: str
    columns: Tuple[str, ...]
    column_types: Dict[str, ColumnType]
    row_count: int = 0
    column_count: int = 0
    named_ranges: Tuple[NamedRange, ...] = ()

    def column_index(self, column: str) -> Optional[int]:
        """Get the 0-based position of a column, matching case-insensitively."""
        lowered = column.strip().lower()
        for i, name in enumerate(self.columns):
            if name.strip().lower() == lowered:
                return i
        return None

    def __repr__(self) -> str:
        return f"TableSchema({self.name}, columns={len(self.columns)}, rows={self.row_count})"


@dataclass
class Relationship:
    """Detected or suspected join key correspondence between two tables."""

    kind: RelationshipKind
    table_a: str
    column_a: str
    table_b: str
    column_b: str
    confidence: Confidence
    similarity: Optional[float] = None  # Only set for "possible" relationships

    def __repr__(self) -> str:
        sim = f", similarity={self.similarity:.2f}" if self.similarity is not None else ""
        return (
            f"Relationship({self.kind.value}: {self.table_a}.{self.column_a} <-> "
            f"{self.table_b}.{self.column_b}, {self.confidence.value}{sim})"
        )


@dataclass
class CommonColumnGroup:
    """Column name shared by several tables.

    ``original_names[i]`` is how the column is spelled in ``tables[i]``.
    """

    original_names: List[str] = field(default_factory=list)
    tables: List[str] = field(default_factory=list)

    @property
    def distinct_tables(self) -> List[str]:
        """Table names in first-seen order, without repeats."""
        return list(dict.fromkeys(self.tables))


@dataclass
class JoinSuggestion:
    """Human-readable join template."""

    kind: str  # "VLOOKUP" or "QUERY"
    description: str
    formula: str
    confidence: Confidence


@dataclass
class SpreadsheetStructure:
    """Result of one full analysis run over a set of tables."""

    tables: List[TableSchema]
    relationships: List[Relationship]
    common_columns: Dict[str, CommonColumnGroup]
    suggested_joins: List[JoinSuggestion]

    def save(self, path: str | Path) -> None:
        """Save the analysis result to a JSON file.

        Args:
            path: Path to save JSON file
        """
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)

        with open(path, "w") as f:
            json.dump(self.to_dict(), f, indent=2)

        logger.info(f"Saved spreadsheet structure to {path}")

    @classmethod
    def load(cls, path: str | Path) -> SpreadsheetStructure:
        """Load an analysis result from a JSON file.

        Args:
            path: Path to JSON file

        Returns:
            SpreadsheetStructure instance
        """
        with open(path, "r") as f:
            data = json.load(f)

        return cls.from_dict(data)

    def to_dict(self) -> Dict:
        """Convert to dictionary for serialization."""
        return {
            "tables": [
                {
                    "name": table.name,
                    "columns": list(table.columns),
                    "column_types": {
                        col: tag.value for col, tag in table.column_types.items()
                    },
                    "row_count": table.row_count,
                    "column_count": table.column_count,
                    "named_ranges": [
                        {"name": nr.name, "range": nr.address}
                        for nr in table.named_ranges
                    ],
                }
                for table in self.tables
            ],
            "relationships": [
                {
                    "kind": rel.kind.value,
                    "table_a": rel.table_a,
                    "column_a": rel.column_a,
                    "table_b": rel.table_b,
                    "column_b": rel.column_b,
                    "confidence": rel.confidence.value,
                    "similarity": rel.similarity,
                }
                for rel in self.relationships
            ],
            "common_columns": {
                name: {"original_names": group.original_names, "tables": group.tables}
                for name, group in self.common_columns.items()
            },
            "suggested_joins": [
                {
                    "kind": s.kind,
                    "description": s.description,
                    "formula": s.formula,
                    "confidence": s.confidence.value,
                }
                for s in self.suggested_joins
            ],
        }

    @classmethod
    def from_dict(cls, data: Dict) -> SpreadsheetStructure:
        """Create from dictionary.

        Args:
            data: Dictionary produced by ``to_dict``

        Returns:
            SpreadsheetStructure instance
        """
        tables = [
            TableSchema(
                name=t["name"],
                columns=tuple(t["columns"]),
                column_types={
                    col: ColumnType(tag) for col, tag in t.get("column_types", {}).items()
                },
                row_count=t.get("row_count", 0),
                column_count=t.get("column_count", 0),
                named_ranges=tuple(
                    NamedRange(name=nr["name"], address=nr["range"])
                    for nr in t.get("named_ranges", [])
                ),
            )
            for t in data.get("tables", [])
        ]

        relationships = [
            Relationship(
                kind=RelationshipKind(r["kind"]),
                table_a=r["table_a"],
                column_a=r["column_a"],
                table_b=r["table_b"],
                column_b=r["column_b"],
                confidence=Confidence(r["confidence"]),
                similarity=r.get("similarity"),
            )
            for r in data.get("relationships", [])
        ]

        common_columns = {
            name: CommonColumnGroup(
                original_names=list(group["original_names"]),
                tables=list(group["tables"]),
            )
            for name, group in data.get("common_columns", {}).items()
        }

        suggested_joins = [
            JoinSuggestion(
                kind=s["kind"],
                description=s["description"],
                formula=s["formula"],
                confidence=Confidence(s["confidence"]),
            )
            for s in data.get("suggested_joins", [])
        ]

        return cls(
            tables=tables,
            relationships=relationships,
            common_columns=common_columns,
            suggested_joins=suggested_joins,
        )

    def get_table(self, name: str) -> Optional[TableSchema]:
        """Look up a table schema by name."""
        for table in self.tables:
            if table.name == name:
                return table
        return None

    def get_relationships_for_table(self, table_name: str) -> List[Relationship]:
        """Get relationships involving a table.

        Args:
            table_name: Table name

        Returns:
            List of Relationship objects
        """
        return [
            rel
            for rel in self.relationships
            if rel.table_a == table_name or rel.table_b == table_name
        ]

    def __repr__(self) -> str:
        return (
            f"SpreadsheetStructure(tables={len(self.tables)}, "
            f"relationships={len(self.relationships)}, "
            f"common_columns={len(self.common_columns)})"
        )
