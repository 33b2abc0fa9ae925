"""Schema scanning and relationship detection."""

from cellpilot.core.schema.relationships import RelationshipDetector
from cellpilot.core.schema.scanner import (
    SchemaScanner,
    detect_data_type,
    raw_table_from_frame,
)
from cellpilot.core.schema.similarity import (
    column_similarity,
    normalize_column_name,
)
from cellpilot.core.schema.types import (
    ColumnType,
    CommonColumnGroup,
    Confidence,
    JoinSuggestion,
    NamedRange,
    RawTable,
    Relationship,
    RelationshipKind,
    SpreadsheetStructure,
    TableSchema,
)

__all__ = [
    "ColumnType",
    "CommonColumnGroup",
    "Confidence",
    "JoinSuggestion",
    "NamedRange",
    "RawTable",
    "Relationship",
    "RelationshipDetector",
    "RelationshipKind",
    "SchemaScanner",
    "SpreadsheetStructure",
    "TableSchema",
    "column_similarity",
    "detect_data_type",
    "normalize_column_name",
    "raw_table_from_frame",
]
