"""Core modules for CellPilot."""

# Re-export all public APIs
from cellpilot.core.formula import (
    FilterCondition,
    FormulaRequest,
    FormulaResult,
    FormulaSynthesizer,
    ValidationResult,
)
from cellpilot.core.schema import (
    ColumnType,
    RawTable,
    Relationship,
    RelationshipDetector,
    SchemaScanner,
    SpreadsheetStructure,
    TableSchema,
)

__all__ = [
    # Schema
    "ColumnType",
    "RawTable",
    "Relationship",
    "RelationshipDetector",
    "SchemaScanner",
    "SpreadsheetStructure",
    "TableSchema",
    # Formula
    "FilterCondition",
    "FormulaRequest",
    "FormulaResult",
    "FormulaSynthesizer",
    "ValidationResult",
]
