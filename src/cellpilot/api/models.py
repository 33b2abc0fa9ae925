"""Pydantic models for API requests and responses."""

from __future__ import annotations

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field

from cellpilot.core.schema.types import NamedRange, RawTable


class NamedRangeInfo(BaseModel):
    """Named range on a table."""

    name: str
    range: str = Field(..., description="A1 notation, e.g. 'A1:C20'")


class TableSnapshot(BaseModel):
    """Header row and leading data rows of one table."""

    name: str = Field(..., description="Table (sheet) name", min_length=1)
    headers: List[Any] = Field(default_factory=list, description="Header row")
    rows: List[List[Any]] = Field(
        default_factory=list, description="Leading data rows (at most 10 are used)"
    )
    named_ranges: List[NamedRangeInfo] = Field(default_factory=list)
    row_count: Optional[int] = Field(
        None, description="Total data rows (defaults to len(rows))", ge=0
    )

    def to_raw_table(self) -> RawTable:
        return RawTable(
            name=self.name,
            header_row=self.headers,
            sample_rows=self.rows,
            named_ranges=[NamedRange(name=nr.name, address=nr.range) for nr in self.named_ranges],
            row_count=self.row_count,
        )


class AnalyzeRequest(BaseModel):
    """Structure analysis request."""

    tables: List[TableSnapshot] = Field(..., description="Tables to analyze")

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "tables": [
                        {
                            "name": "Orders",
                            "headers": ["Order ID", "Customer ID", "Amount"],
                            "rows": [["ORD-1", "CUST-1", 120.5]],
                        },
                        {
                            "name": "Customers",
                            "headers": ["Customer ID", "Email"],
                            "rows": [["CUST-1", "ann@example.com"]],
                        },
                    ]
                }
            ]
        }
    }


class TableSchemaInfo(BaseModel):
    """Inferred table schema."""

    name: str
    columns: List[str]
    column_types: Dict[str, str]
    row_count: int
    column_count: int
    named_ranges: List[NamedRangeInfo] = Field(default_factory=list)


class RelationshipInfo(BaseModel):
    """Detected relationship."""

    kind: str
    table_a: str
    column_a: str
    table_b: str
    column_b: str
    confidence: str
    similarity: Optional[float] = None


class CommonColumnInfo(BaseModel):
    """Column shared by several tables."""

    original_names: List[str]
    tables: List[str]


class JoinSuggestionInfo(BaseModel):
    """Join template suggestion."""

    kind: str
    description: str
    formula: str
    confidence: str


class AnalyzeResponse(BaseModel):
    """Structure analysis result."""

    tables: List[TableSchemaInfo]
    relationships: List[RelationshipInfo]
    common_columns: Dict[str, CommonColumnInfo]
    suggested_joins: List[JoinSuggestionInfo]


class FormulaApiRequest(BaseModel):
    """Formula synthesis request."""

    request: Dict[str, Any] = Field(
        ..., description="Formula request (camelCase or snake_case keys)"
    )
    table_names: Optional[List[str]] = Field(
        None, description="Existing table names for the missing-table check"
    )
    tables: List[TableSnapshot] = Field(
        default_factory=list,
        description="Optional tables used to resolve column names to letters",
    )

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "request": {
                        "operation": "aggregate",
                        "aggregation": "sum",
                        "targetSheet": "Sales",
                        "sumColumn": "D",
                        "criteriaRanges": ["B", "C"],
                        "criteriaValues": ["East", "Q1"],
                    },
                    "table_names": ["Sales"],
                }
            ]
        }
    }


class ValidationInfo(BaseModel):
    valid: bool
    issues: List[str]
    suggestions: List[str]


class FormulaResponse(BaseModel):
    """Generated formula."""

    formula: str
    explanation: str
    validation: ValidationInfo


class AccessResponse(BaseModel):
    """Feature access decision."""

    feature: str
    allowed: bool
    reason: str
    message: str
    required_tiers: List[str] = Field(default_factory=list)
    show_upgrade: bool = False
    upgrade_prompt: Optional[Dict[str, Any]] = None


class HealthResponse(BaseModel):
    """Health check response."""

    status: str
    version: str
