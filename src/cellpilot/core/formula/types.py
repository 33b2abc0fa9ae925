"""Formula request and result types."""

from __future__ import annotations

import re
from dataclasses import dataclass, field, fields
from enum import Enum
from typing import Any, Dict, List, Optional

_CAMEL_BOUNDARY = re.compile(r"(?<!^)(?=[A-Z])")


class Operation(str, Enum):
    """Supported formula operations."""

    LOOKUP = "lookup"
    AGGREGATE = "aggregate"
    FILTER = "filter"
    JOIN = "join"
    PIVOT = "pivot"


class Aggregation(str, Enum):
    """Aggregation kinds for conditional aggregates."""

    SUM = "sum"
    COUNT = "count"
    AVERAGE = "average"


@dataclass
class FilterCondition:
    """Single (column, operator, value) filter condition."""

    column: str
    operator: str
    value: Any

    @classmethod
    def from_dict(cls, data: Dict) -> FilterCondition:
        """Build a condition from a mapping.

        Raises:
            ValueError: If ``data`` is not a mapping or has no column
        """
        if not isinstance(data, dict):
            raise ValueError(f"filter condition must be a mapping, got {data!r}")
        if not data.get("column"):
            raise ValueError(f"filter condition has no column: {data!r}")
        return cls(
            column=data["column"],
            operator=data.get("operator", "="),
            value=data.get("value", ""),
        )


@dataclass
class FormulaRequest:
    """Structured description of the formula to build.

    ``operation`` is kept as a plain string so that unknown operations can
    still be expressed and reported back as an error formula.
    """

    operation: str

    # lookup
    source_sheet: Optional[str] = None
    source_column: Optional[str] = None
    target_sheet: Optional[str] = None
    target_column: Optional[str] = None
    return_column: Optional[str] = None
    use_index_match: bool = False
    return_column_index: Optional[int] = None  # 1-based, overrides schema resolution
    target_range: Optional[str] = None  # e.g. "B:F", overrides schema resolution

    # aggregate
    aggregation: Optional[str] = None
    sum_column: Optional[str] = None
    criteria_ranges: List[str] = field(default_factory=list)
    criteria_values: List[Any] = field(default_factory=list)

    # filter / pivot
    source_range: Optional[str] = None
    conditions: List[FilterCondition] = field(default_factory=list)

    # join
    sheet1: Optional[str] = None
    sheet2: Optional[str] = None
    join_column: Optional[str] = None
    select_columns: List[str] = field(default_factory=list)
    join_type: Optional[str] = None

    # pivot
    row_headers: Optional[str] = None
    column_headers: Optional[str] = None
    values: Optional[str] = None

    # advisory
    apply_to_all_rows: bool = False

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> FormulaRequest:
        """Create a request from a dict with camelCase or snake_case keys.

        Unknown keys are ignored.

        Args:
            data: Request dictionary (e.g. ``{"operation": "lookup",
                "sourceSheet": "Orders", ...}``)

        Returns:
            FormulaRequest instance

        Raises:
            ValueError: If a filter condition is malformed
        """
        known = {f.name for f in fields(cls)}
        kwargs: Dict[str, Any] = {}

        for key, value in data.items():
            name = _CAMEL_BOUNDARY.sub("_", key).lower()
            if name in known:
                kwargs[name] = value

        kwargs.setdefault("operation", "")
        kwargs["operation"] = str(kwargs["operation"] or "")

        if kwargs.get("conditions"):
            kwargs["conditions"] = [
                c if isinstance(c, FilterCondition) else FilterCondition.from_dict(c)
                for c in kwargs["conditions"]
            ]
        for list_field in ("criteria_ranges", "criteria_values", "select_columns", "conditions"):
            if kwargs.get(list_field) is None:
                kwargs.pop(list_field, None)

        return cls(**kwargs)

    def referenced_sheets(self) -> List[str]:
        """Sheet names that are set: source, target, then the two join sheets."""
        names = (self.source_sheet, self.target_sheet, self.sheet1, self.sheet2)
        referenced: List[str] = []
        for name in names:
            if name and name not in referenced:
                referenced.append(name)
        return referenced


@dataclass
class ValidationResult:
    """Outcome of the structural formula checks."""

    valid: bool
    issues: List[str] = field(default_factory=list)
    suggestions: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "valid": self.valid,
            "issues": list(self.issues),
            "suggestions": list(self.suggestions),
        }


@dataclass
class FormulaResult:
    """Generated formula with explanation and validation."""

    formula: str
    explanation: str
    validation: ValidationResult

    def to_dict(self) -> Dict[str, Any]:
        return {
            "formula": self.formula,
            "explanation": self.explanation,
            "validation": self.validation.to_dict(),
        }
