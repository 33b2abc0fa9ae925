"""Formula synthesis and validation."""

from cellpilot.core.formula.synthesizer import (
    UNKNOWN_AGGREGATION_FORMULA,
    UNKNOWN_OPERATION_FORMULA,
    FormulaSynthesizer,
    column_letter,
    column_number,
)
from cellpilot.core.formula.types import (
    Aggregation,
    FilterCondition,
    FormulaRequest,
    FormulaResult,
    Operation,
    ValidationResult,
)
from cellpilot.core.formula.validator import get_suggestions, validate_formula

__all__ = [
    "Aggregation",
    "FilterCondition",
    "FormulaRequest",
    "FormulaResult",
    "FormulaSynthesizer",
    "Operation",
    "UNKNOWN_AGGREGATION_FORMULA",
    "UNKNOWN_OPERATION_FORMULA",
    "ValidationResult",
    "column_letter",
    "column_number",
    "get_suggestions",
    "validate_formula",
]
