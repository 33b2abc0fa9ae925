"""Structural formula validation and optimization suggestions."""

from __future__ import annotations

import re
from typing import Callable, Iterable, List, Optional, Union

from cellpilot.core.formula.types import FormulaRequest, ValidationResult
from cellpilot.utils.logging import get_logger

logger = get_logger(__name__)

DEFAULT_MAX_FORMULA_LENGTH = 50000

# 'Sheet'! with apostrophes inside the name doubled
_QUOTED_SHEET_REF = re.compile(r"'(?:[^']|'')+'!")

# Either a snapshot of table names or a zero-argument callable that reads them
TableNames = Union[Iterable[str], Callable[[], Iterable[str]]]


def _resolve_table_names(table_names: Optional[TableNames]) -> Optional[List[str]]:
    """Read the live table-name list, or None if it is unavailable."""
    if table_names is None:
        return None
    if callable(table_names):
        try:
            return list(table_names())
        except Exception as e:
            logger.warning(f"Could not load table names, skipping table check: {e}")
            return None
    return list(table_names)


def validate_formula(
    formula: str,
    request: FormulaRequest,
    table_names: Optional[TableNames] = None,
    max_length: int = DEFAULT_MAX_FORMULA_LENGTH,
) -> ValidationResult:
    """Run structural checks on a generated formula.

    Checks for a self-referencing lookup, references to tables that do not
    exist, ``#REF!`` markers and excessive length. None of the checks look
    inside the formula grammar.

    Args:
        formula: Generated formula text
        request: Request the formula was built from
        table_names: Existing table names, or a callable returning them.
            The table check is skipped when None or when the callable fails.
        max_length: Maximum formula length before warning

    Returns:
        ValidationResult (``valid`` is True when no issues were found)
    """
    issues: List[str] = []

    if (
        request.source_sheet
        and request.source_column
        and request.source_sheet == request.target_sheet
        and request.source_column == request.target_column
    ):
        issues.append("Warning: Possible circular reference detected")

    existing = _resolve_table_names(table_names)
    if existing is not None:
        for sheet_name in request.referenced_sheets():
            if sheet_name not in existing:
                issues.append(f'Error: Sheet "{sheet_name}" not found')

    if "#REF!" in formula:
        issues.append("Error: Invalid cell reference")

    if len(formula) > max_length:
        issues.append("Warning: Formula may be too long for Google Sheets")

    if issues:
        logger.debug(f"Formula validation found {len(issues)} issues: {issues}")

    return ValidationResult(
        valid=not issues,
        issues=issues,
        suggestions=get_suggestions(formula, request),
    )


def get_suggestions(formula: str, request: FormulaRequest) -> List[str]:
    """Advisory style suggestions. Never affects validity.

    Args:
        formula: Generated formula text
        request: Request the formula was built from

    Returns:
        List of suggestion strings
    """
    suggestions = []

    if "VLOOKUP" in formula:
        suggestions.append(
            "Consider using INDEX/MATCH for better performance and flexibility"
        )

    if "QUERY" in formula and not request.join_type:
        suggestions.append(
            "For simple filtering, FILTER function may be faster than QUERY"
        )

    if len(_QUOTED_SHEET_REF.findall(formula)) > 2:
        suggestions.append(
            "Consider using Named Ranges for frequently referenced ranges"
        )

    if "ARRAYFORMULA" not in formula and request.apply_to_all_rows:
        suggestions.append(
            "Use ARRAYFORMULA to apply this formula to all rows at once"
        )

    return suggestions
