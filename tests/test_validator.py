"""Tests for formula validation and suggestions."""

import pytest

from cellpilot.core.formula import FormulaRequest
from cellpilot.core.formula.validator import get_suggestions, validate_formula


def test_clean_formula_is_valid():
    request = FormulaRequest(operation="aggregate", target_sheet="Sales")

    result = validate_formula("=COUNTIFS('Sales'!B:B, \"East\")", request, ["Sales"])

    assert result.valid
    assert result.issues == []


def test_circular_reference_warning():
    request = FormulaRequest(
        operation="lookup",
        source_sheet="Orders",
        source_column="A",
        target_sheet="Orders",
        target_column="A",
    )

    result = validate_formula("=VLOOKUP(A2, 'Orders'!A:B, 2, FALSE)", request)

    assert result.issues == ["Warning: Possible circular reference detected"]
    assert not result.valid


def test_circular_check_needs_source_sheet_and_column():
    request = FormulaRequest(operation="aggregate", target_sheet="Sales")
    assert validate_formula("=1", request).valid


def test_missing_tables():
    request = FormulaRequest(operation="lookup", source_sheet="Orders", target_sheet="Gone")

    result = validate_formula("=1", request, table_names=["Orders"])

    assert result.issues == ['Error: Sheet "Gone" not found']


def test_table_check_skipped_without_names():
    request = FormulaRequest(operation="lookup", source_sheet="Orders", target_sheet="Gone")
    assert validate_formula("=1", request).valid


def test_table_check_skipped_when_names_unavailable(caplog):
    def broken():
        raise RuntimeError("spreadsheet closed")

    request = FormulaRequest(operation="lookup", target_sheet="Gone")

    result = validate_formula("=1", request, table_names=broken)

    assert result.valid
    assert "Could not load table names" in caplog.text


def test_ref_error_marker():
    result = validate_formula("=A1+#REF!", FormulaRequest(operation="lookup"))
    assert result.issues == ["Error: Invalid cell reference"]


def test_length_limit():
    result = validate_formula("=" + "1+" * 10 + "1", FormulaRequest(operation="x"), max_length=10)
    assert result.issues == ["Warning: Formula may be too long for Google Sheets"]


def test_suggestions_do_not_affect_validity():
    request = FormulaRequest(operation="lookup", apply_to_all_rows=True)

    result = validate_formula("=VLOOKUP(A2, 'X'!A:B, 2, FALSE)", request)

    assert result.valid
    assert result.suggestions == [
        "Consider using INDEX/MATCH for better performance and flexibility",
        "Use ARRAYFORMULA to apply this formula to all rows at once",
    ]


def test_no_arrayformula_suggestion_when_present():
    request = FormulaRequest(operation="lookup", apply_to_all_rows=True)
    assert get_suggestions("=ARRAYFORMULA(A2:A)", request) == []


def test_named_range_suggestion_needs_three_quoted_sheets():
    request = FormulaRequest(operation="join")
    two = "=QUERY({'A'!A:Z; 'B'!A:Z}, \"SELECT *\")"
    three = "=QUERY({'A'!A:Z; 'B'!A:Z; 'C'!A:Z}, \"SELECT *\")"

    assert "Consider using Named Ranges for frequently referenced ranges" not in (
        get_suggestions(two, request)
    )
    assert "Consider using Named Ranges for frequently referenced ranges" in (
        get_suggestions(three, request)
    )


def test_named_range_count_reads_escaped_sheet_names():
    request = FormulaRequest(operation="join")
    two = "=QUERY({'Bob''s'!A:Z; 'Ann''s'!A:Z}, \"SELECT *\")"

    assert get_suggestions(two, request) == [
        "For simple filtering, FILTER function may be faster than QUERY"
    ]


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
