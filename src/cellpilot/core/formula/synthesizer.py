"""Cross-sheet formula synthesis."""

from __future__ import annotations

import re
from typing import Callable, Dict, Optional, Sequence, Tuple, Union

from cellpilot.core.formula.types import (
    Aggregation,
    FormulaRequest,
    FormulaResult,
    Operation,
)
from cellpilot.core.formula.validator import TableNames, validate_formula
from cellpilot.core.schema.types import TableSchema
from cellpilot.utils.config import get_config
from cellpilot.utils.logging import get_logger

logger = get_logger(__name__)

UNKNOWN_OPERATION_FORMULA = '=ERROR("Unknown operation")'
UNKNOWN_AGGREGATION_FORMULA = '=ERROR("Unknown aggregation")'

# Positional lookup used when no column positions can be resolved
LEGACY_LOOKUP_RANGE = "A:Z"
LEGACY_LOOKUP_INDEX = 2

_COLUMN_LETTERS = re.compile(r"^[A-Z]{1,3}$")

# Checked in order; the first keyword found in the formula picks the text
_EXPLANATIONS: Tuple[Tuple[str, str], ...] = (
    ("VLOOKUP", "This formula looks up values from {source_column} in {target_sheet} and returns corresponding values."),
    ("INDEX", "This formula finds matching rows using INDEX and MATCH for better performance and flexibility."),
    ("SUMIFS", "This formula sums values from {target_sheet} where specified conditions are met."),
    ("FILTER", "This formula filters data from {source_sheet} based on the specified criteria."),
    ("QUERY", "This formula performs SQL-like operations to join or transform data from multiple sheets."),
    ("COUNTIFS", "This formula counts rows in {target_sheet} where specified conditions are met."),
    ("AVERAGEIFS", "This formula averages values from {target_sheet} where specified conditions are met."),
)
_GENERIC_EXPLANATION = "This formula performs complex data operations across multiple sheets."

_QUERY_AGGREGATES = {
    Aggregation.SUM.value: "SUM",
    Aggregation.COUNT.value: "COUNT",
    Aggregation.AVERAGE.value: "AVG",
}


def column_letter(index: int) -> str:
    """Convert a 0-based column position to A1 letters (0 -> A, 26 -> AA)."""
    letters = ""
    index += 1
    while index > 0:
        index, remainder = divmod(index - 1, 26)
        letters = chr(ord("A") + remainder) + letters
    return letters


def column_number(letters: str) -> int:
    """Convert A1 column letters to a 1-based column number (A -> 1)."""
    number = 0
    for char in letters.upper():
        number = number * 26 + (ord(char) - ord("A") + 1)
    return number


def quote_sheet(name: str) -> str:
    """Sheet name as a quoted reference prefix part (apostrophes doubled)."""
    return "'" + str(name).replace("'", "''") + "'"


def quote_string(value) -> str:
    """Value as a double-quoted formula string literal (quotes doubled)."""
    return '"' + str(value).replace('"', '""') + '"'


def _require(request: FormulaRequest, *names: str) -> None:
    missing = [name for name in names if not getattr(request, name)]
    if missing:
        raise ValueError(f"missing {', '.join(missing)}")


class FormulaSynthesizer:
    """Build spreadsheet formulas from structured requests.

    When table schemas are supplied, column references may be given as
    header names and are converted to column letters. Otherwise column
    references are expected to be letters already.

    Example:
        >>> synth = FormulaSynthesizer(schemas=structure.tables)
        >>> result = synth.synthesize({"operation": "lookup", ...})
        >>> result.formula
    """

    def __init__(
        self,
        schemas: Optional[Sequence[TableSchema]] = None,
        max_length: Optional[int] = None,
    ):
        """Initialize synthesizer.

        Args:
            schemas: Optional table schemas used to resolve column positions
            max_length: Formula length limit (uses config ``formula.max_length``
                if None)
        """
        self.schemas: Dict[str, TableSchema] = {s.name: s for s in schemas or []}
        self.max_length = max_length or get_config().get("formula.max_length", 50000)

        self._builders: Dict[Operation, Callable[[FormulaRequest], str]] = {
            Operation.LOOKUP: self.build_lookup,
            Operation.AGGREGATE: self.build_aggregate,
            Operation.FILTER: self.build_filter,
            Operation.JOIN: self.build_join,
            Operation.PIVOT: self.build_pivot,
        }

    def synthesize(
        self,
        request: Union[FormulaRequest, Dict],
        table_names: Optional[TableNames] = None,
    ) -> FormulaResult:
        """Generate, explain and validate a formula.

        Never raises for bad requests. Unknown operations produce an
        ``=ERROR(...)`` formula; incomplete or malformed requests produce
        an ``=ERROR(...)`` formula plus a validation issue.

        Args:
            request: FormulaRequest or dict accepted by ``FormulaRequest.from_dict``
            table_names: Existing table names (or a callable returning them)
                for the missing-table check

        Returns:
            FormulaResult
        """
        parse_error: Optional[Exception] = None
        if isinstance(request, dict):
            try:
                request = FormulaRequest.from_dict(request)
            except (ValueError, TypeError) as e:
                parse_error = e
                request = FormulaRequest(operation=str(request.get("operation") or ""))

        extra_issues = []
        built = False
        try:
            operation = Operation(request.operation)
        except ValueError:
            logger.warning(f"Unknown formula operation: {request.operation!r}")
            formula = UNKNOWN_OPERATION_FORMULA
        else:
            try:
                if parse_error is not None:
                    raise parse_error
                formula = self._builders[operation](request)
                built = True
            except (ValueError, TypeError, AttributeError) as e:
                logger.warning(f"Invalid {operation.value} request: {e}")
                formula = f'=ERROR("Invalid {operation.value} request")'
                extra_issues.append(f"Error: Invalid {operation.value} request ({e})")

        logger.debug(f"Synthesized formula: {formula}")

        validation = validate_formula(
            formula, request, table_names=table_names, max_length=self.max_length
        )
        if extra_issues:
            validation.issues.extend(extra_issues)
            validation.valid = False
        # Only a successfully built lookup can have fallen back to placeholders
        if built and self._uses_legacy_lookup(request):
            validation.suggestions.append(
                "Column index and range are placeholders; provide table schemas or "
                "column letters so they can be resolved"
            )

        return FormulaResult(
            formula=formula,
            explanation=self.explain_formula(formula, request),
            validation=validation,
        )

    # Column resolution

    def _column_ref(self, sheet: Optional[str], column: str) -> str:
        """Column letters for a header name or letter reference."""
        schema = self.schemas.get(sheet) if sheet else None
        if schema is not None:
            index = schema.column_index(column)
            if index is not None:
                return column_letter(index)
        return str(column)

    def _column_position(self, sheet: Optional[str], column: Optional[str]) -> Optional[int]:
        """1-based column number, or None when it cannot be resolved."""
        if not column:
            return None
        ref = self._column_ref(sheet, column)
        if _COLUMN_LETTERS.match(ref):
            return column_number(ref)
        return None

    def _resolve_vlookup_range(
        self, request: FormulaRequest
    ) -> Optional[Tuple[str, int]]:
        """Range and 1-based return index for VLOOKUP, if resolvable."""
        if request.target_range and request.return_column_index:
            return request.target_range, int(request.return_column_index)

        key_pos = self._column_position(request.target_sheet, request.target_column)
        return_pos = self._column_position(request.target_sheet, request.return_column)
        if key_pos is None or return_pos is None or return_pos < key_pos:
            return None

        target_range = f"{column_letter(key_pos - 1)}:{column_letter(return_pos - 1)}"
        return target_range, return_pos - key_pos + 1

    def _uses_legacy_lookup(self, request: FormulaRequest) -> bool:
        if request.operation != Operation.LOOKUP.value or request.use_index_match:
            return False
        if not (request.target_sheet and request.source_column and request.target_column):
            return False
        return self._resolve_vlookup_range(request) is None and not self._must_look_left(request)

    def _must_look_left(self, request: FormulaRequest) -> bool:
        key_pos = self._column_position(request.target_sheet, request.target_column)
        return_pos = self._column_position(request.target_sheet, request.return_column)
        return key_pos is not None and return_pos is not None and return_pos < key_pos

    # Builders

    def build_lookup(self, request: FormulaRequest) -> str:
        """VLOOKUP, or INDEX/MATCH when requested or when the return column
        sits left of the key column."""
        _require(request, "target_sheet", "source_column", "target_column")

        sheet = request.target_sheet
        quoted = quote_sheet(sheet)
        source_ref = self._column_ref(request.source_sheet, request.source_column)
        key_ref = self._column_ref(sheet, request.target_column)

        if request.use_index_match or self._must_look_left(request):
            _require(request, "return_column")
            return_ref = self._column_ref(sheet, request.return_column)
            return (
                f"=INDEX({quoted}!{return_ref}:{return_ref}, "
                f"MATCH({source_ref}2, {quoted}!{key_ref}:{key_ref}, 0))"
            )

        resolved = self._resolve_vlookup_range(request)
        if resolved is None:
            logger.warning(
                f"Could not resolve lookup columns in '{sheet}'; "
                f"using placeholder range {LEGACY_LOOKUP_RANGE} and index {LEGACY_LOOKUP_INDEX}"
            )
            target_range, column_index = LEGACY_LOOKUP_RANGE, LEGACY_LOOKUP_INDEX
        else:
            target_range, column_index = resolved

        return f"=VLOOKUP({source_ref}2, {quoted}!{target_range}, {column_index}, FALSE)"

    def build_aggregate(self, request: FormulaRequest) -> str:
        """SUMIFS / COUNTIFS / AVERAGEIFS over zipped criteria."""
        _require(request, "target_sheet")
        sheet = request.target_sheet
        quoted = quote_sheet(sheet)

        if len(request.criteria_ranges) != len(request.criteria_values):
            logger.warning(
                f"criteria_ranges ({len(request.criteria_ranges)}) and criteria_values "
                f"({len(request.criteria_values)}) differ in length; extra entries ignored"
            )

        criteria = ", ".join(
            f"{quoted}!{ref}:{ref}, {quote_string(value)}"
            for ref, value in (
                (self._column_ref(sheet, r), v)
                for r, v in zip(request.criteria_ranges, request.criteria_values)
            )
        )

        aggregation = (request.aggregation or "").lower()
        if aggregation == Aggregation.COUNT.value:
            return f"=COUNTIFS({criteria})"

        if aggregation in (Aggregation.SUM.value, Aggregation.AVERAGE.value):
            _require(request, "sum_column")
            sum_ref = self._column_ref(sheet, request.sum_column)
            function = "SUMIFS" if aggregation == Aggregation.SUM.value else "AVERAGEIFS"
            return f"={function}({quoted}!{sum_ref}:{sum_ref}, {criteria})"

        return UNKNOWN_AGGREGATION_FORMULA

    def build_filter(self, request: FormulaRequest) -> str:
        """FILTER over one source range with one argument per condition."""
        _require(request, "source_sheet", "source_range")
        sheet = request.source_sheet
        quoted = quote_sheet(sheet)

        conditions = ", ".join(
            f"{quoted}!{ref}:{ref}{cond.operator}{quote_string(cond.value)}"
            for ref, cond in (
                (self._column_ref(sheet, c.column), c) for c in request.conditions
            )
        )
        if not conditions:
            raise ValueError("at least one condition is required")

        return f"=FILTER({quoted}!{request.source_range}, {conditions})"

    def build_join(self, request: FormulaRequest) -> str:
        """QUERY stacking two sheets and keeping rows with a join key."""
        _require(request, "sheet1", "sheet2", "join_column")

        select = ", ".join(request.select_columns) if request.select_columns else "*"
        query = f"SELECT {select} WHERE {request.join_column} IS NOT NULL"

        return (
            f"=QUERY({{{quote_sheet(request.sheet1)}!A:Z; {quote_sheet(request.sheet2)}!A:Z}}, "
            f"{quote_string(query)})"
        )

    def build_pivot(self, request: FormulaRequest) -> str:
        """QUERY with a PIVOT clause."""
        _require(request, "source_sheet", "source_range", "row_headers", "column_headers")

        aggregate = _QUERY_AGGREGATES.get((request.aggregation or "").lower())
        if aggregate and request.values:
            query = (
                f"SELECT {request.row_headers}, {aggregate}({request.values}) "
                f"GROUP BY {request.row_headers} PIVOT {request.column_headers}"
            )
        else:
            query = f"SELECT {request.row_headers} PIVOT {request.column_headers}"

        source = f"{quote_sheet(request.source_sheet)}!{request.source_range}"
        return f"=QUERY({source}, {quote_string(query)})"

    def explain_formula(self, formula: str, request: FormulaRequest) -> str:
        """Plain-language explanation for a generated formula.

        Args:
            formula: Generated formula text
            request: Request the formula was built from

        Returns:
            Explanation sentence
        """
        for keyword, template in _EXPLANATIONS:
            if keyword in formula:
                return template.format(
                    source_column=request.source_column,
                    source_sheet=request.source_sheet,
                    target_sheet=request.target_sheet,
                )
        return _GENERIC_EXPLANATION
