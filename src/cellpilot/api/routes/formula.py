"""Formula synthesis endpoint."""

from __future__ import annotations

from fastapi import APIRouter

from cellpilot.api.models import FormulaApiRequest, FormulaResponse
from cellpilot.core.formula import FormulaSynthesizer
from cellpilot.core.schema import SchemaScanner
from cellpilot.utils.config import get_config

router = APIRouter(prefix="/api/v1", tags=["formula"])


@router.post("/formula", response_model=FormulaResponse)
async def synthesize_formula(body: FormulaApiRequest) -> FormulaResponse:
    """Generate a cross-sheet formula.

    Unknown operations and incomplete requests are reported inside the
    response (formula text and validation issues), not as HTTP errors.
    """
    config = get_config()

    schemas = []
    if body.tables:
        scanner = SchemaScanner(sample_size=config.get("analysis.sample_size", 10))
        schemas = scanner.scan([table.to_raw_table() for table in body.tables])

    # Fall back to the supplied tables' names for the missing-table check
    table_names = body.table_names
    if table_names is None and body.tables:
        table_names = [table.name for table in body.tables]

    synthesizer = FormulaSynthesizer(
        schemas=schemas, max_length=config.get("formula.max_length", 50000)
    )
    result = synthesizer.synthesize(body.request, table_names=table_names)

    return FormulaResponse(**result.to_dict())
