"""Spreadsheet structure analysis endpoint."""

from __future__ import annotations

from fastapi import APIRouter

from cellpilot.api.models import AnalyzeRequest, AnalyzeResponse
from cellpilot.core.schema import RelationshipDetector, SchemaScanner
from cellpilot.utils.config import get_config

router = APIRouter(prefix="/api/v1", tags=["analysis"])


@router.post("/analyze", response_model=AnalyzeResponse)
async def analyze(body: AnalyzeRequest) -> AnalyzeResponse:
    """Scan tables, detect relationships and suggest joins.

    Returns:
        AnalyzeResponse with schemas, relationships, common columns and
        join suggestions
    """
    config = get_config()
    scanner = SchemaScanner(sample_size=config.get("analysis.sample_size", 10))
    detector = RelationshipDetector(config.get("analysis.relationships", {}))

    raw_tables = [table.to_raw_table() for table in body.tables]
    structure = detector.analyze(raw_tables, scanner=scanner)

    return AnalyzeResponse(**structure.to_dict())
