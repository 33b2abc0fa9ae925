"""Health check endpoint."""

from __future__ import annotations

from fastapi import APIRouter

from cellpilot import __version__
from cellpilot.api.models import HealthResponse

router = APIRouter(tags=["health"])


@router.get("/health", response_model=HealthResponse)
async def health_check() -> HealthResponse:
    """Health check endpoint."""
    return HealthResponse(status="healthy", version=__version__)
