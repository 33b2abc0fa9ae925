"""Feature access endpoint."""

from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Query

from cellpilot.api.models import AccessResponse
from cellpilot.gating import FeatureGate, GateConfig, InMemorySettingsStore
from cellpilot.gating.feature_gate import BETA_JOIN_DATE_KEY, USER_TIER_KEY
from cellpilot.utils.config import get_config

router = APIRouter(prefix="/api/v1", tags=["access"])


@router.get("/access/{feature}", response_model=AccessResponse)
async def check_access(
    feature: str,
    tier: str = Query("free", description="Subscription tier"),
    beta_join_date: Optional[str] = Query(
        None, description="ISO date the user joined the beta"
    ),
) -> AccessResponse:
    """Check whether a user with the given tier may use a feature."""
    settings = {USER_TIER_KEY: tier}
    if beta_join_date:
        settings[BETA_JOIN_DATE_KEY] = beta_join_date

    gate = FeatureGate(GateConfig.from_config(get_config()), InMemorySettingsStore(settings))
    decision = gate.can_access(feature)

    return AccessResponse(
        feature=feature,
        upgrade_prompt=gate.upgrade_prompt(feature),
        **decision.to_dict(),
    )
