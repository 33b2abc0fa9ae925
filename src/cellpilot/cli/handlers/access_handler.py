"""Business logic for the access command."""

from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, Optional

from cellpilot.gating import FeatureGate, GateConfig, InMemorySettingsStore
from cellpilot.gating.feature_gate import BETA_JOIN_DATE_KEY, USER_TIER_KEY
from cellpilot.utils.config import Config


class AccessHandler:
    """Evaluate the feature gate for a described user."""

    def __init__(self, config: Config):
        self.config = config
        self.gate_config = GateConfig.from_config(config)

    def build_gate(
        self, tier: str = "free", beta_join_date: Optional[str] = None
    ) -> FeatureGate:
        """Feature gate over an in-memory store holding the given user state."""
        settings: Dict[str, Any] = {USER_TIER_KEY: tier}
        if beta_join_date:
            settings[BETA_JOIN_DATE_KEY] = beta_join_date
        return FeatureGate(self.gate_config, InMemorySettingsStore(settings))

    def check(
        self,
        feature: str,
        tier: str = "free",
        beta_join_date: Optional[str] = None,
        now: Optional[datetime] = None,
    ) -> Dict[str, Any]:
        """Check access to a feature.

        Args:
            feature: Feature key
            tier: Subscription tier
            beta_join_date: ISO date the user joined the beta, if any
            now: Time to evaluate at (defaults to now)

        Returns:
            Dict with the decision, beta status and upgrade prompt (if any)
        """
        gate = self.build_gate(tier, beta_join_date)
        decision = gate.can_access(feature, now)
        return {
            "decision": decision.to_dict(),
            "beta_status": gate.beta_status(now),
            "upgrade_prompt": gate.upgrade_prompt(feature, now),
        }
