"""Feature gating for tiered subscriptions and the beta program."""

from cellpilot.gating.feature_gate import (
    AccessDecision,
    BetaConfig,
    FeatureGate,
    GateConfig,
    UsageCheck,
)
from cellpilot.gating.store import InMemorySettingsStore, SettingsStore

__all__ = [
    "AccessDecision",
    "BetaConfig",
    "FeatureGate",
    "GateConfig",
    "InMemorySettingsStore",
    "SettingsStore",
    "UsageCheck",
]
