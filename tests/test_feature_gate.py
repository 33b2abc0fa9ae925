"""Tests for feature gating."""

from datetime import datetime

import pytest

from cellpilot.gating import FeatureGate, GateConfig, InMemorySettingsStore
from cellpilot.gating.feature_gate import (
    ACCESS_LOG_KEY,
    BETA_JOIN_DATE_KEY,
    MAX_ACCESS_LOG_ENTRIES,
    TIER_BENEFITS,
)

DURING_BETA = datetime(2025, 9, 1)
AFTER_BETA = datetime(2026, 1, 1)


def make_gate(**settings):
    return FeatureGate(GateConfig.from_config(), InMemorySettingsStore(settings))


def test_config_defaults():
    config = GateConfig.from_config()

    assert config.beta.end_date == datetime(2025, 10, 1)
    assert config.beta.extended_end_date == datetime(2025, 11, 30)
    assert config.feature_access["automation"] == ["professional", "business"]
    assert config.usage_limits["free"]["operations"] == 25


def test_beta_unlocks_everything_and_records_join_date():
    gate = make_gate()

    decision = gate.can_access("team_features", now=DURING_BETA)

    assert decision.allowed
    assert decision.reason == "beta_unlimited_access"
    assert gate.store.get(BETA_JOIN_DATE_KEY) == "2025-09-01T00:00:00"
    assert gate.is_beta_user()


def test_existing_join_date_is_kept():
    gate = make_gate(betaJoinDate="2025-06-01T00:00:00")
    gate.can_access("automation", now=DURING_BETA)
    assert gate.store.get(BETA_JOIN_DATE_KEY) == "2025-06-01T00:00:00"


def test_extended_trial_for_beta_users():
    gate = make_gate(betaJoinDate="2025-06-01")

    decision = gate.can_access("industry_tools", now=datetime(2025, 10, 15))

    assert decision.allowed
    assert decision.reason == "beta_extended_trial"
    assert decision.message == "Extended trial until 30/11/2025"


def test_grandfathered_feature_stays_unlocked():
    gate = make_gate(betaJoinDate="2025-06-01")

    decision = gate.can_access("automation", now=datetime(2026, 6, 1))

    assert decision.allowed
    assert decision.reason == "beta_user_benefit"


def test_upgrade_required_for_free_tier():
    gate = make_gate()

    decision = gate.can_access("automation", now=AFTER_BETA)

    assert not decision.allowed
    assert decision.reason == "upgrade_required"
    assert decision.required_tiers == ["professional", "business"]
    assert decision.message == "Upgrade to professional or business to unlock this feature"
    assert gate.should_show_upgrade("automation", now=AFTER_BETA)


def test_tier_access():
    decision = make_gate(userTier="professional").can_access("automation", now=AFTER_BETA)
    assert decision.allowed
    assert decision.reason == "tier_access"


def test_ungated_feature():
    decision = make_gate().can_access("sparklines", now=AFTER_BETA)
    assert decision.allowed
    assert decision.reason == "feature_not_gated"


def test_disabled_beta(default_config):
    default_config.set("feature_gate.beta.enabled", False)
    gate = make_gate()

    assert not gate.is_beta_period(DURING_BETA)
    assert gate.can_access("automation", now=DURING_BETA).reason == "upgrade_required"


def test_unparseable_join_date_is_not_beta_user():
    assert not make_gate(betaJoinDate="someday").is_beta_user()


def test_join_date_offset_is_converted_to_utc():
    # 02:00 at +05:00 on the end date is still 30 September in UTC
    assert make_gate(betaJoinDate="2025-10-01T02:00:00+05:00").is_beta_user()
    assert not make_gate(betaJoinDate="2025-10-01T02:00:00").is_beta_user()


def test_upgrade_prompt_without_discount():
    prompt = make_gate().upgrade_prompt("automation", now=AFTER_BETA)

    assert prompt["title"] == "Premium Feature"
    assert prompt["subtitle"] == "Upgrade to professional or business to unlock this feature"
    assert prompt["benefits"] == TIER_BENEFITS["professional"]
    assert prompt["discount"] == 0
    assert prompt["cta"] == "Upgrade Now"


def test_upgrade_prompt_with_beta_discount():
    gate = make_gate(betaJoinDate="2025-06-01")

    prompt = gate.upgrade_prompt("industry_tools", now=datetime(2026, 6, 1))

    assert prompt["discount"] == 50
    assert prompt["cta"] == "Upgrade Now (50% Beta Discount)"


def test_no_upgrade_prompt_when_allowed():
    assert make_gate().upgrade_prompt("automation", now=DURING_BETA) is None


def test_beta_status():
    gate = make_gate()

    status = gate.beta_status(now=datetime(2025, 9, 21))

    assert status["active"]
    assert status["days_remaining"] == 10
    assert status["end_date"] == "01/10/2025"
    assert gate.beta_status(now=datetime(2025, 9, 20, 12))["days_remaining"] == 11
    assert gate.beta_status(now=AFTER_BETA) == {
        "active": False,
        "message": "Beta period has ended",
    }


def test_usage_limits():
    gate = make_gate()

    check = gate.check_usage_limit("operations", 10)
    assert check.allowed
    assert check.limit == 25
    assert check.remaining == 15

    assert not gate.check_usage_limit("operations", 25).allowed
    assert not gate.check_usage_limit("emails", 0).allowed


def test_unlimited_usage():
    check = make_gate(userTier="business").check_usage_limit("operations", 10_000)
    assert check.allowed
    assert check.remaining is None

    assert make_gate(userTier="enterprise").check_usage_limit("operations", 5).allowed


def test_access_log_is_capped():
    gate = make_gate()

    for i in range(MAX_ACCESS_LOG_ENTRIES + 5):
        gate.track_access(f"feature_{i}", True, now=AFTER_BETA)

    log = gate.store.get(ACCESS_LOG_KEY)
    assert len(log) == MAX_ACCESS_LOG_ENTRIES
    assert log[0]["feature"] == "feature_5"
    assert log[-1] == {
        "feature": f"feature_{MAX_ACCESS_LOG_ENTRIES + 4}",
        "allowed": True,
        "userTier": "free",
        "isBetaUser": False,
        "timestamp": "2026-01-01T00:00:00",
    }


def test_tracking_failure_is_not_raised(caplog):
    class ReadOnlyStore(InMemorySettingsStore):
        def set(self, key, value):
            raise PermissionError("read only")

    gate = FeatureGate(GateConfig.from_config(), ReadOnlyStore())

    gate.track_access("automation", False, now=AFTER_BETA)

    assert "Failed to record access to automation" in caplog.text


def test_enforce_access_records_attempt():
    gate = make_gate()

    decision = gate.enforce_access("automation", now=AFTER_BETA)

    assert not decision.allowed
    (event,) = gate.store.get(ACCESS_LOG_KEY)
    assert event["feature"] == "automation"
    assert event["allowed"] is False


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
