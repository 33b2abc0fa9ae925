"""Tier and beta based feature access control.

Access is decided from three explicit inputs: the gate configuration,
the per-user settings store, and the current time. Nothing here talks to
a UI; callers render the returned decisions and prompts themselves.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, List, Optional

from cellpilot.gating.store import SettingsStore
from cellpilot.utils.config import Config, get_config
from cellpilot.utils.logging import get_logger

logger = get_logger(__name__)

# Settings store keys
BETA_JOIN_DATE_KEY = "betaJoinDate"
USER_TIER_KEY = "userTier"
ACCESS_LOG_KEY = "featureAccessLog"

DEFAULT_TIER = "free"
UNLIMITED = -1
MAX_ACCESS_LOG_ENTRIES = 100

FEATURE_DESCRIPTIONS = {
    "formula_builder": "Build complex formulas with natural language descriptions",
    "automation": "Automate repetitive tasks and schedule operations",
    "industry_tools": "Access professional templates and industry-specific tools",
    "team_features": "Collaborate with your team and share configurations",
    "advanced_cleaning": "Advanced data cleaning with ML-powered detection",
    "api_integration": "Connect to external services and APIs",
    "unlimited_operations": "Remove all usage limits and restrictions",
}

TIER_BENEFITS = {
    "starter": [
        "500 operations per month",
        "Basic automation features",
        "Email support",
        "Formula builder access",
    ],
    "professional": [
        "Unlimited operations",
        "All automation features",
        "Industry templates",
        "Priority support",
        "Advanced ML features",
    ],
    "business": [
        "Everything in Professional",
        "Team collaboration",
        "API access",
        "Custom integrations",
        "Dedicated support",
    ],
}


def _naive_utc(value: datetime) -> datetime:
    """Offset-aware datetimes are converted to UTC; naive ones are kept as is."""
    if value.tzinfo is None:
        return value
    return value.astimezone(timezone.utc).replace(tzinfo=None)


def _parse_datetime(value: Any) -> Optional[datetime]:
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return _naive_utc(value)
    try:
        parsed = datetime.fromisoformat(str(value).replace("Z", "+00:00"))
    except ValueError:
        logger.warning(f"Ignoring unparseable date: {value!r}")
        return None
    return _naive_utc(parsed)


@dataclass
class BetaConfig:
    """Beta program settings."""

    enabled: bool = True
    end_date: datetime = datetime(2025, 10, 1)
    unlock_all_features: bool = True
    extended_trial_days: int = 60
    discount_percentage: int = 50
    grandfathered_features: List[str] = field(default_factory=list)

    @property
    def extended_end_date(self) -> datetime:
        return self.end_date + timedelta(days=self.extended_trial_days)


@dataclass
class GateConfig:
    """Feature gate settings."""

    beta: BetaConfig = field(default_factory=BetaConfig)
    feature_access: Dict[str, List[str]] = field(default_factory=dict)
    usage_limits: Dict[str, Dict[str, int]] = field(default_factory=dict)

    @classmethod
    def from_config(cls, config: Optional[Config] = None) -> GateConfig:
        """Build from the ``feature_gate`` config section.

        Args:
            config: Config instance (uses global config if None)

        Returns:
            GateConfig instance
        """
        config = config or get_config()
        section = config.get("feature_gate", {}) or {}
        beta = section.get("beta", {}) or {}

        end_date = _parse_datetime(beta.get("end_date")) or BetaConfig.end_date

        return cls(
            beta=BetaConfig(
                enabled=bool(beta.get("enabled", True)),
                end_date=end_date,
                unlock_all_features=bool(beta.get("unlock_all_features", True)),
                extended_trial_days=int(beta.get("extended_trial_days", 60)),
                discount_percentage=int(beta.get("discount_percentage", 50)),
                grandfathered_features=list(beta.get("grandfathered_features", [])),
            ),
            feature_access={
                name: list(tiers)
                for name, tiers in (section.get("feature_access", {}) or {}).items()
            },
            usage_limits={
                tier: dict(limits)
                for tier, limits in (section.get("usage_limits", {}) or {}).items()
            },
        )


@dataclass
class AccessDecision:
    """Result of an access check."""

    allowed: bool
    reason: str
    message: str
    required_tiers: List[str] = field(default_factory=list)
    show_upgrade: bool = False

    def to_dict(self) -> Dict[str, Any]:
        return {
            "allowed": self.allowed,
            "reason": self.reason,
            "message": self.message,
            "required_tiers": list(self.required_tiers),
            "show_upgrade": self.show_upgrade,
        }


@dataclass
class UsageCheck:
    """Result of a usage limit check."""

    allowed: bool
    used: int = 0
    limit: int = UNLIMITED
    remaining: Optional[int] = None  # None means unlimited


class FeatureGate:
    """Decide feature access from tier, beta status and usage.

    Example:
        >>> gate = FeatureGate(GateConfig.from_config(), InMemorySettingsStore())
        >>> gate.can_access("automation").allowed
    """

    def __init__(self, config: GateConfig, store: SettingsStore):
        """Initialize feature gate.

        Args:
            config: Gate configuration
            store: Per-user settings store
        """
        self.config = config
        self.store = store

    @staticmethod
    def _now(now: Optional[datetime]) -> datetime:
        return now if now is not None else datetime.now()

    def is_beta_period(self, now: Optional[datetime] = None) -> bool:
        """Whether the beta program is currently running."""
        if not self.config.beta.enabled:
            return False
        return self._now(now) < self.config.beta.end_date

    def is_beta_user(self) -> bool:
        """Whether the user joined before the beta ended."""
        join_date = _parse_datetime(self.store.get(BETA_JOIN_DATE_KEY))
        if join_date is None:
            return False
        return join_date < self.config.beta.end_date

    def user_tier(self) -> str:
        return self.store.get(USER_TIER_KEY, DEFAULT_TIER) or DEFAULT_TIER

    def can_access(
        self, feature_name: str, now: Optional[datetime] = None
    ) -> AccessDecision:
        """Decide whether the user may use a feature.

        Checked in order: beta unlock, grandfathered beta features, beta
        extended trial, tier access. Features without an access rule are
        open to everyone.

        Args:
            feature_name: Feature key (e.g. "formula_builder")
            now: Current time (defaults to ``datetime.now()``)

        Returns:
            AccessDecision
        """
        now = self._now(now)
        beta = self.config.beta

        if self.is_beta_period(now) and beta.unlock_all_features:
            if not self.store.get(BETA_JOIN_DATE_KEY):
                self.store.set(BETA_JOIN_DATE_KEY, now.isoformat())
            return AccessDecision(
                allowed=True,
                reason="beta_unlimited_access",
                message="All features unlocked during beta!",
            )

        if self.is_beta_user():
            if feature_name in beta.grandfathered_features:
                return AccessDecision(
                    allowed=True,
                    reason="beta_user_benefit",
                    message="Feature permanently unlocked as beta user benefit!",
                )

            if now < beta.extended_end_date:
                return AccessDecision(
                    allowed=True,
                    reason="beta_extended_trial",
                    message=f"Extended trial until {beta.extended_end_date.strftime('%d/%m/%Y')}",
                )

        tier = self.user_tier()
        required_tiers = self.config.feature_access.get(feature_name)

        if not required_tiers:
            return AccessDecision(
                allowed=True,
                reason="feature_not_gated",
                message="Feature available to all users",
            )

        if tier in required_tiers:
            return AccessDecision(
                allowed=True,
                reason="tier_access",
                message=f"Feature available in {tier} tier",
            )

        return AccessDecision(
            allowed=False,
            reason="upgrade_required",
            message=f"Upgrade to {' or '.join(required_tiers)} to unlock this feature",
            required_tiers=list(required_tiers),
            show_upgrade=True,
        )

    def should_show_upgrade(
        self, feature_name: str, now: Optional[datetime] = None
    ) -> bool:
        access = self.can_access(feature_name, now)
        return not access.allowed and access.show_upgrade

    def upgrade_prompt(
        self, feature_name: str, now: Optional[datetime] = None
    ) -> Optional[Dict[str, Any]]:
        """Content for an upgrade prompt, or None if no upgrade is needed.

        Args:
            feature_name: Feature key
            now: Current time

        Returns:
            Dict with title, subtitle, description, benefits and discount
        """
        access = self.can_access(feature_name, now)
        if access.allowed or access.reason != "upgrade_required":
            return None

        discount = self.config.beta.discount_percentage if self.is_beta_user() else 0
        cta = f"Upgrade Now ({discount}% Beta Discount)" if discount else "Upgrade Now"

        return {
            "title": "Premium Feature",
            "subtitle": access.message,
            "description": FEATURE_DESCRIPTIONS.get(
                feature_name, "Unlock advanced functionality"
            ),
            "benefits": TIER_BENEFITS.get(access.required_tiers[0], []),
            "required_tiers": access.required_tiers,
            "discount": discount,
            "cta": cta,
        }

    def beta_status(self, now: Optional[datetime] = None) -> Dict[str, Any]:
        """Summary of the beta program for display."""
        now = self._now(now)
        if not self.is_beta_period(now):
            return {"active": False, "message": "Beta period has ended"}

        end_date = self.config.beta.end_date
        days_remaining = math.ceil((end_date - now).total_seconds() / 86400)

        return {
            "active": True,
            "days_remaining": days_remaining,
            "end_date": end_date.strftime("%d/%m/%Y"),
            "message": (
                f"Beta period: {days_remaining} days remaining. "
                "All features currently unlocked."
            ),
        }

    def check_usage_limit(self, operation: str, used: int) -> UsageCheck:
        """Check a usage counter against the user's tier limit.

        Args:
            operation: Limit name (e.g. "operations")
            used: Amount already used in the current period

        Returns:
            UsageCheck (tiers or operations without a limit are unlimited)
        """
        limits = self.config.usage_limits.get(self.user_tier())
        if not limits or limits.get(operation, UNLIMITED) == UNLIMITED:
            return UsageCheck(allowed=True, used=used)

        limit = limits[operation]
        return UsageCheck(
            allowed=used < limit,
            used=used,
            limit=limit,
            remaining=max(0, limit - used),
        )

    def track_access(
        self, feature_name: str, allowed: bool, now: Optional[datetime] = None
    ) -> None:
        """Append an access attempt to the store's access log.

        Storage failures are logged and otherwise ignored so that tracking
        never blocks a feature.
        """
        event = {
            "feature": feature_name,
            "allowed": allowed,
            "userTier": self.user_tier(),
            "isBetaUser": self.is_beta_user(),
            "timestamp": self._now(now).isoformat(),
        }
        try:
            log = list(self.store.get(ACCESS_LOG_KEY, []) or [])
            log.append(event)
            self.store.set(ACCESS_LOG_KEY, log[-MAX_ACCESS_LOG_ENTRIES:])
        except Exception as e:
            logger.warning(f"Failed to record access to {feature_name}: {e}")

    def enforce_access(
        self, feature_name: str, now: Optional[datetime] = None
    ) -> AccessDecision:
        """Check access and record the attempt."""
        access = self.can_access(feature_name, now)
        self.track_access(feature_name, access.allowed, now)
        if not access.allowed:
            logger.info(f"Access to {feature_name} denied: {access.message}")
        return access
