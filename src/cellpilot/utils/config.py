"""Configuration management for CellPilot.

Settings live in one nested dict. Defaults are defined here; a YAML file
may override any subset of them and is deep-merged over the defaults.
"""

from __future__ import annotations

import copy
import os
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

from .logging import get_logger

logger = get_logger(__name__)

CONFIG_ENV_VAR = "CELLPILOT_CONFIG"
LOCAL_CONFIG_FILE = "config.yml"

DEFAULT_CONFIG: Dict[str, Any] = {
    "analysis": {
        "sample_size": 10,  # Values per column used for type detection (max 10)
        "relationships": {
            "fuzzy_threshold": 0.7,  # Similarity above this => "possible"
            "medium_threshold": 0.85,  # Similarity above this => medium confidence
            "key_keywords": ["id", "key", "code"],
        },
    },
    "formula": {
        "max_length": 50000,  # Google Sheets formula length limit
        "default_range": "A:Z",
    },
    "feature_gate": {
        "beta": {
            "enabled": True,
            "end_date": "2025-10-01",
            "unlock_all_features": True,
            "extended_trial_days": 60,
            "discount_percentage": 50,
            "grandfathered_features": ["formula_builder", "automation"],
        },
        "feature_access": {
            "data_cleaning": ["free", "starter", "professional", "business"],
            "formula_builder": ["starter", "professional", "business"],
            "automation": ["professional", "business"],
            "industry_tools": ["professional", "business"],
            "team_features": ["business"],
        },
        # -1 means unlimited
        "usage_limits": {
            "free": {"operations": 25, "emails": 0, "automations": 0},
            "starter": {"operations": 500, "emails": 10, "automations": 5},
            "professional": {"operations": -1, "emails": -1, "automations": -1},
            "business": {"operations": -1, "emails": -1, "automations": -1},
        },
    },
    "api": {
        "host": "0.0.0.0",
        "port": 8000,
        "log_level": "INFO",
        "cors_origins": ["*"],
    },
}


def _deep_merge(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    """Merge ``override`` into a copy of ``base``; nested dicts merge key by key."""
    merged = copy.deepcopy(base)
    for key, value in override.items():
        if isinstance(merged.get(key), dict) and isinstance(value, dict):
            merged[key] = _deep_merge(merged[key], value)
        else:
            merged[key] = copy.deepcopy(value)
    return merged


class Config:
    """Nested settings with dotted-key access.

    Example:
        >>> config = Config()
        >>> config.get("analysis.relationships.fuzzy_threshold")
        0.7
        >>> config.set("formula.max_length", 40000)
    """

    def __init__(self, config_dict: Optional[Dict[str, Any]] = None):
        """Initialize configuration.

        Args:
            config_dict: Full settings dict. Defaults are used if None.
        """
        self._config = config_dict if config_dict is not None else copy.deepcopy(DEFAULT_CONFIG)

    @classmethod
    def from_yaml(cls, yaml_path: str | Path) -> Config:
        """Load a YAML file over the defaults.

        Args:
            yaml_path: Path to the YAML file

        Returns:
            Config instance

        Raises:
            FileNotFoundError: If the file does not exist
            ValueError: If the file does not contain a mapping
        """
        yaml_path = Path(yaml_path)
        if not yaml_path.is_file():
            raise FileNotFoundError(f"Config file not found: {yaml_path}")

        logger.info(f"Loading config from {yaml_path}")
        with open(yaml_path, "r") as f:
            overrides = yaml.safe_load(f) or {}

        if not isinstance(overrides, dict):
            raise ValueError(f"Config file {yaml_path} must contain a mapping")

        return cls(_deep_merge(DEFAULT_CONFIG, overrides))

    def get(self, key: str, default: Any = None) -> Any:
        """Get a value by dotted key (e.g. ``"formula.max_length"``)."""
        node: Any = self._config
        for part in key.split("."):
            if not isinstance(node, dict) or part not in node:
                return default
            node = node[part]
        return node

    def set(self, key: str, value: Any) -> None:
        """Set a value by dotted key, creating intermediate sections."""
        *parents, leaf = key.split(".")
        node = self._config
        for part in parents:
            node = node.setdefault(part, {})
        node[leaf] = value

    def to_dict(self) -> Dict[str, Any]:
        return copy.deepcopy(self._config)

    def save(self, yaml_path: str | Path) -> None:
        """Write the full settings to a YAML file.

        Args:
            yaml_path: Destination path (parent directories are created)
        """
        yaml_path = Path(yaml_path)
        yaml_path.parent.mkdir(parents=True, exist_ok=True)

        logger.info(f"Saving config to {yaml_path}")
        with open(yaml_path, "w") as f:
            yaml.safe_dump(self._config, f, default_flow_style=False, sort_keys=False)

    def __repr__(self) -> str:
        return f"Config(sections={list(self._config)})"


_global_config: Optional[Config] = None


def _discover_config() -> Config:
    """Config from $CELLPILOT_CONFIG, then ./config.yml, then defaults."""
    candidates = []
    env_path = os.getenv(CONFIG_ENV_VAR)
    if env_path:
        candidates.append((Path(env_path), CONFIG_ENV_VAR))
    candidates.append((Path(LOCAL_CONFIG_FILE), LOCAL_CONFIG_FILE))

    for path, source in candidates:
        if not path.exists():
            if source == CONFIG_ENV_VAR:
                logger.warning(f"{CONFIG_ENV_VAR} points to missing file {path}; ignoring")
            continue
        try:
            return Config.from_yaml(path)
        except (OSError, ValueError, yaml.YAMLError) as e:
            logger.warning(f"Failed to load config from {source} ({path}): {e}")

    return Config()


def get_config() -> Config:
    """Get the global configuration, discovering it on first use.

    Returns:
        Global Config instance
    """
    global _global_config
    if _global_config is None:
        _global_config = _discover_config()
    return _global_config


def set_config(config: Optional[Config]) -> None:
    """Replace the global configuration (None resets to discovery on next use)."""
    global _global_config
    _global_config = config


def load_config(yaml_path: str | Path) -> Config:
    """Load a YAML config file and make it the global configuration.

    Args:
        yaml_path: Path to the YAML file

    Returns:
        Loaded Config instance
    """
    config = Config.from_yaml(yaml_path)
    set_config(config)
    return config
