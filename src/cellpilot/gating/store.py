"""Key-value store for per-user gating state."""

from __future__ import annotations

import copy
from abc import ABC, abstractmethod
from typing import Any, Dict, Optional


class SettingsStore(ABC):
    """Narrow interface over the host's per-user key-value storage."""

    @abstractmethod
    def get(self, key: str, default: Any = None) -> Any:
        """Get a stored value.

        Args:
            key: Setting key (e.g. "userTier")
            default: Value returned when the key is not set

        Returns:
            Stored value or ``default``
        """
        pass

    @abstractmethod
    def set(self, key: str, value: Any) -> None:
        """Store a value.

        Args:
            key: Setting key
            value: JSON-compatible value
        """
        pass


class InMemorySettingsStore(SettingsStore):
    """Dict-backed store, used by the CLI and tests."""

    def __init__(self, initial: Optional[Dict[str, Any]] = None):
        self._data: Dict[str, Any] = dict(initial or {})

    def get(self, key: str, default: Any = None) -> Any:
        if key not in self._data:
            return default
        # Copy so callers mutating a returned list don't bypass set()
        return copy.deepcopy(self._data[key])

    def set(self, key: str, value: Any) -> None:
        self._data[key] = value

    def to_dict(self) -> Dict[str, Any]:
        return copy.deepcopy(self._data)

    def __repr__(self) -> str:
        return f"InMemorySettingsStore(keys={sorted(self._data)})"
