"""
Config Store Interface

Persisted key-value store shared by every component: user settings
(resolution, locationEnabled, autoDeleteDays) and per-asset metadata
records (video_<epoch-millis>). Keys and values are strings.

The settings-editing collaborator is the only writer of settings keys;
everyone else reads a Settings snapshot built from this store.
"""

from abc import ABC, abstractmethod
from typing import Dict, Iterable, List, Mapping, Optional

from core.errors import CaptureLifecycleError


class ConfigStoreInterface(ABC):
    """Abstract base class for key-value settings stores"""

    @abstractmethod
    def get(self, keys: Iterable[str]) -> Dict[str, Optional[str]]:
        """
        Read several keys at once.

        Returns:
            Mapping of every requested key to its value, None if absent
        """
        pass

    @abstractmethod
    def set(self, mapping: Mapping[str, str]) -> None:
        """
        Write several keys at once.

        Raises:
            ConfigStoreError: If the store cannot be persisted
        """
        pass

    @abstractmethod
    def remove(self, keys: Iterable[str]) -> None:
        """Delete keys (missing keys are ignored)"""
        pass

    @abstractmethod
    def keys(self, prefix: str = "") -> List[str]:
        """List stored keys starting with prefix, sorted"""
        pass

    def get_one(self, key: str) -> Optional[str]:
        """Convenience: read a single key"""
        return self.get([key])[key]


class ConfigStoreError(CaptureLifecycleError):
    """Config store could not be read or written"""
    pass
