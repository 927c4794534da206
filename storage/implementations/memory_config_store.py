"""
Memory Config Store

In-memory config store for testing. Can simulate write failures.
"""

from typing import Dict, Iterable, List, Mapping, Optional

from storage.interfaces.config_store_interface import (
    ConfigStoreError,
    ConfigStoreInterface,
)


class MemoryConfigStore(ConfigStoreInterface):
    """
    Config store held in a dict.

    Usage:
        store = MemoryConfigStore({"resolution": "4k"})
        store.fail_writes = True  # next set() raises ConfigStoreError
    """

    def __init__(self, initial: Optional[Mapping[str, str]] = None):
        self.data: Dict[str, str] = dict(initial or {})
        self.fail_writes = False
        self.write_count = 0

    def get(self, keys: Iterable[str]) -> Dict[str, Optional[str]]:
        return {key: self.data.get(key) for key in keys}

    def set(self, mapping: Mapping[str, str]) -> None:
        if self.fail_writes:
            raise ConfigStoreError("Simulated config store write failure")
        self.write_count += 1
        for key, value in mapping.items():
            self.data[str(key)] = str(value)

    def remove(self, keys: Iterable[str]) -> None:
        if self.fail_writes:
            raise ConfigStoreError("Simulated config store write failure")
        for key in keys:
            self.data.pop(key, None)

    def keys(self, prefix: str = "") -> List[str]:
        return sorted(key for key in self.data if key.startswith(prefix))
