"""
YAML Config Store

Config store persisted as a flat YAML mapping of string -> string.
Every write is saved to disk immediately; reads are served from memory.

Thread Safety:
- WRITE operations (set, remove) are serialized with threading.Lock
- The file is written to a temp file and renamed, so a crash mid-write
  never leaves a truncated store behind
"""

import logging
import os
import threading
from pathlib import Path
from typing import Dict, Iterable, List, Mapping, Optional

import yaml

from config.settings import CONFIG_STORE_PATH
from storage.interfaces.config_store_interface import (
    ConfigStoreError,
    ConfigStoreInterface,
)


class YamlConfigStore(ConfigStoreInterface):
    """
    Key-value store backed by a YAML file.

    Usage:
        store = YamlConfigStore(Path("config/app_store.yaml"))
        store.set({"resolution": "4k", "locationEnabled": "true"})
        values = store.get(["resolution", "autoDeleteDays"])
        # {"resolution": "4k", "autoDeleteDays": None}
    """

    def __init__(self, path: Optional[Path] = None):
        """
        Initialize store.

        Args:
            path: YAML file location (None = CONFIG_STORE_PATH)
        """
        self.logger = logging.getLogger(__name__)
        self.path = Path(path) if path else CONFIG_STORE_PATH
        self._write_lock = threading.Lock()
        self._data: Dict[str, str] = self._load()

        self.logger.info(f"Config store loaded from {self.path} ({len(self._data)} keys)")

    def _load(self) -> Dict[str, str]:
        """Load the mapping from disk (missing or unreadable file = empty)"""
        if not self.path.exists():
            self.logger.info(f"Config store not found at {self.path}, starting empty")
            return {}

        try:
            with open(self.path, "r") as f:
                raw = yaml.safe_load(f) or {}
        except (OSError, yaml.YAMLError) as e:
            self.logger.warning(
                f"Failed to load config store from {self.path}: {e}. Starting empty.",
            )
            return {}

        if not isinstance(raw, dict):
            self.logger.warning(f"Config store {self.path} is not a mapping, ignoring")
            return {}

        # Values are strings by contract; coerce anything hand-edited
        return {str(k): str(v) for k, v in raw.items() if v is not None}

    def _save(self) -> None:
        """Persist current mapping (caller holds the write lock)"""
        tmp_path = self.path.with_name(self.path.name + ".tmp")
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            with open(tmp_path, "w") as f:
                yaml.safe_dump(
                    self._data,
                    f,
                    default_flow_style=False,
                    sort_keys=True,
                    allow_unicode=True,
                )
            os.replace(tmp_path, self.path)
        except (OSError, yaml.YAMLError) as e:
            raise ConfigStoreError(f"Failed to save config store: {e}") from e

    def get(self, keys: Iterable[str]) -> Dict[str, Optional[str]]:
        data = self._data
        return {key: data.get(key) for key in keys}

    def set(self, mapping: Mapping[str, str]) -> None:
        with self._write_lock:
            updated = dict(self._data)
            for key, value in mapping.items():
                updated[str(key)] = str(value)
            previous = self._data
            self._data = updated
            try:
                self._save()
            except ConfigStoreError:
                self._data = previous
                raise

        self.logger.debug(f"Config store updated: {', '.join(mapping.keys())}")

    def remove(self, keys: Iterable[str]) -> None:
        with self._write_lock:
            updated = dict(self._data)
            removed = [key for key in keys if updated.pop(key, None) is not None]
            if not removed:
                return
            previous = self._data
            self._data = updated
            try:
                self._save()
            except ConfigStoreError:
                self._data = previous
                raise

        self.logger.debug(f"Config store removed: {', '.join(removed)}")

    def keys(self, prefix: str = "") -> List[str]:
        return sorted(key for key in self._data if key.startswith(prefix))

    def reload(self) -> None:
        """Reload from disk (picks up edits made by another process)"""
        with self._write_lock:
            self._data = self._load()

    def __repr__(self) -> str:
        return f"YamlConfigStore(path={self.path})"
