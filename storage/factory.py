"""
Storage Factory

Factory pattern for creating filesystem and config store implementations.
Follows the same pattern as recording/factory.py.
"""

import logging
from pathlib import Path
from typing import Literal, Optional

from storage.implementations.local_filesystem import LocalFileSystem
from storage.implementations.memory_config_store import MemoryConfigStore
from storage.implementations.mock_filesystem import MockFileSystem
from storage.implementations.yaml_config_store import YamlConfigStore
from storage.interfaces.config_store_interface import ConfigStoreInterface
from storage.interfaces.filesystem_interface import FileSystemInterface

# Type alias for better type hints
StorageMode = Literal["auto", "real", "mock"]


class StorageFactory:
    """
    Factory for creating storage implementations.

    Usage:
        # Real filesystem and YAML store
        filesystem = StorageFactory.create_filesystem()
        store = StorageFactory.create_config_store()

        # Force mock mode (useful for testing)
        filesystem = StorageFactory.create_filesystem(mode="mock")
    """

    _logger = logging.getLogger(__name__)

    @classmethod
    def create_filesystem(cls, mode: StorageMode = "auto") -> FileSystemInterface:
        """
        Create a filesystem implementation.

        Args:
            mode: "auto" (use real), "real" (force real), "mock" (in-memory)
        """
        if mode == "mock":
            cls._logger.info("Creating Mock Filesystem (forced)")
            return MockFileSystem()

        # "auto" or "real" - the local filesystem is always available
        cls._logger.info("Creating Local Filesystem")
        return LocalFileSystem()

    @classmethod
    def create_config_store(
        cls,
        mode: StorageMode = "auto",
        path: Optional[Path] = None,
    ) -> ConfigStoreInterface:
        """
        Create a config store.

        Args:
            mode: "auto"/"real" (YAML file) or "mock" (in-memory)
            path: YAML file location (None = CONFIG_STORE_PATH)
        """
        if mode == "mock":
            cls._logger.info("Creating Memory Config Store (forced)")
            return MemoryConfigStore()

        return YamlConfigStore(path)


# Convenience functions for quick creation


def create_filesystem(force_mock: bool = False) -> FileSystemInterface:
    """Quick filesystem creation with simple mock override"""
    return StorageFactory.create_filesystem(mode="mock" if force_mock else "auto")


def create_config_store(
    force_mock: bool = False,
    path: Optional[Path] = None,
) -> ConfigStoreInterface:
    """Quick config store creation with simple mock override"""
    return StorageFactory.create_config_store(
        mode="mock" if force_mock else "auto",
        path=path,
    )
