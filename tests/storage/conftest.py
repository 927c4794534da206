"""
Storage Test Configuration and Fixtures

This file contains pytest fixtures shared across storage tests.

To use pytest:
    pip install -e ".[test]"
    pytest tests/storage/
"""

from pathlib import Path

import pytest

from storage.constants import Resolution
from storage.implementations.memory_config_store import MemoryConfigStore
from storage.implementations.mock_filesystem import MockFileSystem
from storage.managers.asset_finalizer import AssetFinalizer
from storage.managers.metadata_manager import MetadataManager
from storage.settings import Settings
from storage.utils.path_utils import AssetIdGenerator

ASSET_DIR = Path("/videos/CameraApp")
RAW_PATH = Path("/tmp/capture/raw_20251004_143025.mp4")
RAW_CONTENT = b"\x00\x00\x00\x18ftypmp42" + bytes(range(256)) * 4

# 2025-10-04 14:30:25.125 UTC
FIXED_NOW = 1759588225.125


# =============================================================================
# STORAGE FIXTURES
# =============================================================================


@pytest.fixture
def mock_fs():
    """
    Provide a fresh MockFileSystem with one raw capture file.

    Usage:
        def test_something(mock_fs):
            mock_fs.fail_on("copy_file")
    """
    fs = MockFileSystem()
    fs.add_file(RAW_PATH, RAW_CONTENT)
    return fs


@pytest.fixture
def memory_store():
    return MemoryConfigStore()


@pytest.fixture
def metadata_manager(memory_store):
    return MetadataManager(memory_store)


@pytest.fixture
def fixed_clock_generator(mock_fs):
    """Id generator with a frozen clock, skipping files present in mock_fs."""
    return AssetIdGenerator(
        exists=lambda name: mock_fs.exists(ASSET_DIR / name),
        clock=lambda: FIXED_NOW,
    )


@pytest.fixture
def soft_failures():
    """List collecting (step, error) soft failure reports."""
    return []


@pytest.fixture
def finalizer(mock_fs, metadata_manager, fixed_clock_generator, soft_failures):
    """
    AssetFinalizer over the mock filesystem and an in-memory store.

    Usage:
        def test_finalize(finalizer, settings_4k):
            asset = finalizer.finalize(RAW_PATH, settings_4k)
    """
    instance = AssetFinalizer(
        mock_fs,
        metadata_manager,
        asset_dir=ASSET_DIR,
        id_generator=fixed_clock_generator,
        on_soft_failure=lambda step, error: soft_failures.append((step, error)),
    )
    yield instance
    instance.shutdown()


@pytest.fixture
def settings_4k():
    return Settings(resolution=Resolution.UHD_4K, location_enabled=True, auto_delete_days=7)


@pytest.fixture
def asset_dir():
    return ASSET_DIR


@pytest.fixture
def raw_path():
    return RAW_PATH


@pytest.fixture
def raw_content():
    return RAW_CONTENT


@pytest.fixture
def fixed_now():
    return FIXED_NOW
