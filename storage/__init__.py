"""
Storage Module

Durable asset storage for the capture lifecycle.

Architecture mirrors the recording module:
- interfaces/: Abstract base classes (filesystem, config store)
- implementations/: Concrete implementations (real and mock)
- managers/: Finalizer, metadata records, retention sweeper
- models/: Data structures
- utils/: Asset naming helpers
"""

# ============================================================================
# storage/__init__.py - Main Package Exports
# ============================================================================

from storage.constants import FinalizeFailure, FinalizeStep, Resolution
from storage.factory import StorageFactory, create_config_store, create_filesystem
from storage.interfaces.config_store_interface import (
    ConfigStoreError,
    ConfigStoreInterface,
)
from storage.interfaces.filesystem_interface import (
    DirEntry,
    FileSystemInterface,
    GalleryUnavailableError,
    StorageError,
)
from storage.managers.asset_finalizer import (
    AssetFinalizer,
    CopyFailedError,
    DirectoryUnavailableError,
    FinalizeError,
    SourceMissingError,
)
from storage.managers.metadata_manager import MetadataManager
from storage.managers.retention_sweeper import RetentionScheduler, RetentionSweeper
from storage.models.asset import Asset, MetadataRecord, SweepReport
from storage.settings import Settings

# Public API - what users import
__all__ = [
    # Models
    "Asset",
    # Managers (primary API)
    "AssetFinalizer",
    "ConfigStoreError",
    # Interfaces
    "ConfigStoreInterface",
    "CopyFailedError",
    "DirEntry",
    "DirectoryUnavailableError",
    "FileSystemInterface",
    # Errors
    "FinalizeError",
    # Enums
    "FinalizeFailure",
    "FinalizeStep",
    "GalleryUnavailableError",
    "MetadataManager",
    "MetadataRecord",
    "Resolution",
    "RetentionScheduler",
    "RetentionSweeper",
    "Settings",
    "SourceMissingError",
    "StorageError",
    # Factory
    "StorageFactory",
    "SweepReport",
    "create_config_store",
    "create_filesystem",
]
