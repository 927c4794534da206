"""
Metadata Manager

Manages per-asset metadata records in the config store.
Single responsibility: metadata record operations only.
"""

import logging
from pathlib import Path
from typing import Callable, List, Optional, Tuple

from config.settings import KEY_LAST_SAVED_VIDEO, METADATA_KEY_PREFIX
from storage.interfaces.config_store_interface import ConfigStoreInterface
from storage.models.asset import Asset, MetadataRecord
from storage.utils.path_utils import metadata_key, parse_asset_millis


class MetadataManager:
    """
    Manages asset metadata records.

    Responsibilities:
    - Write video_<epoch-millis> records and lastSavedVideo
    - Read and list records
    - Find records whose asset file no longer exists

    Thread Safety:
    - Writes go through the config store, which serializes them
    """

    def __init__(self, store: ConfigStoreInterface):
        """
        Initialize metadata manager.

        Args:
            store: Config store holding the records
        """
        self.logger = logging.getLogger(__name__)
        self.store = store

    def save(self, asset: Asset) -> str:
        """
        Persist the asset's metadata record and mark it as last saved.

        Returns:
            Store key of the record

        Raises:
            ConfigStoreError: If the store cannot be written
            ValueError: If the asset id is not timestamp-derived
        """
        epoch_ms = parse_asset_millis(asset.id)
        if epoch_ms is None:
            raise ValueError(f"Asset id is not timestamp-derived: {asset.id}")

        key = metadata_key(epoch_ms)
        record = MetadataRecord.for_asset(asset)

        self.store.set(
            {
                key: record.to_json(),
                KEY_LAST_SAVED_VIDEO: str(asset.path),
            },
        )

        self.logger.debug(f"Metadata saved: {key}")
        return key

    def get(self, key: str) -> Optional[MetadataRecord]:
        """Read one record (None if absent or unreadable)"""
        raw = self.store.get_one(key)
        if raw is None:
            return None
        try:
            return MetadataRecord.from_json(raw)
        except ValueError as e:
            self.logger.warning(f"Ignoring unreadable metadata record {key}: {e}")
            return None

    def get_for_asset(self, asset_id: str) -> Optional[MetadataRecord]:
        epoch_ms = parse_asset_millis(asset_id)
        if epoch_ms is None:
            return None
        return self.get(metadata_key(epoch_ms))

    def list_records(self) -> List[Tuple[str, MetadataRecord]]:
        """All readable records, oldest first"""
        records = []
        for key in self.store.keys(METADATA_KEY_PREFIX):
            record = self.get(key)
            if record is not None:
                records.append((key, record))
        records.sort(key=lambda item: item[1].timestamp)
        return records

    def last_saved_path(self) -> Optional[Path]:
        value = self.store.get_one(KEY_LAST_SAVED_VIDEO)
        return Path(value) if value else None

    def find_orphaned(self, exists: Callable[[Path], bool]) -> List[str]:
        """
        Find records whose asset file is gone (e.g. removed by a sweep).

        Args:
            exists: Called with the record path, True if the file is present

        Returns:
            Store keys of orphaned records
        """
        return [
            key
            for key, record in self.list_records()
            if not exists(Path(record.path))
        ]

    def remove(self, keys: List[str]) -> None:
        """
        Raises:
            ConfigStoreError: If the store cannot be written
        """
        if not keys:
            return
        self.store.remove(keys)
        self.logger.info(f"Removed {len(keys)} metadata record(s)")
