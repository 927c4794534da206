"""
Metadata Manager Tests

Tests for per-asset metadata records in the config store:
- Save and read back
- Listing order
- Orphaned record detection and removal

To run:
    pytest tests/storage/managers/test_metadata_manager.py -v
"""

from datetime import datetime
from pathlib import Path

import pytest

from config.settings import KEY_LAST_SAVED_VIDEO
from location.models import LocationTag
from storage.constants import Resolution
from storage.interfaces.config_store_interface import ConfigStoreError
from storage.models.asset import Asset


def make_asset(epoch_ms: int, location=None) -> Asset:
    return Asset(
        id=f"VID_{epoch_ms}",
        path=Path(f"/videos/CameraApp/VID_{epoch_ms}.mp4"),
        resolution=Resolution.FULL_HD_1080,
        created_at=datetime.fromtimestamp(epoch_ms / 1000),
        location=location,
    )


@pytest.mark.unit
def test_save_returns_key_and_sets_last_saved(metadata_manager, memory_store):
    asset = make_asset(1696429825000)

    key = metadata_manager.save(asset)

    assert key == "video_1696429825000"
    assert memory_store.data[KEY_LAST_SAVED_VIDEO] == str(asset.path)
    assert metadata_manager.last_saved_path() == asset.path


@pytest.mark.unit
def test_save_writes_record_and_pointer_together(metadata_manager, memory_store):
    metadata_manager.save(make_asset(1696429825000))

    assert memory_store.write_count == 1


@pytest.mark.unit
def test_get_round_trips_location(metadata_manager):
    tag = LocationTag(latitude=51.5, longitude=-0.12, address="London, UK")
    asset = make_asset(1696429825000, location=tag)

    key = metadata_manager.save(asset)
    record = metadata_manager.get(key)

    assert record.path == str(asset.path)
    assert record.resolution == "1080p"
    assert record.timestamp == asset.created_at
    assert record.location.address == "London, UK"
    assert record.location.latitude == 51.5


@pytest.mark.unit
def test_get_for_asset(metadata_manager):
    asset = make_asset(1696429825000)
    metadata_manager.save(asset)

    assert metadata_manager.get_for_asset(asset.id).path == str(asset.path)
    assert metadata_manager.get_for_asset("holiday") is None


@pytest.mark.unit
def test_save_rejects_non_timestamp_id(metadata_manager):
    asset = Asset(
        id="holiday",
        path=Path("/videos/holiday.mp4"),
        resolution=Resolution.AUTO,
        created_at=datetime.now(),
    )

    with pytest.raises(ValueError):
        metadata_manager.save(asset)


@pytest.mark.unit
def test_save_propagates_store_failure(metadata_manager, memory_store):
    memory_store.fail_writes = True

    with pytest.raises(ConfigStoreError):
        metadata_manager.save(make_asset(1696429825000))


@pytest.mark.unit
def test_get_ignores_unreadable_record(metadata_manager, memory_store):
    memory_store.set({"video_1": "not json"})

    assert metadata_manager.get("video_1") is None
    assert metadata_manager.list_records() == []


@pytest.mark.unit
def test_list_records_oldest_first(metadata_manager):
    for epoch_ms in (1696429900000, 1696429800000, 1696429850000):
        metadata_manager.save(make_asset(epoch_ms))

    keys = [key for key, _ in metadata_manager.list_records()]

    assert keys == ["video_1696429800000", "video_1696429850000", "video_1696429900000"]


@pytest.mark.unit
def test_find_and_remove_orphaned(metadata_manager, memory_store):
    kept = make_asset(1696429800000)
    gone = make_asset(1696429900000)
    metadata_manager.save(kept)
    metadata_manager.save(gone)

    orphaned = metadata_manager.find_orphaned(lambda path: path == kept.path)
    metadata_manager.remove(orphaned)

    assert orphaned == ["video_1696429900000"]
    assert memory_store.keys("video_") == ["video_1696429800000"]


@pytest.mark.unit
def test_remove_nothing_is_noop(metadata_manager, memory_store):
    metadata_manager.remove([])

    assert memory_store.write_count == 0
