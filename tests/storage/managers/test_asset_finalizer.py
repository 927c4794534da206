"""
Asset Finalizer Tests

Tests for the durable-commit pipeline showing:
- Successful finalize (bytes, naming, metadata, source cleanup)
- Fatal failures (missing source, directory, copy)
- Soft failures (gallery, cleanup, metadata, push)

To run:
    pytest tests/storage/managers/test_asset_finalizer.py -v
"""

import json
from datetime import datetime

import pytest

from config.settings import KEY_LAST_SAVED_VIDEO
from location.models import LocationTag
from storage.constants import FinalizeFailure, FinalizeStep, Resolution
from storage.managers.asset_finalizer import (
    AssetFinalizer,
    CopyFailedError,
    DirectoryUnavailableError,
    SourceMissingError,
)
from storage.settings import Settings
from upload.implementations.mock_push import MockPushNotifier

# =============================================================================
# SUCCESS TESTS
# =============================================================================


@pytest.mark.unit
def test_finalize_copies_identical_bytes(finalizer, mock_fs, raw_path, raw_content, settings_4k):
    asset = finalizer.finalize(raw_path, settings_4k)

    assert mock_fs.read_file(asset.path) == raw_content


@pytest.mark.unit
def test_finalize_names_asset_from_timestamp(finalizer, asset_dir, raw_path, settings_4k):
    asset = finalizer.finalize(raw_path, settings_4k)

    assert asset.id == "VID_1759588225125"
    assert asset.path == asset_dir / "VID_1759588225125.mp4"
    assert asset.created_at == datetime.fromtimestamp(1759588225.125)
    assert asset.resolution == Resolution.UHD_4K


@pytest.mark.unit
def test_finalize_removes_source(finalizer, mock_fs, raw_path, settings_4k):
    asset = finalizer.finalize(raw_path, settings_4k)

    assert asset.source_removed is True
    assert not mock_fs.exists(raw_path)


@pytest.mark.unit
def test_finalize_registers_gallery(finalizer, mock_fs, raw_path, settings_4k):
    asset = finalizer.finalize(raw_path, settings_4k)

    assert asset.gallery_registered is True
    assert asset.saved_to_gallery is True
    assert mock_fs.scanned == [asset.path]


@pytest.mark.unit
def test_finalize_creates_missing_directory(finalizer, mock_fs, asset_dir, raw_path, settings_4k):
    assert not mock_fs.exists(asset_dir)

    finalizer.finalize(raw_path, settings_4k)

    assert ("mkdir", asset_dir) in mock_fs.calls


@pytest.mark.unit
def test_finalize_writes_metadata_record(
    finalizer, memory_store, raw_path, settings_4k,
):
    tag = LocationTag(latitude=37.422, longitude=-122.084, address="Mountain View, USA")

    asset = finalizer.finalize(raw_path, settings_4k, location_tag=tag)

    record = json.loads(memory_store.data["video_1759588225125"])
    assert record["path"] == str(asset.path)
    assert record["resolution"] == "4k"
    assert record["location"] == {
        "latitude": 37.422,
        "longitude": -122.084,
        "address": "Mountain View, USA",
    }
    assert datetime.fromisoformat(record["timestamp"]) == asset.created_at
    assert memory_store.data[KEY_LAST_SAVED_VIDEO] == str(asset.path)
    assert asset.location == tag


@pytest.mark.unit
def test_finalize_without_location_writes_null(finalizer, memory_store, raw_path, settings_4k):
    finalizer.finalize(raw_path, settings_4k)

    record = json.loads(memory_store.data["video_1759588225125"])
    assert record["location"] is None


@pytest.mark.unit
def test_finalize_same_millisecond_gets_distinct_ids(
    finalizer, mock_fs, raw_path, raw_content, settings_4k,
):
    """Two captures finishing in the same millisecond never collide."""
    first = finalizer.finalize(raw_path, settings_4k)
    mock_fs.add_file(raw_path, raw_content)

    second = finalizer.finalize(raw_path, settings_4k)

    assert first.id != second.id
    assert second.id == "VID_1759588225126"


@pytest.mark.unit
def test_finalize_skips_existing_filename(
    finalizer, mock_fs, asset_dir, raw_path, settings_4k,
):
    mock_fs.add_file(asset_dir / "VID_1759588225125.mp4", b"older video")

    asset = finalizer.finalize(raw_path, settings_4k)

    assert asset.id == "VID_1759588225126"
    assert mock_fs.read_file(asset_dir / "VID_1759588225125.mp4") == b"older video"


# =============================================================================
# FATAL FAILURE TESTS
# =============================================================================


@pytest.mark.unit
def test_finalize_missing_source(finalizer, mock_fs, asset_dir, settings_4k):
    from pathlib import Path

    missing = Path("/tmp/capture/never_written.mp4")

    with pytest.raises(SourceMissingError) as exc_info:
        finalizer.finalize(missing, settings_4k)

    assert exc_info.value.reason == FinalizeFailure.SOURCE_MISSING
    assert exc_info.value.raw_path == missing
    assert not mock_fs.exists(asset_dir)


@pytest.mark.unit
def test_finalize_directory_unavailable(finalizer, mock_fs, asset_dir, raw_path, settings_4k):
    mock_fs.fail_on("mkdir", asset_dir)

    with pytest.raises(DirectoryUnavailableError) as exc_info:
        finalizer.finalize(raw_path, settings_4k)

    assert exc_info.value.reason == FinalizeFailure.DIRECTORY_UNAVAILABLE
    assert mock_fs.exists(raw_path)


@pytest.mark.unit
def test_finalize_copy_failure_removes_partial(
    finalizer, mock_fs, memory_store, asset_dir, raw_path, settings_4k,
):
    """Failed copy leaves neither a partial file nor a metadata record."""
    mock_fs.mkdir(asset_dir)
    mock_fs.partial_copy_on_failure = True
    mock_fs.fail_on("copy_file")

    with pytest.raises(CopyFailedError) as exc_info:
        finalizer.finalize(raw_path, settings_4k)

    assert exc_info.value.reason == FinalizeFailure.COPY_FAILED
    assert mock_fs.read_dir(asset_dir) == []
    assert mock_fs.exists(raw_path)
    assert memory_store.keys("video_") == []


# =============================================================================
# SOFT FAILURE TESTS
# =============================================================================


@pytest.mark.unit
def test_gallery_unavailable_is_soft(finalizer, mock_fs, raw_path, settings_4k, soft_failures):
    mock_fs.gallery_available = False

    asset = finalizer.finalize(raw_path, settings_4k)

    assert asset.gallery_registered is False
    assert mock_fs.exists(asset.path)
    assert [step for step, _ in soft_failures] == [FinalizeStep.GALLERY_REGISTRATION]


@pytest.mark.unit
def test_source_cleanup_failure_is_soft(finalizer, mock_fs, raw_path, settings_4k, soft_failures):
    mock_fs.fail_on("unlink", raw_path)

    asset = finalizer.finalize(raw_path, settings_4k)

    assert asset.source_removed is False
    assert mock_fs.exists(raw_path)
    assert [step for step, _ in soft_failures] == [FinalizeStep.SOURCE_CLEANUP]


@pytest.mark.unit
def test_metadata_failure_is_soft(
    finalizer, mock_fs, memory_store, raw_path, settings_4k, soft_failures,
):
    memory_store.fail_writes = True

    asset = finalizer.finalize(raw_path, settings_4k)

    assert mock_fs.exists(asset.path)
    assert [step for step, _ in soft_failures] == [FinalizeStep.METADATA]


@pytest.mark.unit
def test_push_is_notified(mock_fs, metadata_manager, fixed_clock_generator, asset_dir, raw_path):
    notifier = MockPushNotifier()
    finalizer = AssetFinalizer(
        mock_fs,
        metadata_manager,
        push_notifier=notifier,
        asset_dir=asset_dir,
        id_generator=fixed_clock_generator,
    )

    asset = finalizer.finalize(raw_path, Settings())
    finalizer.shutdown(wait=True)

    assert notifier.pushed == [asset]


@pytest.mark.unit
def test_push_failure_is_soft(mock_fs, metadata_manager, fixed_clock_generator, asset_dir, raw_path):
    notifier = MockPushNotifier()
    notifier.fail_with("sync API down")
    failures = []
    finalizer = AssetFinalizer(
        mock_fs,
        metadata_manager,
        push_notifier=notifier,
        asset_dir=asset_dir,
        id_generator=fixed_clock_generator,
        on_soft_failure=lambda step, error: failures.append(step),
    )

    asset = finalizer.finalize(raw_path, Settings())
    finalizer.shutdown(wait=True)

    assert mock_fs.exists(asset.path)
    assert failures == [FinalizeStep.PUSH]


@pytest.mark.unit
def test_soft_failure_callback_error_is_contained(
    mock_fs, metadata_manager, fixed_clock_generator, asset_dir, raw_path,
):
    def broken(step, error):
        raise RuntimeError("callback failure")

    mock_fs.gallery_available = False
    finalizer = AssetFinalizer(
        mock_fs,
        metadata_manager,
        asset_dir=asset_dir,
        id_generator=fixed_clock_generator,
        on_soft_failure=broken,
    )

    asset = finalizer.finalize(raw_path, Settings())
    finalizer.shutdown()

    assert asset.gallery_registered is False
