"""
Capture Service Integration Tests

Full service wiring in mock mode: mock camera, mock GPS, YAML store and
asset directory under tmp_path.

To run:
    pytest tests/test_capture_service.py -v
"""

import os
import time

import pytest

import capture_service
from capture_service import CaptureService
from core.state_machine import CaptureState
from storage.implementations.yaml_config_store import YamlConfigStore


@pytest.fixture
def store_path(tmp_path):
    return tmp_path / "app_store.yaml"


@pytest.fixture
def service(tmp_path, store_path):
    instance = CaptureService(mock=True, store_path=store_path, asset_dir=tmp_path / "videos")
    yield instance
    instance.shutdown()


@pytest.mark.integration
def test_startup_creates_asset_dir(service):
    report = service.startup()

    assert service.asset_dir.is_dir()
    assert report.is_empty


@pytest.mark.integration
def test_startup_sweeps_expired_videos(service, store_path):
    service.store.set({"autoDeleteDays": "7"})
    service.asset_dir.mkdir(parents=True)
    old = service.asset_dir / "VID_1.mp4"
    old.write_bytes(b"old")
    eight_days_ago = time.time() - 8 * 86400
    os.utime(old, (eight_days_ago, eight_days_ago))
    fresh = service.asset_dir / "VID_2.mp4"
    fresh.write_bytes(b"new")

    report = service.startup()

    assert report.deleted == ["VID_1"]
    assert not old.exists()
    assert fresh.exists()


@pytest.mark.integration
@pytest.mark.slow
def test_record_saves_asset(service):
    service.startup()

    asset = service.record(0.05)

    assert asset is not None
    assert asset.path.exists()
    assert asset.path.parent == service.asset_dir
    assert service.session.state == CaptureState.IDLE
    assert service.metadata.get_for_asset(asset.id) is not None


@pytest.mark.integration
@pytest.mark.slow
def test_record_uses_stored_resolution(service):
    service.update_settings(["resolution=720p"])

    asset = service.record(0.05)

    assert asset.resolution.value == "720p"
    assert service.device.last_options.video_bit_rate == asset.resolution.bit_rate


@pytest.mark.integration
@pytest.mark.slow
def test_list_assets_reports_records(service):
    asset = service.record(0.05)

    lines = service.list_assets()

    assert len(lines) == 1
    assert asset.id.replace("VID_", "video_") in lines[0]
    assert " ok " in lines[0]


@pytest.mark.integration
def test_update_settings_persists(service, store_path):
    settings = service.update_settings(["autoDeleteDays=3", "locationEnabled=no"])

    assert settings.auto_delete_days == 3
    assert settings.location_enabled is False
    assert YamlConfigStore(store_path).get_one("autoDeleteDays") == "3"
    assert service.enricher.enabled is False


@pytest.mark.integration
@pytest.mark.parametrize("assignment", ["resolution", "resolution=8k", "colour=red"])
def test_update_settings_rejects_invalid(service, assignment):
    with pytest.raises(ValueError):
        service.update_settings([assignment])


@pytest.mark.integration
def test_main_settings_command(tmp_path, monkeypatch, capsys):
    monkeypatch.setattr(capture_service, "setup_logging", lambda level: None)
    monkeypatch.setattr(capture_service.signal, "signal", lambda signum, handler: None)
    store_path = tmp_path / "store.yaml"

    exit_code = capture_service.main(
        ["--store", str(store_path), "settings", "--set", "resolution=4K"],
    )

    assert exit_code == 0
    assert "resolution = 4k" in capsys.readouterr().out
    assert YamlConfigStore(store_path).get_one("resolution") == "4k"


@pytest.mark.integration
def test_main_settings_invalid_value(tmp_path, monkeypatch):
    monkeypatch.setattr(capture_service, "setup_logging", lambda level: None)
    monkeypatch.setattr(capture_service.signal, "signal", lambda signum, handler: None)

    exit_code = capture_service.main(
        ["--store", str(tmp_path / "store.yaml"), "settings", "--set", "autoDeleteDays=-2"],
    )

    assert exit_code == 2
