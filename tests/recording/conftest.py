"""
Recording Test Configuration and Fixtures

Shared fixtures for recording module tests: a capture session wired to
the mock device, an in-memory store, a temporary asset directory and
a scripted location stack.
"""

import sys

import pytest

from location.enricher import GeolocationEnricher
from location.implementations.mock_position import MockPositionProvider
from location.implementations.permission_gates import MockPermissionGate
from recording.controllers.capture_session import CaptureSession
from recording.implementations.mock_device import MockCaptureDevice
from storage.implementations.local_filesystem import LocalFileSystem
from storage.implementations.memory_config_store import MemoryConfigStore
from storage.managers.asset_finalizer import AssetFinalizer
from storage.managers.metadata_manager import MetadataManager
from upload.implementations.mock_push import MockPushNotifier

# =============================================================================
# DEVICE FIXTURES
# =============================================================================


@pytest.fixture
def mock_device(tmp_path):
    """
    MockCaptureDevice delivering callbacks synchronously.

    Usage:
        def test_capture(mock_device):
            mock_device.fail_next_start()
    """
    device = MockCaptureDevice(temp_dir=tmp_path / "capture")
    yield device
    device.cleanup()


# =============================================================================
# STORAGE FIXTURES
# =============================================================================


@pytest.fixture
def asset_dir(tmp_path):
    return tmp_path / "videos" / "CameraApp"


@pytest.fixture
def session_fs():
    """Real filesystem; the media scan command always succeeds."""
    return LocalFileSystem(media_scan_command=f"{sys.executable} -c pass")


@pytest.fixture
def session_store():
    """Config store with 4k / location on / 7 days."""
    return MemoryConfigStore(
        {"resolution": "4k", "locationEnabled": "true", "autoDeleteDays": "7"},
    )


@pytest.fixture
def push_notifier():
    return MockPushNotifier()


@pytest.fixture
def session_finalizer(session_fs, session_store, push_notifier, asset_dir):
    finalizer = AssetFinalizer(
        session_fs,
        MetadataManager(session_store),
        push_notifier=push_notifier,
        asset_dir=asset_dir,
    )
    yield finalizer
    finalizer.shutdown()


# =============================================================================
# LOCATION FIXTURES
# =============================================================================


@pytest.fixture
def permission_gate():
    return MockPermissionGate(granted=True)


@pytest.fixture
def session_enricher(permission_gate):
    """Enricher that is never started; tests call poll() themselves."""
    enricher = GeolocationEnricher(
        MockPositionProvider(latitude=37.422, longitude=-122.084),
        permission_gate,
        interval=60.0,
    )
    yield enricher
    enricher.stop()


# =============================================================================
# SESSION FIXTURES
# =============================================================================


@pytest.fixture
def capture_session(mock_device, session_finalizer, session_store, session_enricher):
    """
    CaptureSession wired to mocks, not mounted, so location polling
    never runs (tests call enricher.poll() explicitly).

    Usage:
        def test_session(capture_session):
            capture_session.request_start()
    """
    session = CaptureSession(
        mock_device,
        session_finalizer,
        session_store,
        enricher=session_enricher,
    )
    session.status.clear_delay = 60.0
    yield session
    session.unmount()
