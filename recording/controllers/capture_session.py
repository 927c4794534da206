"""
Capture Session

Drives one camera screen through the capture lifecycle:
IDLE -> RECORDING -> FINALIZING -> IDLE.

User requests (start/stop/switch camera) and device callbacks
(finished/error) are both turned into CaptureEvents and applied to the
state machine under a single lock, so they cannot interleave
mid-transition. Long work (device start, finalization) runs outside the
lock.

This is the high-level controller that the service uses.
"""

import logging
import threading
import time
from datetime import datetime
from pathlib import Path
from typing import Callable, Optional

from core.errors import PermissionDeniedError
from core.state_machine import CaptureEvent, CaptureState, CaptureStateMachine
from core.status import (
    STATUS_PERMISSION_REQUIRED,
    STATUS_PROCESSING,
    STATUS_RECORDING,
    STATUS_RECORDING_FAILED,
    STATUS_SAVE_ERROR,
    STATUS_SAVED_APP_ONLY,
    STATUS_SAVED_GALLERY,
    STATUS_START_ERROR,
    StatusReporter,
)
from location.enricher import GeolocationEnricher
from location.interfaces.permission_interface import PermissionGateInterface
from recording.constants import CameraFacing, format_duration
from recording.interfaces.capture_device_interface import (
    CaptureDeviceInterface,
    CaptureProcessError,
    RecordingOptions,
)
from storage.interfaces.config_store_interface import ConfigStoreInterface
from storage.managers.asset_finalizer import AssetFinalizer, FinalizeError
from storage.models.asset import Asset
from storage.settings import Settings


class CaptureSession:
    """
    Capture lifecycle controller for one camera screen.

    Usage:
        session = CaptureSession(device, finalizer, store, enricher, gate)
        session.on_asset_saved = lambda asset: print(asset.path)
        session.on_error = lambda exc: print(f"Error: {exc}")

        session.mount()           # settings snapshot + location polling
        session.request_start()   # -> RECORDING
        session.request_stop()    # -> FINALIZING, then IDLE once saved
        session.unmount()
    """

    def __init__(
        self,
        device: CaptureDeviceInterface,
        finalizer: AssetFinalizer,
        store: ConfigStoreInterface,
        enricher: Optional[GeolocationEnricher] = None,
        permission_gate: Optional[PermissionGateInterface] = None,
        status: Optional[StatusReporter] = None,
        facing: CameraFacing = CameraFacing.BACK,
    ):
        """
        Initialize capture session.

        Args:
            device: Capture device
            finalizer: Durable-commit pipeline for finished recordings
            store: Config store the settings snapshot is read from
            enricher: Location poller (None = never tag)
            permission_gate: Location permission (None = enricher's gate)
            status: Status text reporter (None = create one)
            facing: Initial camera
        """
        self.logger = logging.getLogger(__name__)
        self.device = device
        self.finalizer = finalizer
        self.store = store
        self.enricher = enricher
        self.permission_gate = permission_gate or (
            enricher.permission_gate if enricher else None
        )
        self.status = status or StatusReporter()

        self.machine = CaptureStateMachine()
        self.facing = facing
        self.started_at: Optional[datetime] = None
        self._start_time = 0.0
        self.settings = Settings.from_store(store)

        self._lock = threading.Lock()
        # Set once a finished/error outcome was accepted for the current capture
        self._outcome_received = False
        # Set by the enricher when the sensor refuses access; forces a prompt
        self._permission_recheck = False
        self._mounted = False
        self._last_asset: Optional[Asset] = None

        # Callbacks
        self.on_asset_saved: Optional[Callable[[Asset], None]] = None
        self.on_error: Optional[Callable[[Exception], None]] = None

        if self.enricher is not None:
            self.enricher.on_permission_revoked = self.handle_permission_revoked

        self.logger.info(
            f"Capture session initialized (camera: {facing.value}, "
            f"resolution: {self.settings.resolution.value})",
        )

    @property
    def state(self) -> CaptureState:
        return self.machine.current_state

    @property
    def is_recording(self) -> bool:
        return self.state == CaptureState.RECORDING

    @property
    def last_asset(self) -> Optional[Asset]:
        return self._last_asset

    # =========================================================================
    # LIFECYCLE
    # =========================================================================

    def mount(self) -> None:
        """Screen shown: refresh settings and start location polling"""
        self._mounted = True
        self.refresh_settings()
        if self.enricher:
            self.enricher.start()
        self.logger.info("Capture session mounted")

    def unmount(self) -> None:
        """Screen torn down: stop recording, polling and pending status clear"""
        self._mounted = False

        if self.state == CaptureState.RECORDING:
            self.logger.info("Unmounting while recording, stopping capture")
            self.request_stop()

        if self.enricher:
            self.enricher.stop()

        self.status.cancel()
        self.logger.info("Capture session unmounted")

    def refresh_settings(self) -> Settings:
        """Re-read the settings snapshot and reconfigure location polling"""
        self.settings = Settings.from_store(self.store)

        if self.enricher:
            self.enricher.configure(self.settings.location_enabled)

        self.logger.debug(f"Settings refreshed: {self.settings.to_dict()}")
        return self.settings

    # =========================================================================
    # USER REQUESTS
    # =========================================================================

    def request_start(self) -> bool:
        """
        Start recording.

        Returns:
            True if the device started, False otherwise
        """
        with self._lock:
            if self.state != CaptureState.IDLE:
                self.logger.warning(f"Cannot start - session in state: {self.state.value}")
                return False

            if not self._ensure_location_permission():
                self.machine.apply(CaptureEvent.START_ABORTED, "location permission denied")
                self.status.report(STATUS_PERMISSION_REQUIRED)
                error = PermissionDeniedError("Location permission required")
                denied = True
            else:
                denied = False
                options = RecordingOptions.for_resolution(self.settings.resolution, self.facing)
                self.machine.apply(CaptureEvent.START_REQUESTED, options.resolution.value)
                self._outcome_received = False
                self.started_at = datetime.now()
                self._start_time = time.time()

        if denied:
            self._trigger_error_callback(error)
            return False

        # Reported before the device call: its callbacks may arrive before it returns
        self.status.report(STATUS_RECORDING, sticky=True)

        try:
            self.device.start_recording(
                options,
                on_finished=self.handle_finished,
                on_error=self.handle_error,
            )
        except Exception as e:
            self.logger.error(f"Error starting recording: {e}", exc_info=True)
            with self._lock:
                self.machine.apply(CaptureEvent.DEVICE_ERROR, f"start failed: {e}")
                self.started_at = None
            self.status.report(STATUS_START_ERROR)
            self._trigger_error_callback(e)
            return False

        self.logger.info(
            f"Recording started ({options.resolution.value}, "
            f"{options.video_bit_rate} bps, {options.facing.value} camera)",
        )
        return True

    def request_stop(self) -> None:
        """
        Stop recording. Fire-and-forget: completion arrives through
        handle_finished/handle_error.
        """
        with self._lock:
            if self.state != CaptureState.RECORDING:
                self.logger.debug(f"Stop ignored - session in state: {self.state.value}")
                return
            self.machine.apply(CaptureEvent.STOP_REQUESTED)

        self.logger.info(f"Stopping recording after {format_duration(self.get_duration())}")

        try:
            self.device.stop_recording()
        except Exception as e:
            self.logger.error(f"Error stopping device: {e}", exc_info=True)
            self.handle_error(str(e))

    def switch_camera(self) -> bool:
        """
        Toggle front/back camera.

        Returns:
            True if switched, False while recording or finalizing
        """
        with self._lock:
            if self.state != CaptureState.IDLE:
                self.logger.warning("Cannot switch camera while recording")
                return False
            self.facing = self.facing.toggled()

        self.logger.info(f"Switched to {self.facing.value} camera")
        return True

    # =========================================================================
    # DEVICE CALLBACKS
    # =========================================================================

    def handle_finished(self, raw_path: Path) -> None:
        """Device finished writing raw_path (any thread)"""
        with self._lock:
            if self._outcome_received:
                self.logger.warning(f"Duplicate completion ignored: {raw_path}")
                return
            if not self.machine.apply(CaptureEvent.DEVICE_FINISHED, "device finished"):
                return
            self._outcome_received = True
            settings = self.settings

        self.status.report(STATUS_PROCESSING, sticky=True)

        location_tag = None
        if settings.location_enabled and self.enricher is not None:
            location_tag = self.enricher.latest_tag

        asset: Optional[Asset] = None
        error: Optional[Exception] = None
        try:
            asset = self.finalizer.finalize(raw_path, settings, location_tag)
        except FinalizeError as e:
            self.logger.error(f"Finalize failed ({e.reason.value}): {e}")
            error = e
        except Exception as e:
            self.logger.error(f"Unexpected finalize error: {e}", exc_info=True)
            error = e

        if asset is not None:
            self._last_asset = asset
            self.status.report(
                STATUS_SAVED_GALLERY if asset.gallery_registered else STATUS_SAVED_APP_ONLY,
            )
        else:
            self.status.report(STATUS_SAVE_ERROR)

        with self._lock:
            self.machine.apply(CaptureEvent.FINALIZE_COMPLETE)
            self.started_at = None

        if asset is not None:
            self._trigger_asset_saved_callback(asset)
        else:
            self._trigger_error_callback(error)

    def handle_error(self, reason: str) -> None:
        """Device reported a recording failure (any thread)"""
        with self._lock:
            if self._outcome_received:
                self.logger.warning(f"Device error after completion ignored: {reason}")
                return
            if not self.machine.apply(CaptureEvent.DEVICE_ERROR, reason):
                return
            self._outcome_received = True
            self.started_at = None

        self.logger.error(f"Recording failed: {reason}")
        self.status.report(STATUS_RECORDING_FAILED)

        self._trigger_error_callback(CaptureProcessError(reason))

    def handle_permission_revoked(self) -> None:
        """Enricher saw a permission denial; next start re-prompts"""
        with self._lock:
            self._permission_recheck = True
            idle = self.state == CaptureState.IDLE

        self.logger.warning("Location permission revoked, will re-prompt on next start")
        if idle:
            self.status.report(STATUS_PERMISSION_REQUIRED)

    # =========================================================================
    # HELPERS
    # =========================================================================

    def _ensure_location_permission(self) -> bool:
        """True if recording may start (caller holds the lock)"""
        if not self.settings.location_enabled or self.permission_gate is None:
            return True

        if self.permission_gate.is_granted() and not self._permission_recheck:
            return True

        self._permission_recheck = False
        self.logger.info("Requesting location permission")
        try:
            granted = self.permission_gate.request()
        except Exception as e:
            self.logger.error(f"Permission request failed: {e}")
            granted = False

        if not granted:
            self.logger.warning("Location permission denied, recording not started")
        return granted

    def get_duration(self) -> float:
        """Seconds since recording started (0.0 when idle)"""
        if self.started_at is None:
            return 0.0
        return time.time() - self._start_time

    def get_status(self) -> dict:
        return {
            "state": self.state.value,
            "facing": self.facing.value,
            "started_at": self.started_at.isoformat() if self.started_at else None,
            "duration": self.get_duration(),
            "status_text": self.status.text,
            "settings": self.settings.to_dict(),
            "mounted": self._mounted,
            "last_asset": self._last_asset.id if self._last_asset else None,
            "machine": self.machine.get_status_info(),
        }

    # =========================================================================
    # CALLBACK TRIGGERS
    # =========================================================================

    def _trigger_asset_saved_callback(self, asset: Asset) -> None:
        if self.on_asset_saved:
            try:
                self.on_asset_saved(asset)
            except Exception as e:
                self.logger.error(f"Error in asset saved callback: {e}")

    def _trigger_error_callback(self, error: Exception) -> None:
        if self.on_error:
            try:
                self.on_error(error)
            except Exception as e:
                self.logger.error(f"Error in error callback: {e}")
