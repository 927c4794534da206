"""
Mock Capture Device Implementation

Simulated capture device for testing without a camera or FFmpeg.
Writes fake bytes to a raw file and emits the device callbacks.

This is a "Fake" (test double) - it has working logic but no real hardware.
"""

import logging
import tempfile
import threading
from datetime import datetime
from pathlib import Path
from typing import List, Optional

from recording.constants import RAW_FILENAME_FORMAT
from recording.interfaces.capture_device_interface import (
    CaptureDeviceInterface,
    CaptureError,
    ErrorCallback,
    FinishedCallback,
    RecordingOptions,
)


class MockCaptureDevice(CaptureDeviceInterface):
    """
    Mock capture device for testing.

    Callbacks are delivered on the calling thread by default, which keeps
    tests deterministic. Pass deliver_async=True to deliver them from a
    background thread like a real device.

    Usage:
        device = MockCaptureDevice()
        device.start_recording(options, on_finished, on_error)
        device.stop_recording()        # -> on_finished(raw_path)

        device.fail_next_start()       # start_recording raises CaptureError
        device.fail_on_stop("boom")    # stop_recording -> on_error("boom")
        device.simulate_error("crash") # mid-recording failure
    """

    def __init__(
        self,
        temp_dir: Optional[Path] = None,
        content: bytes = b"\x00\x00\x00\x18ftypmp42mock video data",
        deliver_async: bool = False,
        available: bool = True,
    ):
        """
        Initialize mock device.

        Args:
            temp_dir: Where raw files are written (None = fresh temp dir)
            content: Bytes written into each raw file
            deliver_async: Deliver callbacks from a background thread
            available: Value returned by is_available()
        """
        self.logger = logging.getLogger(__name__)

        self.temp_dir = Path(temp_dir) if temp_dir else Path(tempfile.mkdtemp(prefix="capture_"))
        self.content = content
        self.deliver_async = deliver_async
        self.available = available

        # State tracking
        self._recording = False
        self._raw_path: Optional[Path] = None
        self._on_finished: Optional[FinishedCallback] = None
        self._on_error: Optional[ErrorCallback] = None
        self._counter = 0

        # Configuration for test scenarios
        self._fail_next_start: Optional[str] = None
        self._stop_error: Optional[str] = None

        # Recorded interactions
        self.started_with: List[RecordingOptions] = []
        self.stop_count = 0
        self.delivery_threads: List[threading.Thread] = []

        self.logger.info(f"Mock Capture Device initialized (temp: {self.temp_dir})")

    # -------------------------------------------------------------------------
    # Test helpers
    # -------------------------------------------------------------------------

    def fail_next_start(self, message: str = "Simulated camera failure") -> None:
        self._fail_next_start = message

    def fail_on_stop(self, reason: str = "Simulated recording failure") -> None:
        self._stop_error = reason

    @property
    def last_options(self) -> Optional[RecordingOptions]:
        return self.started_with[-1] if self.started_with else None

    @property
    def raw_path(self) -> Optional[Path]:
        return self._raw_path

    def simulate_error(self, reason: str = "Simulated capture crash") -> None:
        """Fail the current recording without a stop request"""
        if not self._recording:
            return
        self.logger.warning(f"[MOCK] Simulating capture error: {reason}")
        self._recording = False
        self._deliver(self._on_error, reason)

    def simulate_finish(self) -> None:
        """Finish the current recording without a stop request"""
        if not self._recording:
            return
        self._recording = False
        self._deliver(self._on_finished, self._raw_path)

    def wait_for_delivery(self, timeout: float = 5.0) -> None:
        for thread in self.delivery_threads:
            thread.join(timeout=timeout)

    # -------------------------------------------------------------------------
    # CaptureDeviceInterface
    # -------------------------------------------------------------------------

    def start_recording(
        self,
        options: RecordingOptions,
        on_finished: FinishedCallback,
        on_error: ErrorCallback,
    ) -> None:
        if self._fail_next_start:
            message, self._fail_next_start = self._fail_next_start, None
            self.logger.error(f"[MOCK] Simulated start failure: {message}")
            raise CaptureError(message)

        if self._recording:
            raise CaptureError("Already recording")

        self._counter += 1
        stem = datetime.now().strftime(RAW_FILENAME_FORMAT)
        self._raw_path = self.temp_dir / f"{stem}_{self._counter}.{options.file_type}"
        self.temp_dir.mkdir(parents=True, exist_ok=True)
        self._raw_path.write_bytes(self.content)

        self._on_finished = on_finished
        self._on_error = on_error
        self._recording = True
        self.started_with.append(options)

        self.logger.info(
            f"[MOCK] Recording started: {self._raw_path.name} "
            f"({options.resolution.value}, {options.facing.value})",
        )

    def stop_recording(self) -> None:
        self.stop_count += 1
        if not self._recording:
            self.logger.warning("[MOCK] Not recording, nothing to stop")
            return

        self._recording = False
        self.logger.info("[MOCK] Recording stopped")

        if self._stop_error:
            reason, self._stop_error = self._stop_error, None
            self._deliver(self._on_error, reason)
        else:
            self._deliver(self._on_finished, self._raw_path)

    def _deliver(self, callback, argument) -> None:
        if callback is None:
            return

        def run():
            try:
                callback(argument)
            except Exception as e:
                self.logger.error(f"[MOCK] Error in device callback: {e}", exc_info=True)

        if self.deliver_async:
            thread = threading.Thread(target=run, daemon=True, name="MockDevice-Callback")
            self.delivery_threads.append(thread)
            thread.start()
        else:
            run()

    def is_recording(self) -> bool:
        return self._recording

    def is_available(self) -> bool:
        return self.available

    def cleanup(self) -> None:
        self.logger.info("[MOCK] Cleaning up Mock Capture Device")
        self._recording = False
        self._on_finished = None
        self._on_error = None
