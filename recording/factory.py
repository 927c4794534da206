"""
Recording Factory

Factory pattern for creating capture devices.
Automatically selects the FFmpeg device or the mock based on availability.

Single place to decide which implementation the service uses.
"""

import logging
from typing import Literal

from recording.implementations.ffmpeg_device import FFmpegCaptureDevice
from recording.implementations.mock_device import MockCaptureDevice
from recording.interfaces.capture_device_interface import CaptureDeviceInterface

# Type alias for better type hints
CaptureMode = Literal["auto", "real", "mock"]


class RecordingFactory:
    """
    Factory for creating capture device implementations.

    Usage:
        # Auto-detect (uses FFmpeg if available, mock otherwise)
        device = RecordingFactory.create_device()

        # Force mock mode (useful for testing)
        device = RecordingFactory.create_device(mode="mock")

        # Force real capture (raises error if not available)
        device = RecordingFactory.create_device(mode="real")
    """

    _logger = logging.getLogger(__name__)

    @classmethod
    def create_device(
        cls,
        mode: CaptureMode = "auto",
        deliver_async: bool = True,
    ) -> CaptureDeviceInterface:
        """
        Create a capture device.

        Args:
            mode: "auto" (detect), "real" (force FFmpeg), "mock" (force mock)
            deliver_async: For the mock device, deliver callbacks from a
                background thread like a real device

        Raises:
            RuntimeError: If mode="real" but FFmpeg or camera not available
        """
        if mode == "mock":
            cls._logger.info("Creating Mock Capture Device (forced)")
            return MockCaptureDevice(deliver_async=deliver_async)

        device = FFmpegCaptureDevice()
        available = device.is_available()

        if mode == "real":
            if not available:
                raise RuntimeError("Real capture requested but FFmpeg or camera not available")
            cls._logger.info("Creating FFmpeg Capture Device (forced)")
            return device

        # mode == "auto" - real if available, mock otherwise
        if available:
            cls._logger.info("Creating FFmpeg Capture Device (auto-detected)")
            return device

        cls._logger.warning("FFmpeg or camera not available, using Mock Capture Device")
        return MockCaptureDevice(deliver_async=deliver_async)


# Convenience functions for quick creation


def create_capture_device(force_mock: bool = False) -> CaptureDeviceInterface:
    """Quick device creation with auto-detection"""
    return RecordingFactory.create_device(mode="mock" if force_mock else "auto")
