"""
Recording Interfaces Package

Exposes abstract interfaces for recording components.
"""

from recording.interfaces.capture_device_interface import (
    CameraBusyError,
    CameraNotFoundError,
    CaptureDeviceInterface,
    CaptureError,
    CaptureProcessError,
    RecordingOptions,
)

# Public API
__all__ = [
    "CameraBusyError",
    "CameraNotFoundError",
    # Interface
    "CaptureDeviceInterface",
    # Exceptions
    "CaptureError",
    "CaptureProcessError",
    "RecordingOptions",
]
