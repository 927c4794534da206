"""
Recording Module

Capture devices and the capture session state machine.

Provides automatic detection and graceful fallback between the real
FFmpeg device and the mock implementation for testing.

Public API:
    - CaptureSession: Capture lifecycle controller (start/stop/finalize)
    - RecordingFactory: Factory for creating capture devices
    - create_capture_device: Quick device creation with auto-detection
    - CaptureDeviceInterface: Device contract
    - RecordingOptions: Per-recording device options
    - CameraFacing: Front/back camera selection
    - CaptureError: Custom exceptions

Usage:
    from recording import CaptureSession, create_capture_device

    session = CaptureSession(create_capture_device(), finalizer, store)
    session.mount()
    session.request_start()
"""

from recording.constants import CameraFacing
from recording.controllers.capture_session import CaptureSession
from recording.factory import RecordingFactory, create_capture_device
from recording.interfaces.capture_device_interface import (
    CaptureDeviceInterface,
    CaptureError,
    RecordingOptions,
)

__all__ = [
    "CameraFacing",
    "CaptureDeviceInterface",
    "CaptureError",
    "CaptureSession",
    "RecordingFactory",
    "RecordingOptions",
    "create_capture_device",
]
