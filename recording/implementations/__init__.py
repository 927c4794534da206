"""
Recording Implementations Package

Exposes concrete implementations of recording interfaces.
"""

from recording.implementations.ffmpeg_device import FFmpegCaptureDevice
from recording.implementations.mock_device import MockCaptureDevice

# Public API
__all__ = [
    "FFmpegCaptureDevice",
    "MockCaptureDevice",
]
