"""
Recording Controllers Package

High-level controllers that orchestrate capture.
"""

from recording.controllers.capture_session import CaptureSession

# Public API
__all__ = [
    "CaptureSession",
]
