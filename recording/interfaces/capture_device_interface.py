"""
Capture Device Interface

Abstract interface for recording devices.
Defines the contract that any capture device must follow.

High-level code (CaptureSession) depends on this abstraction, not on
FFmpeg directly, so tests can use MockCaptureDevice.

Completion is asynchronous: start_recording() returns immediately and
the device later calls exactly one of on_finished(raw_path) or
on_error(reason) from its own thread.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from pathlib import Path
from typing import Callable

from config.settings import VIDEO_FORMAT
from core.errors import CaptureLifecycleError
from recording.constants import CameraFacing
from storage.constants import Resolution

FinishedCallback = Callable[[Path], None]
ErrorCallback = Callable[[str], None]


@dataclass(frozen=True)
class RecordingOptions:
    """Options passed to the device for one recording"""

    resolution: Resolution
    video_bit_rate: int
    facing: CameraFacing = CameraFacing.BACK
    file_type: str = VIDEO_FORMAT

    @classmethod
    def for_resolution(
        cls,
        resolution: Resolution,
        facing: CameraFacing = CameraFacing.BACK,
    ) -> "RecordingOptions":
        return cls(
            resolution=resolution,
            video_bit_rate=resolution.bit_rate,
            facing=facing,
        )


class CaptureDeviceInterface(ABC):
    """
    Abstract base class for capture devices.

    Any capture implementation (FFmpeg, platform camera API, etc.)
    must implement all these methods to work with CaptureSession.
    """

    @abstractmethod
    def start_recording(
        self,
        options: RecordingOptions,
        on_finished: FinishedCallback,
        on_error: ErrorCallback,
    ) -> None:
        """
        Start recording. NON-BLOCKING.

        Args:
            options: Resolution, bit rate, facing, file type
            on_finished: Called with the raw output path once the file is closed
            on_error: Called with a reason if recording fails after starting

        Raises:
            CaptureError: If recording cannot be started at all
        """
        pass

    @abstractmethod
    def stop_recording(self) -> None:
        """
        Request the recording to stop.

        Fire-and-forget: the outcome arrives via on_finished/on_error.
        """
        pass

    @abstractmethod
    def is_recording(self) -> bool:
        """Check if a recording is in progress"""
        pass

    @abstractmethod
    def is_available(self) -> bool:
        """
        Check if the device can record.

        Should check that the capture software and camera are present.
        """
        pass

    @abstractmethod
    def cleanup(self) -> None:
        """
        Stop any active recording and release resources.

        This should never raise exceptions.
        """
        pass


class CaptureError(CaptureLifecycleError):
    """
    Exception raised for capture device errors.

    Examples:
    - Camera not found
    - FFmpeg not installed
    - Camera already in use
    """
    pass


class CameraNotFoundError(CaptureError):
    """Camera device not found or not accessible"""
    pass


class CameraBusyError(CaptureError):
    """Camera is already in use by another process"""
    pass


class CaptureProcessError(CaptureError):
    """Error in capture process (FFmpeg crashed, etc.)"""
    pass
