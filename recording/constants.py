"""
Recording Constants

Enums and FFmpeg-specific constants for the capture device.

Note: Configuration values (bit rates, fps, camera devices) live in
config/settings.py. This file contains only enums, FFmpeg-specific
constants, and utility functions.
"""

from enum import Enum
from pathlib import Path

from config.settings import (
    CAMERA_DEVICE_BACK,
    CAMERA_DEVICE_FRONT,
    VIDEO_CODEC,
    VIDEO_FPS,
    VIDEO_PRESET,
)

# =============================================================================
# CAMERA DEVICE CONFIGURATION
# =============================================================================

# Video input format
# v4l2 is Video4Linux2, standard Linux video capture API
VIDEO_INPUT_FORMAT = "v4l2"


class CameraFacing(Enum):
    """Which camera a session records from"""

    FRONT = "front"
    BACK = "back"

    @property
    def device(self) -> str:
        """Video device path for this facing"""
        return CAMERA_DEVICE_FRONT if self is CameraFacing.FRONT else CAMERA_DEVICE_BACK

    def toggled(self) -> "CameraFacing":
        return CameraFacing.BACK if self is CameraFacing.FRONT else CameraFacing.FRONT


# =============================================================================
# FFMPEG COMMAND CONFIGURATION
# =============================================================================

# FFmpeg log level
# "error" only shows errors, keeps output clean
FFMPEG_LOG_LEVEL = "error"

# Absorbs short USB/storage stalls without dropping frames
THREAD_QUEUE_SIZE = 512

# Raw capture filename inside the capture temp directory
RAW_FILENAME_FORMAT = "raw_%Y%m%d_%H%M%S"


# =============================================================================
# UTILITY FUNCTIONS
# =============================================================================


def get_ffmpeg_command(
    input_device: str,
    output_file: str,
    width: int,
    height: int,
    bit_rate: int,
    fps: int = VIDEO_FPS,
) -> list[str]:
    """
    Generate FFmpeg command for video capture.

    Args:
        input_device: Camera device path (e.g., /dev/video0)
        output_file: Output filename with path
        width: Video width in pixels
        height: Video height in pixels
        bit_rate: Target video bit rate (bits per second)
        fps: Frame rate

    Returns:
        List of command arguments for subprocess

    Example:
        cmd = get_ffmpeg_command("/dev/video0", "raw.mp4", 1920, 1080, 8_000_000)
        subprocess.Popen(cmd)
    """
    return [
        "ffmpeg",
        # Video input options
        "-f",
        VIDEO_INPUT_FORMAT,
        "-input_format",
        "mjpeg",  # MJPEG from camera (less CPU than raw)
        "-video_size",
        f"{width}x{height}",
        "-framerate",
        str(fps),
        "-thread_queue_size",
        str(THREAD_QUEUE_SIZE),
        "-i",
        input_device,
        # Video encoding
        "-c:v",
        VIDEO_CODEC,
        "-preset",
        VIDEO_PRESET,
        "-b:v",
        str(bit_rate),
        "-pix_fmt",
        "yuv420p",
        # Fragmented MP4 stays playable when ffmpeg is stopped with SIGTERM
        "-movflags",
        "+frag_keyframe+empty_moov",
        "-loglevel",
        FFMPEG_LOG_LEVEL,
        "-y",
        output_file,
    ]


def format_duration(seconds: float) -> str:
    """
    Format duration in seconds to human-readable string.

    Example:
        format_duration(630) -> "10:30"
    """
    minutes = int(seconds // 60)
    secs = int(seconds % 60)
    return f"{minutes}:{secs:02d}"


def validate_camera_device(device_path: str) -> bool:
    """
    Check if camera device exists and is a character device.

    Example:
        if validate_camera_device("/dev/video0"):
            print("Camera found!")
    """
    device = Path(device_path)
    return device.exists() and device.is_char_device()
