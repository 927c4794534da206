"""
FFmpeg Capture Device Implementation

Real video capture using an FFmpeg subprocess.
Records from a V4L2 camera into the capture temp directory; a watcher
thread reports completion when the process exits.

This wraps FFmpeg to match our CaptureDeviceInterface.
"""

import logging
import shutil
import subprocess
import threading
import time
from datetime import datetime
from pathlib import Path
from typing import Optional

from config.settings import (
    CAMERA_STOP_TIMEOUT,
    CAMERA_WARMUP_TIME,
    CAPTURE_TEMP_DIR,
    VIDEO_FPS,
)
from recording.constants import (
    RAW_FILENAME_FORMAT,
    CameraFacing,
    get_ffmpeg_command,
    validate_camera_device,
)
from recording.interfaces.capture_device_interface import (
    CameraBusyError,
    CameraNotFoundError,
    CaptureDeviceInterface,
    CaptureError,
    CaptureProcessError,
    ErrorCallback,
    FinishedCallback,
    RecordingOptions,
)


class FFmpegCaptureDevice(CaptureDeviceInterface):
    """
    Capture device using FFmpeg.

    Usage:
        device = FFmpegCaptureDevice()
        device.start_recording(options, on_finished=..., on_error=...)
        # ... recording happens in background ...
        device.stop_recording()   # on_finished(raw_path) follows
        device.cleanup()
    """

    def __init__(
        self,
        temp_dir: Optional[Path] = None,
        fps: int = VIDEO_FPS,
        warmup_time: float = CAMERA_WARMUP_TIME,
        stop_timeout: float = CAMERA_STOP_TIMEOUT,
    ):
        """
        Initialize FFmpeg device.

        Args:
            temp_dir: Where raw output is written (None = CAPTURE_TEMP_DIR)
            fps: Frame rate
            warmup_time: Seconds to wait before checking ffmpeg survived startup
            stop_timeout: Seconds ffmpeg gets to finalize before being killed
        """
        self.logger = logging.getLogger(__name__)

        self.temp_dir = Path(temp_dir) if temp_dir else CAPTURE_TEMP_DIR
        self.fps = fps
        self.warmup_time = warmup_time
        self.stop_timeout = stop_timeout

        self._process: Optional[subprocess.Popen] = None
        self._output_file: Optional[Path] = None
        self._watcher: Optional[threading.Thread] = None
        self._kill_timer: Optional[threading.Timer] = None
        self._stop_requested = False
        self._lock = threading.Lock()

        self.logger.info(f"FFmpeg Capture Device initialized (temp: {self.temp_dir})")

    def start_recording(
        self,
        options: RecordingOptions,
        on_finished: FinishedCallback,
        on_error: ErrorCallback,
    ) -> None:
        with self._lock:
            if self.is_recording():
                raise CameraBusyError("Already recording")

            device = options.facing.device
            if not validate_camera_device(device):
                raise CameraNotFoundError(f"Camera device not found: {device}")

            self.temp_dir.mkdir(parents=True, exist_ok=True)
            stem = datetime.now().strftime(RAW_FILENAME_FORMAT)
            output_file = self.temp_dir / f"{stem}.{options.file_type}"

            width, height = options.resolution.frame_size
            command = get_ffmpeg_command(
                input_device=device,
                output_file=str(output_file),
                width=width,
                height=height,
                bit_rate=options.video_bit_rate,
                fps=self.fps,
            )

            self.logger.info(
                f"Starting FFmpeg capture to: {output_file} "
                f"({options.resolution.value}, {options.facing.value})",
            )
            self.logger.debug(f"FFmpeg command: {' '.join(command)}")

            try:
                # stdin=DEVNULL: ffmpeg must never wait for keyboard input
                process = subprocess.Popen(
                    command,
                    stdout=subprocess.DEVNULL,
                    stderr=subprocess.PIPE,
                    stdin=subprocess.DEVNULL,
                )
            except FileNotFoundError as e:
                raise CaptureError(
                    "FFmpeg not found. Install with: sudo apt-get install ffmpeg",
                ) from e

            # Give FFmpeg time to open the camera
            time.sleep(self.warmup_time)

            if process.poll() is not None:
                _, stderr = process.communicate()
                error_msg = stderr.decode("utf-8", errors="ignore")
                if "Device or resource busy" in error_msg:
                    raise CameraBusyError(f"Camera is busy: {device}")
                raise CaptureProcessError(f"FFmpeg failed to start: {error_msg}")

            self._process = process
            self._output_file = output_file
            self._stop_requested = False
            self._watcher = threading.Thread(
                target=self._watch_process,
                args=(process, output_file, on_finished, on_error),
                daemon=True,
                name="FFmpegWatcher",
            )
            self._watcher.start()

            self.logger.info(f"Capture started (PID: {process.pid})")

    def stop_recording(self) -> None:
        with self._lock:
            if not self.is_recording():
                self.logger.warning("Not recording, nothing to stop")
                return

            self.logger.info("Stopping capture...")
            self._stop_requested = True

            # SIGTERM lets ffmpeg flush and close the file; SIGKILL corrupts it
            self._process.terminate()

            self._kill_timer = threading.Timer(
                self.stop_timeout,
                self._force_kill,
                args=(self._process,),
            )
            self._kill_timer.daemon = True
            self._kill_timer.start()

    def _force_kill(self, process: subprocess.Popen) -> None:
        if process.poll() is None:
            self.logger.warning("FFmpeg didn't stop gracefully, force killing")
            process.kill()

    def _watch_process(
        self,
        process: subprocess.Popen,
        output_file: Path,
        on_finished: FinishedCallback,
        on_error: ErrorCallback,
    ) -> None:
        """Wait for ffmpeg to exit and report exactly one outcome"""
        _, stderr = process.communicate()
        error_msg = stderr.decode("utf-8", errors="ignore").strip() if stderr else ""

        with self._lock:
            stop_requested = self._stop_requested
            if self._kill_timer is not None:
                self._kill_timer.cancel()
                self._kill_timer = None
            if self._process is process:
                self._process = None
                self._output_file = None

        has_output = output_file.exists() and output_file.stat().st_size > 0

        if has_output and (stop_requested or process.returncode == 0):
            size_mb = output_file.stat().st_size / (1024 * 1024)
            self.logger.info(f"Recording saved: {output_file} ({size_mb:.1f} MB)")
            self._deliver(on_finished, output_file)
            return

        reason = error_msg or f"FFmpeg exited with code {process.returncode}"
        if not has_output:
            reason = f"No output written ({reason})"
        self.logger.error(f"Recording failed: {reason}")
        self._deliver(on_error, reason)

    def _deliver(self, callback, argument) -> None:
        try:
            callback(argument)
        except Exception as e:
            self.logger.error(f"Error in device callback: {e}", exc_info=True)

    def is_recording(self) -> bool:
        return self._process is not None and self._process.poll() is None

    def get_output_file(self) -> Optional[Path]:
        return self._output_file

    def is_available(self) -> bool:
        """Check if FFmpeg and a camera are available"""
        if not shutil.which("ffmpeg"):
            self.logger.warning("FFmpeg not found in PATH")
            return False

        if not any(validate_camera_device(facing.device) for facing in CameraFacing):
            self.logger.warning("No camera device found")
            return False

        return True

    def cleanup(self) -> None:
        self.logger.info("Cleaning up FFmpeg Capture Device")

        try:
            if self.is_recording():
                self.stop_recording()
            if self._watcher is not None:
                self._watcher.join(timeout=self.stop_timeout + 1.0)
        except Exception as e:
            self.logger.error(f"Error during cleanup: {e}")

        self.logger.info("FFmpeg Capture Device cleanup complete")
