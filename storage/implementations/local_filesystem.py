"""
Local Filesystem Implementation

Concrete FileSystemInterface over pathlib/shutil. Gallery registration
runs the configured media-index command (e.g. "termux-media-scan {path}").
"""

import logging
import shlex
import shutil
import subprocess
from pathlib import Path
from typing import List, Optional

from config.settings import MEDIA_SCAN_COMMAND, MEDIA_SCAN_TIMEOUT
from storage.interfaces.filesystem_interface import (
    DirEntry,
    FileSystemInterface,
    GalleryUnavailableError,
    StorageError,
)


class LocalFileSystem(FileSystemInterface):
    """
    Real filesystem operations.

    Usage:
        fs = LocalFileSystem()
        fs.mkdir(Path("./videos/CameraApp"))
        fs.copy_file(raw_path, dest_path)
    """

    def __init__(self, media_scan_command: Optional[str] = None):
        """
        Initialize filesystem.

        Args:
            media_scan_command: Command template with a {path} placeholder
                (None = MEDIA_SCAN_COMMAND, "" = no gallery)
        """
        self.logger = logging.getLogger(__name__)
        self.media_scan_command = (
            MEDIA_SCAN_COMMAND if media_scan_command is None else media_scan_command
        )

    def exists(self, path: Path) -> bool:
        return Path(path).exists()

    def mkdir(self, path: Path) -> None:
        path = Path(path)
        if path.exists() and not path.is_dir():
            raise StorageError(f"Path exists but is not a directory: {path}")
        try:
            path.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise StorageError(f"Failed to create directory {path}: {e}") from e

    def copy_file(self, source: Path, destination: Path) -> None:
        try:
            # copy2 preserves timestamps; the asset keeps the capture mtime
            shutil.copy2(str(source), str(destination))
        except (OSError, shutil.Error) as e:
            raise StorageError(f"Failed to copy {source} -> {destination}: {e}") from e

    def unlink(self, path: Path) -> None:
        try:
            Path(path).unlink()
        except OSError as e:
            raise StorageError(f"Failed to delete {path}: {e}") from e

    def read_dir(self, path: Path) -> List[DirEntry]:
        path = Path(path)
        entries = []
        try:
            for child in sorted(path.iterdir()):
                try:
                    stat = child.stat()
                except OSError as e:
                    # File vanished between listing and stat
                    self.logger.debug(f"Skipping {child.name}: {e}")
                    continue
                entries.append(
                    DirEntry(
                        name=child.name,
                        path=child,
                        mtime=stat.st_mtime,
                        is_file=child.is_file(),
                    ),
                )
        except OSError as e:
            raise StorageError(f"Failed to list {path}: {e}") from e
        return entries

    def scan_file(self, path: Path) -> None:
        if not self.media_scan_command:
            raise GalleryUnavailableError("No media scan command configured")

        command = [
            part.replace("{path}", str(path))
            for part in shlex.split(self.media_scan_command)
        ]
        if "{path}" not in self.media_scan_command:
            command.append(str(path))

        try:
            result = subprocess.run(
                command,
                capture_output=True,
                text=True,
                timeout=MEDIA_SCAN_TIMEOUT,
            )
        except (OSError, subprocess.TimeoutExpired) as e:
            raise GalleryUnavailableError(f"Media scan failed: {e}") from e

        if result.returncode != 0:
            raise GalleryUnavailableError(
                f"Media scan exited with {result.returncode}: {result.stderr.strip()}",
            )

        self.logger.debug(f"Registered with media index: {path}")
