"""
Mock Filesystem Implementation

In-memory filesystem for testing. Simulates file operations without
touching disk, with failure injection per operation.
"""

import logging
import time
from pathlib import Path
from typing import Dict, List, Optional, Set

from storage.interfaces.filesystem_interface import (
    DirEntry,
    FileSystemInterface,
    GalleryUnavailableError,
    StorageError,
)


class MockFileSystem(FileSystemInterface):
    """
    In-memory filesystem.

    Usage:
        fs = MockFileSystem()
        fs.add_file(Path("/tmp/raw.mp4"), b"data", mtime=time.time() - 3600)
        fs.fail_on("copy_file")          # next copies raise StorageError
        fs.fail_on("unlink", Path("/videos/VID_1.mp4"))  # only that path
    """

    def __init__(self, gallery_available: bool = True):
        self.logger = logging.getLogger(__name__)
        self.files: Dict[Path, bytes] = {}
        self.mtimes: Dict[Path, float] = {}
        self.directories: Set[Path] = set()
        self.scanned: List[Path] = []
        self.gallery_available = gallery_available

        # Simulate a partially written destination on copy failure
        self.partial_copy_on_failure = False

        self._failures: Dict[str, Optional[Set[Path]]] = {}
        self.calls: List[tuple] = []

    # -------------------------------------------------------------------------
    # Test helpers
    # -------------------------------------------------------------------------

    def add_file(self, path: Path, content: bytes = b"", mtime: Optional[float] = None) -> None:
        path = Path(path)
        self.directories.add(path.parent)
        self.files[path] = content
        self.mtimes[path] = time.time() if mtime is None else mtime

    def read_file(self, path: Path) -> bytes:
        return self.files[Path(path)]

    def fail_on(self, operation: str, path: Optional[Path] = None) -> None:
        """Make an operation raise (for all paths, or only for the given one)"""
        if path is None:
            self._failures[operation] = None
            return
        targets = self._failures.setdefault(operation, set())
        if targets is not None:
            targets.add(Path(path))

    def clear_failures(self) -> None:
        self._failures.clear()

    def _should_fail(self, operation: str, path: Path) -> bool:
        if operation not in self._failures:
            return False
        targets = self._failures[operation]
        return targets is None or Path(path) in targets

    # -------------------------------------------------------------------------
    # FileSystemInterface
    # -------------------------------------------------------------------------

    def exists(self, path: Path) -> bool:
        path = Path(path)
        return path in self.files or path in self.directories

    def mkdir(self, path: Path) -> None:
        path = Path(path)
        self.calls.append(("mkdir", path))
        if self._should_fail("mkdir", path):
            raise StorageError(f"Simulated mkdir failure: {path}")
        if path in self.files:
            raise StorageError(f"Path exists but is not a directory: {path}")
        self.directories.add(path)

    def copy_file(self, source: Path, destination: Path) -> None:
        source, destination = Path(source), Path(destination)
        self.calls.append(("copy_file", source, destination))
        if source not in self.files:
            raise StorageError(f"Source not found: {source}")
        if destination.parent not in self.directories:
            raise StorageError(f"Directory not found: {destination.parent}")
        if self._should_fail("copy_file", destination):
            if self.partial_copy_on_failure:
                self.files[destination] = self.files[source][: len(self.files[source]) // 2]
                self.mtimes[destination] = time.time()
            raise StorageError(f"Simulated copy failure: {destination}")
        self.files[destination] = self.files[source]
        self.mtimes[destination] = self.mtimes[source]

    def unlink(self, path: Path) -> None:
        path = Path(path)
        self.calls.append(("unlink", path))
        if self._should_fail("unlink", path):
            raise StorageError(f"Simulated delete failure: {path}")
        if path not in self.files:
            raise StorageError(f"File not found: {path}")
        del self.files[path]
        self.mtimes.pop(path, None)

    def read_dir(self, path: Path) -> List[DirEntry]:
        path = Path(path)
        self.calls.append(("read_dir", path))
        if self._should_fail("read_dir", path):
            raise StorageError(f"Simulated listing failure: {path}")
        if path not in self.directories:
            raise StorageError(f"Directory not found: {path}")

        entries = [
            DirEntry(name=f.name, path=f, mtime=self.mtimes[f], is_file=True)
            for f in self.files
            if f.parent == path
        ]
        entries.extend(
            DirEntry(name=d.name, path=d, mtime=time.time(), is_file=False)
            for d in self.directories
            if d.parent == path and d != path
        )
        return sorted(entries, key=lambda e: e.name)

    def scan_file(self, path: Path) -> None:
        path = Path(path)
        self.calls.append(("scan_file", path))
        if not self.gallery_available or self._should_fail("scan_file", path):
            raise GalleryUnavailableError(f"Simulated media index unavailable: {path}")
        self.scanned.append(path)
