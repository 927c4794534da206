"""
Filesystem Interface

Abstract interface for the file operations used by the asset finalizer
and the retention sweeper. Managers depend on this interface, not on
concrete implementations, so tests can run against an in-memory mock.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from pathlib import Path
from typing import List


@dataclass(frozen=True)
class DirEntry:
    """One entry of a directory listing"""

    name: str
    path: Path
    mtime: float  # seconds since epoch
    is_file: bool = True


class FileSystemInterface(ABC):
    """
    Abstract base class for filesystem operations.

    Every operation that can fail raises StorageError (or a subclass);
    callers decide which failures are fatal.
    """

    @abstractmethod
    def exists(self, path: Path) -> bool:
        """Check whether a file or directory exists"""
        pass

    @abstractmethod
    def mkdir(self, path: Path) -> None:
        """
        Create directory (and parents), no error if it already exists.

        Raises:
            StorageError: If directory cannot be created
        """
        pass

    @abstractmethod
    def copy_file(self, source: Path, destination: Path) -> None:
        """
        Copy file content.

        Raises:
            StorageError: If copy fails (destination may be partial)
        """
        pass

    @abstractmethod
    def unlink(self, path: Path) -> None:
        """
        Delete a file.

        Raises:
            StorageError: If file cannot be deleted
        """
        pass

    @abstractmethod
    def read_dir(self, path: Path) -> List[DirEntry]:
        """
        List directory entries.

        Raises:
            StorageError: If directory cannot be listed
        """
        pass

    @abstractmethod
    def scan_file(self, path: Path) -> None:
        """
        Register a file with the system media index (gallery).

        Raises:
            GalleryUnavailableError: If no media index is reachable
        """
        pass


class StorageError(Exception):
    """Filesystem operation failed"""
    pass


class GalleryUnavailableError(StorageError):
    """Media index could not register the file"""
    pass
