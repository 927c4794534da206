"""
Path Utilities

Asset naming helpers: VID_<epoch-millis>.mp4 filenames, id parsing and
a collision-free id generator.
"""

import logging
import re
import threading
import time
from pathlib import Path
from typing import Callable, Optional

from config.settings import ASSET_FILENAME_EXTENSION, ASSET_FILENAME_PREFIX, METADATA_KEY_PREFIX

logger = logging.getLogger(__name__)

_ASSET_ID_PATTERN = re.compile(rf"^{re.escape(ASSET_FILENAME_PREFIX)}(\d+)$")


def asset_id_for(epoch_ms: int) -> str:
    """VID_1696429825123"""
    return f"{ASSET_FILENAME_PREFIX}{epoch_ms}"


def asset_filename(asset_id: str) -> str:
    """VID_1696429825123.mp4"""
    return f"{asset_id}{ASSET_FILENAME_EXTENSION}"


def parse_asset_millis(asset_id: str) -> Optional[int]:
    """
    Extract the epoch-millis part of an asset id.

    Example:
        parse_asset_millis("VID_1696429825123")  # 1696429825123
        parse_asset_millis("holiday")            # None
    """
    match = _ASSET_ID_PATTERN.match(asset_id)
    return int(match.group(1)) if match else None


def asset_id_from_filename(filename: str) -> str:
    """Asset id is the filename without extension"""
    return Path(filename).stem


def is_asset_file(filename: str) -> bool:
    """Retention only ever considers .mp4 files"""
    return filename.lower().endswith(ASSET_FILENAME_EXTENSION)


def metadata_key(epoch_ms: int) -> str:
    """Config store key of an asset's metadata record: video_<epoch-millis>"""
    return f"{METADATA_KEY_PREFIX}{epoch_ms}"


class AssetIdGenerator:
    """
    Issues timestamp-derived asset ids that never repeat.

    Each id uses max(now_ms, last_ms + 1), so two captures finishing in
    the same millisecond get distinct ids. Ids whose file already exists
    in the asset directory are skipped.

    Usage:
        generator = AssetIdGenerator(exists=lambda name: (asset_dir / name).exists())
        asset_id = generator.next_id()  # "VID_1696429825123"
    """

    def __init__(
        self,
        exists: Optional[Callable[[str], bool]] = None,
        clock: Callable[[], float] = time.time,
    ):
        """
        Args:
            exists: Called with a candidate filename, True if taken
            clock: Seconds since epoch (injectable for tests)
        """
        self._exists = exists or (lambda filename: False)
        self._clock = clock
        self._last_ms = 0
        self._lock = threading.Lock()

    def next_millis(self) -> int:
        with self._lock:
            candidate = max(int(self._clock() * 1000), self._last_ms + 1)
            while self._exists(asset_filename(asset_id_for(candidate))):
                logger.debug(f"Asset id {candidate} already taken, skipping")
                candidate += 1
            self._last_ms = candidate
            return candidate

    def next_id(self) -> str:
        return asset_id_for(self.next_millis())
