"""
Retention Sweeper

Deletes assets older than the configured number of days.
Single responsibility: age-based cleanup only.

Age is judged on file mtime alone; gallery registration and location
metadata never influence what gets deleted.
"""

import logging
import threading
import time
from pathlib import Path
from typing import Callable, Optional

from config.settings import ASSET_DIR, SECONDS_PER_DAY, SWEEP_INTERVAL_SECONDS
from storage.interfaces.filesystem_interface import FileSystemInterface, StorageError
from storage.models.asset import SweepReport
from storage.settings import Settings
from storage.utils.path_utils import asset_id_from_filename, is_asset_file


class RetentionSweeper:
    """
    Age-based asset eviction.

    Usage:
        sweeper = RetentionSweeper(LocalFileSystem())
        report = sweeper.sweep(ASSET_DIR, max_age_days=7)
        print(f"Deleted {len(report.deleted)} videos")
    """

    def __init__(self, filesystem: FileSystemInterface):
        self.logger = logging.getLogger(__name__)
        self.filesystem = filesystem

    def is_expired(self, mtime: float, max_age_days: int, now: float) -> bool:
        """Strictly older than the threshold; exactly at the threshold is kept"""
        return (now - mtime) > max_age_days * SECONDS_PER_DAY

    def sweep(
        self,
        directory: Path,
        max_age_days: int,
        now: Optional[float] = None,
    ) -> SweepReport:
        """
        Delete expired assets in directory.

        Args:
            directory: Asset directory
            max_age_days: Threshold in days (<= 0 disables the sweep)
            now: Reference time, seconds since epoch (None = time.time())

        Returns:
            SweepReport with deleted and failed asset ids
        """
        report = SweepReport()

        if max_age_days <= 0:
            self.logger.debug("Auto-delete disabled, skipping sweep")
            return report

        now = time.time() if now is None else now
        directory = Path(directory)

        if not self.filesystem.exists(directory):
            self.logger.info(f"Asset directory does not exist yet: {directory}")
            return report

        try:
            entries = self.filesystem.read_dir(directory)
        except StorageError as e:
            self.logger.warning(f"Cannot list {directory}, sweep skipped: {e}")
            return report

        candidates = [
            entry for entry in entries
            if entry.is_file
            and is_asset_file(entry.name)
            and self.is_expired(entry.mtime, max_age_days, now)
        ]

        if not candidates:
            self.logger.info(f"Sweep: nothing older than {max_age_days} days")
            return report

        self.logger.info(f"Sweep: {len(candidates)} video(s) older than {max_age_days} days")

        for entry in candidates:
            asset_id = asset_id_from_filename(entry.name)
            try:
                self.filesystem.unlink(entry.path)
                report.deleted.append(asset_id)
                age_days = (now - entry.mtime) / SECONDS_PER_DAY
                self.logger.info(f"Deleted old video: {entry.name} ({age_days:.1f} days)")
            except StorageError as e:
                report.failed.append(asset_id)
                self.logger.warning(f"Failed to delete {entry.name}: {e}")

        self.logger.info(f"Sweep complete: {report}")
        return report


class RetentionScheduler:
    """
    Re-runs the sweep on a fixed interval in a background thread.

    Settings are re-read through settings_provider before every sweep, so
    a changed autoDeleteDays applies without a restart.

    Usage:
        scheduler = RetentionScheduler(
            sweeper,
            settings_provider=lambda: Settings.from_store(store),
            interval=3600,
        )
        scheduler.start()
        ...
        scheduler.stop()
    """

    def __init__(
        self,
        sweeper: RetentionSweeper,
        settings_provider: Callable[[], Settings],
        directory: Optional[Path] = None,
        interval: float = SWEEP_INTERVAL_SECONDS,
        on_sweep: Optional[Callable[[SweepReport], None]] = None,
    ):
        """
        Args:
            sweeper: Sweeper to run
            settings_provider: Returns a Settings snapshot (auto_delete_days)
            directory: Asset directory (None = ASSET_DIR)
            interval: Seconds between sweeps (<= 0 = never start)
            on_sweep: Called with each report
        """
        self.logger = logging.getLogger(__name__)
        self.sweeper = sweeper
        self.settings_provider = settings_provider
        self.directory = Path(directory) if directory else ASSET_DIR
        self.interval = interval
        self.on_sweep = on_sweep

        self._stop_event = threading.Event()
        self._thread: Optional[threading.Thread] = None

    @property
    def is_running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def start(self) -> bool:
        """
        Start periodic sweeping.

        Returns:
            True if the scheduler thread is running
        """
        if self.interval <= 0:
            self.logger.info("Periodic sweep disabled (startup sweep only)")
            return False

        if self.is_running:
            return True

        self._stop_event.clear()
        self._thread = threading.Thread(
            target=self._run_loop,
            daemon=True,
            name="RetentionScheduler",
        )
        self._thread.start()
        self.logger.info(f"Periodic sweep every {self.interval}s")
        return True

    def stop(self, timeout: float = 5.0) -> None:
        self._stop_event.set()
        if self._thread is not None:
            self._thread.join(timeout=timeout)
            self._thread = None

    def _run_loop(self) -> None:
        # Startup sweep already ran; first periodic sweep waits one interval
        while not self._stop_event.wait(self.interval):
            self.run_once()

    def run_once(self) -> SweepReport:
        try:
            settings = self.settings_provider()
            report = self.sweeper.sweep(self.directory, settings.auto_delete_days)
        except Exception as e:
            self.logger.error(f"Periodic sweep failed: {e}", exc_info=True)
            return SweepReport()

        if self.on_sweep:
            try:
                self.on_sweep(report)
            except Exception as e:
                self.logger.error(f"Error in sweep callback: {e}")
        return report
