"""
Capture Service

Main service coordinator for the capture lifecycle.
This is the central place that wires all components together.

Architecture:
- Config store (YAML) holds user settings and metadata records
- Capture session drives device start/stop and finalization
- Geolocation enricher polls position while the session is mounted
- Retention sweep runs at startup (optionally on an interval too)
- Push notifier is told about every saved asset

Commands:
    capture_service.py record --seconds 10 [--mock]
    capture_service.py sweep [--days 7]
    capture_service.py list
    capture_service.py settings [--set resolution=4k --set autoDeleteDays=7]
"""

import argparse
import logging
import logging.handlers
import signal
import sys
import threading
from pathlib import Path
from typing import List, Optional

from config.settings import (
    ASSET_DIR,
    KEY_AUTO_DELETE_DAYS,
    KEY_LOCATION_ENABLED,
    KEY_RESOLUTION,
    LOG_BACKUP_COUNT,
    LOG_DIR,
    LOG_SERVICE_FILE,
)
from core.state_machine import CaptureState
from location import (
    GeolocationEnricher,
    GoogleGeocoder,
    MockPermissionGate,
    StaticPermissionGate,
    create_position_provider,
    format_overlay,
)
from recording import CaptureSession, RecordingFactory
from storage import (
    AssetFinalizer,
    FinalizeStep,
    MetadataManager,
    RetentionScheduler,
    RetentionSweeper,
    Settings,
    StorageError,
    SweepReport,
    create_config_store,
    create_filesystem,
)
from storage.models.asset import Asset
from storage.settings import normalize_setting
from upload import create_push_notifier

# How long record waits for finalization after stopping (seconds)
FINALIZE_WAIT_TIMEOUT = 30.0


class CaptureService:
    """
    Main service coordinator.

    Wires together:
    - Config store, filesystem and metadata records
    - Capture device and capture session
    - Geolocation enricher
    - Asset finalizer, push notifier and retention sweeper

    Usage:
        service = CaptureService()
        service.startup()              # ensure asset dir, run sweep
        asset = service.record(10.0)   # record 10 seconds
        service.shutdown()
    """

    def __init__(
        self,
        mock: bool = False,
        store_path: Optional[Path] = None,
        asset_dir: Optional[Path] = None,
    ):
        """
        Initialize all components and wire callbacks.

        Args:
            mock: Use the mock device, position provider and permission gate
            store_path: Config store file (None = CONFIG_STORE_PATH)
            asset_dir: Canonical asset directory (None = ASSET_DIR)
        """
        self.logger = logging.getLogger(__name__)
        self.logger.info("Initializing Capture Service...")

        self.asset_dir = Path(asset_dir) if asset_dir else ASSET_DIR

        # Storage
        self.store = create_config_store(path=store_path)
        self.filesystem = create_filesystem()
        self.metadata = MetadataManager(self.store)
        self.push_notifier = create_push_notifier()
        self.finalizer = AssetFinalizer(
            self.filesystem,
            self.metadata,
            push_notifier=self.push_notifier,
            asset_dir=self.asset_dir,
            on_soft_failure=self._handle_soft_failure,
        )
        self.sweeper = RetentionSweeper(self.filesystem)
        self.scheduler = RetentionScheduler(
            self.sweeper,
            settings_provider=self.current_settings,
            directory=self.asset_dir,
        )

        # Location
        settings = self.current_settings()
        self.permission_gate = MockPermissionGate() if mock else StaticPermissionGate()
        self.enricher = GeolocationEnricher(
            create_position_provider(force_mock=mock),
            self.permission_gate,
            geocoder=GoogleGeocoder(),
            enabled=settings.location_enabled,
        )

        # Recording
        self.device = RecordingFactory.create_device(mode="mock" if mock else "auto")
        self.session = CaptureSession(
            self.device,
            self.finalizer,
            self.store,
            enricher=self.enricher,
            permission_gate=self.permission_gate,
        )

        self._idle_event = threading.Event()
        self._idle_event.set()
        self._stop_event = threading.Event()

        self._setup_callbacks()

        self.logger.info("Capture Service initialized successfully")

    def _setup_callbacks(self):
        """Wire up component callbacks."""
        self.session.machine.on_state_change = self._handle_state_change
        self.session.status.on_change = self._handle_status_change
        self.session.on_asset_saved = self._handle_asset_saved
        self.session.on_error = self._handle_session_error
        self.enricher.on_update = self._handle_location_update

    def current_settings(self) -> Settings:
        return Settings.from_store(self.store)

    # =========================================================================
    # OPERATIONS
    # =========================================================================

    def startup(self) -> SweepReport:
        """
        Prepare storage: ensure the asset directory and run the retention sweep.

        Returns:
            Report of the startup sweep
        """
        try:
            self.filesystem.mkdir(self.asset_dir)
        except StorageError as e:
            # Not fatal here: finalize retries and reports it per recording
            self.logger.error(f"Asset directory unavailable: {e}")

        report = self.sweep()
        self.scheduler.start()
        return report

    def sweep(self, days: Optional[int] = None) -> SweepReport:
        """Run the retention sweep (days=None uses autoDeleteDays)"""
        if days is None:
            days = self.current_settings().auto_delete_days
        return self.sweeper.sweep(self.asset_dir, days)

    def record(self, seconds: float) -> Optional[Asset]:
        """
        Record for a fixed time (or until SIGINT/SIGTERM) and wait for saving.

        Returns:
            Saved asset, or None if recording or saving failed
        """
        self.session.mount()
        try:
            if not self.session.request_start():
                return None

            self.logger.info(f"Recording for {seconds:.0f}s (Ctrl+C to stop early)")
            self._stop_event.wait(seconds)

            self.session.request_stop()
            if not self._idle_event.wait(FINALIZE_WAIT_TIMEOUT):
                self.logger.error("Timed out waiting for the recording to be saved")
                return None

            return self.session.last_asset
        finally:
            self.session.unmount()

    def request_stop(self) -> None:
        """Interrupt an ongoing record()"""
        self._stop_event.set()

    def list_assets(self) -> List[str]:
        """Describe every metadata record, oldest first"""
        lines = []
        for key, record in self.metadata.list_records():
            exists = self.filesystem.exists(Path(record.path))
            location = record.location.display_text.replace("\n", ", ") if record.location else "-"
            lines.append(
                f"{key}  {record.timestamp:%Y-%m-%d %H:%M:%S}  {record.resolution:>5}  "
                f"{'ok' if exists else 'missing'}  {record.path}  [{location}]",
            )
        return lines

    def update_settings(self, assignments: List[str]) -> Settings:
        """
        Apply key=value assignments to the config store.

        Raises:
            ValueError: If an assignment is malformed or invalid
        """
        updates = {}
        for assignment in assignments:
            key, sep, value = assignment.partition("=")
            if not sep:
                raise ValueError(f"Expected key=value, got {assignment!r}")
            key = key.strip()
            updates[key] = normalize_setting(key, value)

        if updates:
            self.store.set(updates)
            self.logger.info(f"Settings updated: {updates}")

        return self.session.refresh_settings()

    def shutdown(self) -> None:
        """
        Graceful shutdown.

        Stops polling and the scheduler, releases the device and waits
        for pending pushes.
        """
        self.logger.info("Shutting down Capture Service...")

        self.scheduler.stop()
        self.session.unmount()
        self.enricher.cleanup()
        self.device.cleanup()
        self.finalizer.shutdown(wait=True)
        self.push_notifier.close()

        self.logger.info("Capture Service shutdown complete")

    # =========================================================================
    # CALLBACKS
    # =========================================================================

    def _handle_state_change(self, old: CaptureState, new: CaptureState) -> None:
        if new == CaptureState.IDLE:
            self._idle_event.set()
        else:
            self._idle_event.clear()

    def _handle_status_change(self, text: str) -> None:
        if text:
            self.logger.info(f"Status: {text}")

    def _handle_asset_saved(self, asset: Asset) -> None:
        self.logger.info(f"Saved {asset.id} -> {asset.path}")

    def _handle_session_error(self, error: Exception) -> None:
        self.logger.error(f"Capture error: {error}")

    def _handle_soft_failure(self, step: FinalizeStep, error: Exception) -> None:
        self.logger.warning(f"Non-fatal failure in {step.value}: {error}")

    def _handle_location_update(self, result) -> None:
        self.logger.debug(f"Overlay: {format_overlay(result)!r}")


def setup_logging(level: int = logging.INFO):
    """
    Setup logging with rotation.

    Logs to both console and file with rotation:
    - Daily rotation
    - Keep 7 days of logs
    """
    logger = logging.getLogger()
    logger.setLevel(level)

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(level)
    console_handler.setFormatter(logging.Formatter("%(message)s | %(name)s"))
    logger.addHandler(console_handler)

    file_format = logging.Formatter("%(asctime)s %(levelname)s %(message)s | %(name)s")

    log_file = Path(LOG_DIR) / LOG_SERVICE_FILE
    try:
        file_handler = logging.handlers.TimedRotatingFileHandler(
            str(log_file),
            when="midnight",
            interval=1,
            backupCount=LOG_BACKUP_COUNT,
            encoding="utf-8",
        )
    except (PermissionError, FileNotFoundError):
        # Fallback to local logs directory if the system log dir is not writable
        logs_dir = Path("logs")
        logs_dir.mkdir(exist_ok=True)

        fallback_log = logs_dir / "capture-service.log"
        logger.warning(f"Cannot write to {log_file}, using fallback: {fallback_log}")
        logger.info(
            f"To fix: sudo mkdir -p {LOG_DIR} && sudo chown $(whoami) {LOG_DIR}",
        )

        file_handler = logging.handlers.TimedRotatingFileHandler(
            str(fallback_log),
            when="midnight",
            interval=1,
            backupCount=LOG_BACKUP_COUNT,
            encoding="utf-8",
        )

    file_handler.setLevel(level)
    file_handler.setFormatter(file_format)
    logger.addHandler(file_handler)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Capture lifecycle service: record, sweep and inspect videos",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    parser.add_argument("--store", type=Path, help="Config store YAML file")

    subparsers = parser.add_subparsers(dest="command", required=True)

    record = subparsers.add_parser("record", help="Record a video")
    record.add_argument("--seconds", type=float, default=10.0, help="Recording length")
    record.add_argument("--mock", action="store_true", help="Use mock camera and GPS")

    sweep = subparsers.add_parser("sweep", help="Delete videos older than N days")
    sweep.add_argument("--days", type=int, help=f"Override {KEY_AUTO_DELETE_DAYS}")

    subparsers.add_parser("list", help="List saved videos")

    settings = subparsers.add_parser("settings", help="Show or change settings")
    settings.add_argument(
        "--set",
        action="append",
        default=[],
        metavar="KEY=VALUE",
        help=f"Keys: {KEY_RESOLUTION}, {KEY_LOCATION_ENABLED}, {KEY_AUTO_DELETE_DAYS}",
    )

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """
    Main entry point for the service.

    Sets up logging and runs the requested command.
    """
    args = build_parser().parse_args(argv)
    setup_logging(logging.DEBUG if args.verbose else logging.INFO)

    logger = logging.getLogger(__name__)
    logger.info("=" * 60)
    logger.info(f"Capture Service: {args.command}")
    logger.info("=" * 60)

    try:
        service = CaptureService(
            mock=getattr(args, "mock", False),
            store_path=args.store,
        )
    except Exception as e:
        logger.critical(f"Fatal error during initialization: {e}", exc_info=True)
        return 1

    def _signal_handler(signum, _frame):
        logger.info(f"Received signal {signal.Signals(signum).name}, stopping...")
        service.request_stop()

    signal.signal(signal.SIGTERM, _signal_handler)
    signal.signal(signal.SIGINT, _signal_handler)

    try:
        if args.command == "record":
            service.startup()
            asset = service.record(args.seconds)
            if asset is None:
                return 1
            print(f"Saved {asset.path} ({'gallery' if asset.gallery_registered else 'app only'})")

        elif args.command == "sweep":
            report = service.sweep(args.days)
            print(f"Deleted: {len(report.deleted)}  Failed: {len(report.failed)}")
            for asset_id in report.failed:
                print(f"  failed: {asset_id}")

        elif args.command == "list":
            for line in service.list_assets():
                print(line)

        elif args.command == "settings":
            try:
                settings = service.update_settings(args.set)
            except ValueError as e:
                print(f"Error: {e}", file=sys.stderr)
                return 2
            for key, value in settings.to_store_mapping().items():
                print(f"{key} = {value}")

        return 0

    except Exception as e:
        logger.critical(f"Fatal error in main: {e}", exc_info=True)
        return 1

    finally:
        service.shutdown()


if __name__ == "__main__":
    sys.exit(main())
