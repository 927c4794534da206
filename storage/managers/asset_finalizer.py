"""
Asset Finalizer

Turns a transient capture output into a durable asset in the canonical
asset directory.

Pipeline:
1. Verify the raw file exists            -> SourceMissingError
2. Ensure the asset directory exists     -> DirectoryUnavailableError
3. Copy to <asset_dir>/VID_<ms>.mp4      -> CopyFailedError
4. Delete the raw source                 (soft)
5. Register with the gallery             (soft)
6. Persist the metadata record           (soft)
7. Notify the push collaborator          (soft, not awaited)

Steps 1, 2, 3 and 6 run in order on the calling thread. Steps 4, 5 and 7
run on a small thread pool once the copy succeeded; 4 and 5 are awaited
because their outcome is recorded on the Asset.
"""

import logging
from concurrent.futures import Future, ThreadPoolExecutor
from dataclasses import replace
from datetime import datetime
from pathlib import Path
from typing import TYPE_CHECKING, Callable, Optional

from config.settings import ASSET_DIR
from core.errors import CaptureLifecycleError
from location.models import LocationTag
from storage.constants import FinalizeFailure, FinalizeStep
from storage.interfaces.filesystem_interface import FileSystemInterface, StorageError
from storage.managers.metadata_manager import MetadataManager
from storage.models.asset import Asset
from storage.settings import Settings
from storage.utils.path_utils import AssetIdGenerator, asset_filename, asset_id_for

if TYPE_CHECKING:
    from upload.interfaces.push_interface import PushNotifierInterface

SoftFailureCallback = Callable[[FinalizeStep, Exception], None]


class FinalizeError(CaptureLifecycleError):
    """Fatal finalize failure; no asset was produced"""

    reason: FinalizeFailure

    def __init__(self, message: str, raw_path: Optional[Path] = None):
        super().__init__(message)
        self.raw_path = raw_path


class SourceMissingError(FinalizeError):
    """Raw capture file does not exist"""

    reason = FinalizeFailure.SOURCE_MISSING


class DirectoryUnavailableError(FinalizeError):
    """Asset directory could not be created"""

    reason = FinalizeFailure.DIRECTORY_UNAVAILABLE


class CopyFailedError(FinalizeError):
    """Copy into the asset directory failed"""

    reason = FinalizeFailure.COPY_FAILED


class AssetFinalizer:
    """
    Durable-commit pipeline for finished recordings.

    Usage:
        finalizer = AssetFinalizer(LocalFileSystem(), MetadataManager(store))
        asset = finalizer.finalize(raw_path, settings, location_tag=tag)
        if not asset.gallery_registered:
            print("Saved to app only")
    """

    MAX_WORKERS = 3

    def __init__(
        self,
        filesystem: FileSystemInterface,
        metadata_manager: MetadataManager,
        push_notifier: Optional["PushNotifierInterface"] = None,
        asset_dir: Optional[Path] = None,
        id_generator: Optional[AssetIdGenerator] = None,
        on_soft_failure: Optional[SoftFailureCallback] = None,
    ):
        """
        Initialize finalizer.

        Args:
            filesystem: Filesystem operations
            metadata_manager: Writes metadata records
            push_notifier: Optional push/sync collaborator
            asset_dir: Canonical asset directory (None = ASSET_DIR)
            id_generator: Asset id source (None = timestamp generator
                that skips filenames already present in asset_dir)
            on_soft_failure: Called with (step, error) for non-fatal failures
        """
        self.logger = logging.getLogger(__name__)
        self.filesystem = filesystem
        self.metadata_manager = metadata_manager
        self.push_notifier = push_notifier
        self.asset_dir = Path(asset_dir) if asset_dir else ASSET_DIR
        self.id_generator = id_generator or AssetIdGenerator(
            exists=lambda filename: self.filesystem.exists(self.asset_dir / filename),
        )
        self.on_soft_failure = on_soft_failure

        self._executor = ThreadPoolExecutor(
            max_workers=self.MAX_WORKERS,
            thread_name_prefix="AssetFinalizer",
        )

        self.logger.info(f"Asset finalizer initialized (dir: {self.asset_dir})")

    def finalize(
        self,
        raw_path: Path,
        settings: Settings,
        location_tag: Optional[LocationTag] = None,
    ) -> Asset:
        """
        Make a raw capture durable.

        Args:
            raw_path: Transient capture output
            settings: Settings snapshot at finish time
            location_tag: Latest tag, None when tagging is off or unresolved

        Returns:
            Asset in the canonical asset directory

        Raises:
            SourceMissingError: raw_path does not exist
            DirectoryUnavailableError: asset directory cannot be created
            CopyFailedError: copy failed (partial destination removed)
        """
        raw_path = Path(raw_path)

        # Step 1: existence check
        if not self.filesystem.exists(raw_path):
            self.logger.error(f"Raw capture not found: {raw_path}")
            raise SourceMissingError(f"Raw capture not found: {raw_path}", raw_path)

        # Step 2: ensure directory
        if not self.filesystem.exists(self.asset_dir):
            try:
                self.filesystem.mkdir(self.asset_dir)
                self.logger.info(f"Created asset directory: {self.asset_dir}")
            except StorageError as e:
                self.logger.error(f"Asset directory unavailable: {e}")
                raise DirectoryUnavailableError(
                    f"Asset directory unavailable: {self.asset_dir}", raw_path,
                ) from e

        # Step 3: copy
        epoch_ms = self.id_generator.next_millis()
        asset_id = asset_id_for(epoch_ms)
        destination = self.asset_dir / asset_filename(asset_id)

        try:
            self.filesystem.copy_file(raw_path, destination)
        except StorageError as e:
            self.logger.error(f"Copy failed for {raw_path.name}: {e}")
            self._remove_partial(destination)
            raise CopyFailedError(f"Copy failed: {e}", raw_path) from e

        self.logger.info(f"Copied {raw_path.name} -> {destination}")

        # Steps 4 and 5 run concurrently with step 6
        cleanup_future = self._executor.submit(self._remove_source, raw_path)
        gallery_future = self._executor.submit(self._register_gallery, destination)

        asset = Asset(
            id=asset_id,
            path=destination,
            resolution=settings.resolution,
            created_at=datetime.fromtimestamp(epoch_ms / 1000),
            location=location_tag,
        )

        # Step 6: metadata record (after the copy, never before)
        try:
            self.metadata_manager.save(asset)
        except Exception as e:
            self._report_soft_failure(FinalizeStep.METADATA, e)

        asset = replace(
            asset,
            source_removed=self._await_step(cleanup_future),
            gallery_registered=self._await_step(gallery_future),
        )

        # Step 7: fire-and-forget
        if self.push_notifier is not None:
            self._executor.submit(self._push, asset)

        self.logger.info(
            f"Finalized {asset.id} "
            f"(gallery: {asset.gallery_registered}, "
            f"location: {'yes' if asset.location else 'no'})",
        )
        return asset

    def _remove_partial(self, destination: Path) -> None:
        if not self.filesystem.exists(destination):
            return
        try:
            self.filesystem.unlink(destination)
            self.logger.info(f"Removed partial copy: {destination.name}")
        except StorageError as e:
            self.logger.warning(f"Could not remove partial copy {destination}: {e}")

    def _remove_source(self, raw_path: Path) -> bool:
        try:
            self.filesystem.unlink(raw_path)
            return True
        except Exception as e:
            self._report_soft_failure(FinalizeStep.SOURCE_CLEANUP, e)
            return False

    def _register_gallery(self, destination: Path) -> bool:
        try:
            self.filesystem.scan_file(destination)
            return True
        except Exception as e:
            self._report_soft_failure(FinalizeStep.GALLERY_REGISTRATION, e)
            return False

    def _push(self, asset: Asset) -> None:
        try:
            self.push_notifier.push(asset)
        except Exception as e:
            self._report_soft_failure(FinalizeStep.PUSH, e)

    def _await_step(self, future: Future) -> bool:
        # Step functions report their own failures and return False
        return bool(future.result())

    def _report_soft_failure(self, step: FinalizeStep, error: Exception) -> None:
        self.logger.warning(f"Finalize step '{step.value}' failed: {error}")
        if self.on_soft_failure:
            try:
                self.on_soft_failure(step, error)
            except Exception as e:
                self.logger.error(f"Error in soft failure callback: {e}")

    def shutdown(self, wait: bool = True) -> None:
        """Stop the worker pool (waits for pending pushes by default)"""
        self._executor.shutdown(wait=wait)
        self.logger.debug("Asset finalizer shut down")
