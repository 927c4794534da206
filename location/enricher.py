"""
Geolocation Enricher

Polls the current position on a fixed interval and resolves it to an
address, producing LocationTag results for the capture session.

Guarantees:
- poll() never raises: the worst case is a TimestampOnly result
- The capture session reads latest_tag without waiting for a fresh poll
- The polling loop is bound to session lifetime: start() on mount, stop()
  on unmount, and it also stops when location tagging is disabled

Failure handling:
- Position permission denied -> TimestampOnly + permission revoked signal
- Position timeout/unavailable -> TimestampOnly
- Geocoding failure -> LocationTag with address=None (coordinates only)
"""

import logging
import threading
from datetime import datetime
from typing import Callable, Optional

from config.settings import LOCATION_POLL_INTERVAL
from location.geocoder import GoogleGeocoder
from location.interfaces.permission_interface import PermissionGateInterface
from location.interfaces.position_interface import (
    PositionError,
    PositionPermissionDenied,
    PositionProviderInterface,
)
from location.models import LocationTag, PollResult, PositionRequest, TimestampOnly


class GeolocationEnricher:
    """
    Periodic, cancellable location poller.

    Usage:
        enricher = GeolocationEnricher(provider, permission_gate, geocoder)
        enricher.on_update = lambda result: print(format_overlay(result))
        enricher.on_permission_revoked = session.handle_permission_revoked

        enricher.start()          # polls now, then every 15s
        tag = enricher.latest_tag # last successful LocationTag or None
        enricher.stop()           # always call on teardown
    """

    def __init__(
        self,
        provider: PositionProviderInterface,
        permission_gate: PermissionGateInterface,
        geocoder: Optional[GoogleGeocoder] = None,
        interval: float = LOCATION_POLL_INTERVAL,
        request: Optional[PositionRequest] = None,
        enabled: bool = True,
    ):
        """
        Args:
            provider: Position source
            permission_gate: Location permission state
            geocoder: Reverse geocoder (None = coordinates only)
            interval: Seconds between polls
            request: Position request options
            enabled: Whether location tagging is enabled
        """
        self.logger = logging.getLogger(__name__)
        self.provider = provider
        self.permission_gate = permission_gate
        self.geocoder = geocoder
        self.interval = interval
        self.request = request or PositionRequest()
        self.enabled = enabled

        self._latest_tag: Optional[LocationTag] = None
        self._poll_count = 0

        # Polling loop
        self._active = False  # start() called and not stopped
        self._poll_thread: Optional[threading.Thread] = None
        self._stop_event = threading.Event()
        self._lifecycle_lock = threading.Lock()

        # Callbacks
        self.on_update: Optional[Callable[[PollResult], None]] = None
        self.on_permission_revoked: Optional[Callable[[], None]] = None

        self.logger.info(
            f"Geolocation enricher initialized "
            f"(enabled: {enabled}, interval: {interval}s)",
        )

    # =========================================================================
    # POLLING
    # =========================================================================

    @property
    def latest_tag(self) -> Optional[LocationTag]:
        """Last successful LocationTag (never blocks)"""
        return self._latest_tag

    @property
    def is_polling(self) -> bool:
        return self._poll_thread is not None and self._poll_thread.is_alive()

    def poll(self) -> PollResult:
        """
        Take one location reading.

        Returns:
            LocationTag (address may be None) or TimestampOnly. Never raises.
        """
        now = datetime.now()
        self._poll_count += 1

        try:
            if not self.enabled or not self.permission_gate.is_granted():
                result: PollResult = TimestampOnly(resolved_at=now)
            else:
                result = self._poll_position(now)
        except Exception as e:
            self.logger.error(f"Unexpected error during location poll: {e}", exc_info=True)
            result = TimestampOnly(resolved_at=now)

        self._notify_update(result)
        return result

    def _poll_position(self, now: datetime) -> PollResult:
        try:
            position = self.provider.get_current_position(self.request)
        except PositionPermissionDenied as e:
            self.logger.warning(f"Location permission denied: {e}")
            self._handle_permission_revoked()
            return TimestampOnly(resolved_at=now)
        except PositionError as e:
            self.logger.warning(f"Position unavailable: {e}")
            return TimestampOnly(resolved_at=now)

        address = None
        if self.geocoder is not None:
            try:
                address = self.geocoder.reverse(position.latitude, position.longitude)
            except Exception as e:
                self.logger.warning(f"Geocoder error, using coordinates: {e}")

        tag = LocationTag(
            latitude=position.latitude,
            longitude=position.longitude,
            address=address,
            resolved_at=now,
        )
        self._latest_tag = tag
        self.logger.debug(
            f"Location tag: {tag.latitude:.6f},{tag.longitude:.6f} "
            f"(address: {'yes' if address else 'no'})",
        )
        return tag

    # =========================================================================
    # LIFECYCLE
    # =========================================================================

    def start(self) -> None:
        """Start periodic polling (no-op if already running)"""
        with self._lifecycle_lock:
            self._active = True
            if self.enabled:
                self._start_loop()

    def stop(self) -> None:
        """Stop periodic polling (safe to call when not running)"""
        with self._lifecycle_lock:
            self._active = False
            self._stop_loop()

    def configure(self, enabled: bool) -> None:
        """
        Apply the location tagging setting.

        Disabling stops polling and forgets the last tag; re-enabling
        resumes polling if start() was called.
        """
        with self._lifecycle_lock:
            if enabled == self.enabled:
                return

            self.enabled = enabled
            self.logger.info(f"Location tagging {'enabled' if enabled else 'disabled'}")

            if not enabled:
                self._stop_loop()
                self._latest_tag = None
            elif self._active:
                self._start_loop()

    def _start_loop(self) -> None:
        if self.is_polling:
            return

        self._stop_event.clear()
        self._poll_thread = threading.Thread(
            target=self._poll_worker,
            daemon=True,
            name="LocationPoller",
        )
        self._poll_thread.start()
        self.logger.debug("Location polling started")

    def _stop_loop(self) -> None:
        if self._poll_thread is None:
            return

        self._stop_event.set()
        if self._poll_thread is not threading.current_thread():
            self._poll_thread.join(timeout=self.request.timeout + 2.0)
        self._poll_thread = None
        self.logger.debug("Location polling stopped")

    def _poll_worker(self) -> None:
        """Poll immediately, then every interval until stopped"""
        while not self._stop_event.is_set():
            self.poll()
            if self._stop_event.wait(self.interval):
                break

    # =========================================================================
    # CALLBACK TRIGGERS
    # =========================================================================

    def _handle_permission_revoked(self) -> None:
        try:
            self.permission_gate.revoke()
        except Exception as e:
            self.logger.error(f"Error revoking permission: {e}")

        if self.on_permission_revoked:
            try:
                self.on_permission_revoked()
            except Exception as e:
                self.logger.error(f"Error in permission revoked callback: {e}")

    def _notify_update(self, result: PollResult) -> None:
        if self.on_update:
            try:
                self.on_update(result)
            except Exception as e:
                self.logger.error(f"Error in location update callback: {e}")

    # =========================================================================
    # STATUS
    # =========================================================================

    def get_status(self) -> dict:
        tag = self._latest_tag
        return {
            "enabled": self.enabled,
            "polling": self.is_polling,
            "permission_granted": self.permission_gate.is_granted(),
            "poll_count": self._poll_count,
            "latest_tag": tag.to_dict() if tag else None,
        }

    def cleanup(self) -> None:
        """Stop polling and release the provider"""
        self.stop()
        self.provider.cleanup()
