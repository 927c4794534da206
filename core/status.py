"""
Status Reporter

Advisory, user-facing status text ("Recording...", "Saved to gallery").
Status is not session state: every message except sticky ones is cleared
automatically after a short delay using a timer, never by polling.
"""

import logging
import threading
from typing import Callable, Optional

from config.settings import STATUS_CLEAR_DELAY

# Status texts shown during a capture
STATUS_RECORDING = "Recording..."
STATUS_PROCESSING = "Processing..."
STATUS_SAVED_GALLERY = "Saved to gallery"
STATUS_SAVED_APP_ONLY = "Saved to app only"
STATUS_SAVE_ERROR = "Error saving video"
STATUS_RECORDING_FAILED = "Recording failed"
STATUS_START_ERROR = "Error"
STATUS_PERMISSION_REQUIRED = "Location permission required"


class StatusReporter:
    """
    Holds the current status text and clears it after a delay.

    Usage:
        status = StatusReporter()
        status.on_change = lambda text: print(text or "(cleared)")
        status.report("Saved to gallery")  # cleared 1.5s later
    """

    def __init__(self, clear_delay: float = STATUS_CLEAR_DELAY):
        self.logger = logging.getLogger(__name__)
        self.clear_delay = clear_delay
        self._text = ""
        self._timer: Optional[threading.Timer] = None
        # Bumped on every report; a timer only clears the report it was started for
        self._generation = 0
        self._lock = threading.Lock()

        # Called with the new text ("" when cleared)
        self.on_change: Optional[Callable[[str], None]] = None

    @property
    def text(self) -> str:
        return self._text

    def report(self, text: str, sticky: bool = False) -> None:
        """
        Show a status message.

        Args:
            text: Message to show
            sticky: If True, the message stays until the next report
        """
        with self._lock:
            self._cancel_timer()
            self._generation += 1
            self._text = text
            if not sticky:
                self._timer = threading.Timer(
                    self.clear_delay,
                    self._clear,
                    args=(self._generation,),
                )
                self._timer.daemon = True
                self._timer.start()

        self.logger.debug(f"Status: {text}")
        self._notify(text)

    def clear(self) -> None:
        """Clear the status immediately"""
        with self._lock:
            self._cancel_timer()
        self._clear()

    def cancel(self) -> None:
        """Cancel any pending auto-clear (teardown)"""
        with self._lock:
            self._cancel_timer()

    def _clear(self, generation: Optional[int] = None) -> None:
        with self._lock:
            # Timer.cancel() cannot stop a callback that already started
            if generation is not None and generation != self._generation:
                return
            self._timer = None
            if not self._text:
                return
            self._text = ""
        self._notify("")

    def _cancel_timer(self) -> None:
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None

    def _notify(self, text: str) -> None:
        if self.on_change:
            try:
                self.on_change(text)
            except Exception as e:
                self.logger.error(f"Error in status change callback: {e}")
