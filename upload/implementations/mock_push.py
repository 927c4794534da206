"""
Mock Push Notifier Implementation

Records pushes for testing without a sync API.
"""

import logging
import threading
from typing import List, Optional

from storage.models.asset import Asset
from upload.interfaces.push_interface import PushError, PushNotifierInterface


class MockPushNotifier(PushNotifierInterface):
    """
    Mock push notifier for testing.

    Usage:
        notifier = MockPushNotifier()
        notifier.fail_with("Simulated outage")  # every push raises PushError
        notifier.wait_for_pushes(1)             # block until one push arrived
    """

    def __init__(self):
        self.logger = logging.getLogger(__name__)
        self.pushed: List[Asset] = []
        self.attempts = 0
        self._error: Optional[str] = None
        self._condition = threading.Condition()

    def fail_with(self, message: Optional[str] = "Simulated push failure") -> None:
        """Make pushes fail (None = succeed again)"""
        self._error = message

    def push(self, asset: Asset) -> None:
        with self._condition:
            self.attempts += 1
            self._condition.notify_all()
            if self._error:
                self.logger.info(f"[MOCK] Push failed: {asset.id}")
                raise PushError(self._error)
            self.pushed.append(asset)
        self.logger.info(f"[MOCK] Pushed: {asset.id}")

    def wait_for_pushes(self, count: int, timeout: float = 2.0) -> bool:
        """Wait until count push attempts were made"""
        with self._condition:
            return self._condition.wait_for(lambda: self.attempts >= count, timeout=timeout)

    def is_available(self) -> bool:
        return True
