"""
Log Push Notifier

Stand-in collaborator for installations without a sync API: waits a
moment (simulated network latency) and logs the push.
"""

import logging
import time

from config.settings import LOG_PUSH_DELAY
from storage.models.asset import Asset
from upload.interfaces.push_interface import PushNotifierInterface


class LogPushNotifier(PushNotifierInterface):
    """Logs "Pushed to API" for every saved asset"""

    def __init__(self, delay: float = LOG_PUSH_DELAY):
        self.logger = logging.getLogger(__name__)
        self.delay = delay

    def push(self, asset: Asset) -> None:
        if self.delay > 0:
            time.sleep(self.delay)
        self.logger.info(f"Pushed to API: {asset.path}")

    def is_available(self) -> bool:
        return True
