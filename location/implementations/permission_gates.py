"""
Permission Gate Implementations

- StaticPermissionGate: headless installs; the operator grants or refuses
  location access in configuration, a "prompt" cannot change the answer
  once revoked by the sensor until re-granted in configuration.
- MockPermissionGate: scripted answers for tests.
"""

import logging
from typing import List

from config.settings import LOCATION_PERMISSION_GRANTED
from location.interfaces.permission_interface import PermissionGateInterface


class StaticPermissionGate(PermissionGateInterface):
    """Permission decided by configuration"""

    def __init__(self, granted: bool = LOCATION_PERMISSION_GRANTED):
        self.logger = logging.getLogger(__name__)
        self._configured = granted
        self._granted = granted

    def is_granted(self) -> bool:
        return self._granted

    def request(self) -> bool:
        # Re-prompt = re-read the configured decision
        self._granted = self._configured
        if not self._granted:
            self.logger.warning(
                "Location permission not granted "
                "(set LOCATION_PERMISSION_GRANTED=true to allow)",
            )
        return self._granted

    def revoke(self) -> None:
        self.logger.warning("Location permission revoked")
        self._granted = False


class MockPermissionGate(PermissionGateInterface):
    """
    Scripted permission gate.

    Usage:
        gate = MockPermissionGate(granted=False, grant_on_request=True)
        gate.request()  # True, and counted in gate.request_count
    """

    def __init__(self, granted: bool = True, grant_on_request: bool = True):
        self._granted = granted
        self.grant_on_request = grant_on_request
        self.request_count = 0
        self.events: List[str] = []

    def is_granted(self) -> bool:
        return self._granted

    def request(self) -> bool:
        self.request_count += 1
        self.events.append("request")
        self._granted = self.grant_on_request
        return self._granted

    def revoke(self) -> None:
        self.events.append("revoke")
        self._granted = False
