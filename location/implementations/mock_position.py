"""
Mock Position Provider

Simulated position source for testing without a GPS receiver.
Fixes and failures are scripted by the test.
"""

import logging
from datetime import datetime
from typing import List, Optional, Union

from location.interfaces.position_interface import (
    PositionError,
    PositionProviderInterface,
)
from location.models import Position, PositionRequest


class MockPositionProvider(PositionProviderInterface):
    """
    Mock position provider.

    Usage:
        provider = MockPositionProvider(latitude=48.8584, longitude=2.2945)
        provider.fail_with(PositionTimeout("no fix"))  # next call raises
        provider.queue(Position(1.0, 2.0))             # then this fix
    """

    def __init__(self, latitude: float = 48.858400, longitude: float = 2.294500):
        self.logger = logging.getLogger(__name__)
        self.latitude = latitude
        self.longitude = longitude

        # Scripted responses consumed in order before the default position
        self._script: List[Union[Position, PositionError]] = []
        self._persistent_error: Optional[PositionError] = None

        # Test tracking
        self.requests: List[PositionRequest] = []

    def queue(self, outcome: Union[Position, PositionError]) -> None:
        """Queue a one-shot fix or error"""
        self._script.append(outcome)

    def fail_with(self, error: PositionError) -> None:
        """Queue a one-shot error"""
        self._script.append(error)

    def fail_always(self, error: Optional[PositionError]) -> None:
        """Fail every request with error (None = stop failing)"""
        self._persistent_error = error

    def set_position(self, latitude: float, longitude: float) -> None:
        self.latitude = latitude
        self.longitude = longitude

    def get_current_position(self, request: PositionRequest) -> Position:
        self.requests.append(request)

        if self._script:
            outcome = self._script.pop(0)
            if isinstance(outcome, PositionError):
                self.logger.debug(f"[MOCK] Scripted position error: {outcome}")
                raise outcome
            return outcome

        if self._persistent_error is not None:
            raise self._persistent_error

        return Position(
            latitude=self.latitude,
            longitude=self.longitude,
            timestamp=datetime.now(),
        )

    def is_available(self) -> bool:
        return True
