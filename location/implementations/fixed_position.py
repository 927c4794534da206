"""
Fixed Position Provider

Static coordinates for installations without a GPS receiver (a camera
mounted at a known site).
"""

import logging
from datetime import datetime

from location.interfaces.position_interface import PositionProviderInterface
from location.models import Position, PositionRequest


class FixedPositionProvider(PositionProviderInterface):
    """Always answers with the configured coordinates"""

    def __init__(self, latitude: float, longitude: float):
        if not -90.0 <= latitude <= 90.0:
            raise ValueError(f"Latitude out of range: {latitude}")
        if not -180.0 <= longitude <= 180.0:
            raise ValueError(f"Longitude out of range: {longitude}")

        self.logger = logging.getLogger(__name__)
        self.latitude = latitude
        self.longitude = longitude

        self.logger.info(f"Fixed position provider at {latitude:.6f}, {longitude:.6f}")

    def get_current_position(self, request: PositionRequest) -> Position:
        return Position(
            latitude=self.latitude,
            longitude=self.longitude,
            timestamp=datetime.now(),
        )

    def is_available(self) -> bool:
        return True
