"""
No Position Provider

Used when the installation has neither a GPS receiver nor configured
coordinates. Every request fails with PositionUnavailable, so the enricher
produces timestamp-only results instead of coordinates nobody measured.
"""

from location.interfaces.position_interface import (
    PositionProviderInterface,
    PositionUnavailable,
)
from location.models import Position, PositionRequest


class NoPositionProvider(PositionProviderInterface):
    """Position source that never has a fix"""

    def __init__(self, reason: str = "No GPS receiver or fixed position configured"):
        self.reason = reason

    def get_current_position(self, request: PositionRequest) -> Position:
        raise PositionUnavailable(self.reason)

    def is_available(self) -> bool:
        return False
