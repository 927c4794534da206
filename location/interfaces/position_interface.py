"""
Position Provider Interface

Abstract interface for anything that can answer "where are we right now?".
The enricher depends on this abstraction, not on a GPS receiver directly.
"""

from abc import ABC, abstractmethod

from core.errors import CaptureLifecycleError
from location.models import Position, PositionRequest


class PositionProviderInterface(ABC):
    """
    Abstract base class for position providers.

    Implementations: serial NMEA GPS receiver, fixed coordinates, mock.
    """

    @abstractmethod
    def get_current_position(self, request: PositionRequest) -> Position:
        """
        Get the current position.

        Blocks for at most request.timeout seconds. A fix younger than
        request.max_age seconds may be returned without waiting.

        Args:
            request: Accuracy/timeout/max-age options

        Returns:
            Position fix

        Raises:
            PositionPermissionDenied: Access to the sensor was refused
            PositionTimeout: No fix within request.timeout
            PositionUnavailable: Sensor missing or broken
        """
        pass

    @abstractmethod
    def is_available(self) -> bool:
        """Check if the provider can produce positions at all"""
        pass

    def cleanup(self) -> None:
        """Release sensor resources. Should never raise."""
        pass


class PositionError(CaptureLifecycleError):
    """Base class for position fetch failures (always soft)"""
    pass


class PositionPermissionDenied(PositionError):
    """Location access was refused or revoked"""
    pass


class PositionTimeout(PositionError):
    """No fix arrived within the request timeout"""
    pass


class PositionUnavailable(PositionError):
    """Sensor missing, disconnected or reporting no fix"""
    pass
