"""
Location Module

Best-effort geolocation tagging for captures.

Architecture mirrors the recording and storage modules:
- interfaces/: Abstract base classes (position provider, permission gate)
- implementations/: GPS over serial, fixed coordinates, mocks
- utils/: NMEA parsing
- geocoder.py: reverse geocoding over HTTP
- enricher.py: periodic, cancellable poller producing LocationTags

Public API:
    from location import GeolocationEnricher, LocationTag, create_position_provider
"""

from location.enricher import GeolocationEnricher
from location.factory import LocationFactory, create_position_provider
from location.geocoder import GoogleGeocoder
from location.implementations.permission_gates import (
    MockPermissionGate,
    StaticPermissionGate,
)
from location.interfaces.permission_interface import PermissionGateInterface
from location.interfaces.position_interface import (
    PositionError,
    PositionPermissionDenied,
    PositionProviderInterface,
    PositionTimeout,
    PositionUnavailable,
)
from location.models import (
    LocationTag,
    PollResult,
    Position,
    PositionRequest,
    TimestampOnly,
    format_overlay,
)

__all__ = [
    "GeolocationEnricher",
    "GoogleGeocoder",
    "LocationFactory",
    "LocationTag",
    "MockPermissionGate",
    "PermissionGateInterface",
    "PollResult",
    "Position",
    "PositionError",
    "PositionPermissionDenied",
    "PositionProviderInterface",
    "PositionRequest",
    "PositionTimeout",
    "PositionUnavailable",
    "StaticPermissionGate",
    "TimestampOnly",
    "create_position_provider",
    "format_overlay",
]
