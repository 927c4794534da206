"""
Location Implementations Package

Exposes concrete position providers and permission gates.
"""

from location.implementations.fixed_position import FixedPositionProvider
from location.implementations.mock_position import MockPositionProvider
from location.implementations.nmea_serial_position import NmeaSerialPositionProvider
from location.implementations.no_position import NoPositionProvider
from location.implementations.permission_gates import (
    MockPermissionGate,
    StaticPermissionGate,
)

__all__ = [
    "FixedPositionProvider",
    "MockPermissionGate",
    "MockPositionProvider",
    "NmeaSerialPositionProvider",
    "NoPositionProvider",
    "StaticPermissionGate",
]
