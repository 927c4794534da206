"""
Location Interfaces Package

Exposes abstract interfaces for location components.
"""

from location.interfaces.permission_interface import PermissionGateInterface
from location.interfaces.position_interface import (
    PositionError,
    PositionPermissionDenied,
    PositionProviderInterface,
    PositionTimeout,
    PositionUnavailable,
)

__all__ = [
    "PermissionGateInterface",
    "PositionError",
    "PositionPermissionDenied",
    "PositionProviderInterface",
    "PositionTimeout",
    "PositionUnavailable",
]
