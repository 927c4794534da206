"""
Location Factory

Factory pattern for creating position providers.
Automatically selects a GPS receiver or fixed coordinates. Without either,
auto mode yields a provider that never has a fix; only mock mode
produces invented coordinates.
"""

import logging
from typing import Literal

from config.settings import (
    FIXED_LATITUDE,
    FIXED_LONGITUDE,
    GPS_BAUDRATE,
    GPS_SERIAL_PORT,
)
from location.implementations.fixed_position import FixedPositionProvider
from location.implementations.mock_position import MockPositionProvider
from location.implementations.no_position import NoPositionProvider
from location.implementations.nmea_serial_position import NmeaSerialPositionProvider
from location.interfaces.position_interface import PositionProviderInterface

# Type alias for better type hints
PositionMode = Literal["auto", "serial", "fixed", "mock"]


class LocationFactory:
    """
    Factory for creating position providers.

    Usage:
        # Auto-detect (GPS if present, then fixed coordinates, else no fix)
        provider = LocationFactory.create_provider()

        # Force mock mode (useful for testing)
        provider = LocationFactory.create_provider(mode="mock")
    """

    _logger = logging.getLogger(__name__)

    @classmethod
    def create_provider(cls, mode: PositionMode = "auto") -> PositionProviderInterface:
        """
        Create a position provider.

        Raises:
            RuntimeError: If a forced mode is not available
        """
        if mode == "mock":
            cls._logger.info("Creating Mock Position Provider (forced)")
            return MockPositionProvider()

        if mode == "serial":
            provider = NmeaSerialPositionProvider(GPS_SERIAL_PORT, GPS_BAUDRATE)
            if not provider.is_available():
                raise RuntimeError(f"GPS port not available: {GPS_SERIAL_PORT}")
            return provider

        if mode == "fixed":
            fixed = cls._fixed_from_settings()
            if fixed is None:
                raise RuntimeError("FIXED_LATITUDE/FIXED_LONGITUDE not configured")
            return fixed

        # mode == "auto"
        provider = NmeaSerialPositionProvider(GPS_SERIAL_PORT, GPS_BAUDRATE)
        if provider.is_available():
            cls._logger.info(f"Creating GPS Position Provider ({GPS_SERIAL_PORT})")
            return provider

        fixed = cls._fixed_from_settings()
        if fixed is not None:
            cls._logger.info("Creating Fixed Position Provider")
            return fixed

        cls._logger.warning(
            "No GPS receiver or fixed position, location tags will be timestamp only",
        )
        return NoPositionProvider()

    @classmethod
    def _fixed_from_settings(cls):
        if not FIXED_LATITUDE or not FIXED_LONGITUDE:
            return None
        try:
            return FixedPositionProvider(float(FIXED_LATITUDE), float(FIXED_LONGITUDE))
        except ValueError as e:
            cls._logger.error(f"Invalid fixed coordinates: {e}")
            return None


def create_position_provider(force_mock: bool = False) -> PositionProviderInterface:
    """Quick provider creation with auto-detection"""
    return LocationFactory.create_provider(mode="mock" if force_mock else "auto")
