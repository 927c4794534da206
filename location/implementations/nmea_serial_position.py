"""
NMEA Serial Position Provider

Reads position fixes from a GPS receiver that streams NMEA sentences over a
serial port (USB GPS dongles, UART GPS hats).

The port is opened lazily on the first request and kept open; a fix younger
than the request's max_age is answered from cache without touching the port.
Otherwise the OS input buffer is flushed first: between polls it fills with
sentences that may be older than max_age.
"""

import logging
import os
import threading
import time
from datetime import datetime
from pathlib import Path
from typing import Optional

import serial

from config.settings import GPS_BAUDRATE, GPS_SERIAL_PORT
from location.interfaces.position_interface import (
    PositionPermissionDenied,
    PositionProviderInterface,
    PositionTimeout,
    PositionUnavailable,
)
from location.models import Position, PositionRequest
from location.utils.nmea import parse_fix

# Per-readline timeout; the overall deadline comes from the request
READ_TIMEOUT = 0.5


class NmeaSerialPositionProvider(PositionProviderInterface):
    """
    GPS receiver over serial.

    Usage:
        provider = NmeaSerialPositionProvider("/dev/ttyUSB0", 9600)
        position = provider.get_current_position(PositionRequest())
        provider.cleanup()
    """

    def __init__(self, port: str = GPS_SERIAL_PORT, baudrate: int = GPS_BAUDRATE):
        self.logger = logging.getLogger(__name__)
        self.port = port
        self.baudrate = baudrate

        self._serial: Optional[serial.Serial] = None
        self._last_fix: Optional[Position] = None
        self._last_fix_monotonic: Optional[float] = None
        self._lock = threading.Lock()

        self.logger.info(f"NMEA position provider initialized ({port} @ {baudrate})")

    def get_current_position(self, request: PositionRequest) -> Position:
        with self._lock:
            cached = self._cached_fix(request.max_age)
            if cached is not None:
                self.logger.debug("Using cached GPS fix")
                return cached

            port = self._open()
            try:
                port.reset_input_buffer()
            except serial.SerialException as e:
                self._close()
                raise PositionUnavailable(f"GPS read failed: {e}") from e

            deadline = time.monotonic() + request.timeout

            while time.monotonic() < deadline:
                try:
                    raw = port.readline()
                except serial.SerialException as e:
                    self._close()
                    raise PositionUnavailable(f"GPS read failed: {e}") from e

                if not raw:
                    continue

                coords = parse_fix(raw.decode("ascii", errors="ignore"))
                if coords is None:
                    continue

                fix = Position(
                    latitude=coords[0],
                    longitude=coords[1],
                    timestamp=datetime.now(),
                )
                self._last_fix = fix
                self._last_fix_monotonic = time.monotonic()
                return fix

        raise PositionTimeout(f"No GPS fix within {request.timeout:.1f}s")

    def is_available(self) -> bool:
        return Path(self.port).exists()

    def cleanup(self) -> None:
        with self._lock:
            self._close()

    def _cached_fix(self, max_age: float) -> Optional[Position]:
        if self._last_fix is None or self._last_fix_monotonic is None:
            return None
        if time.monotonic() - self._last_fix_monotonic > max_age:
            return None
        return self._last_fix

    def _open(self) -> serial.Serial:
        if self._serial is not None and self._serial.is_open:
            return self._serial

        if not Path(self.port).exists():
            raise PositionUnavailable(f"GPS port not found: {self.port}")

        if not os.access(self.port, os.R_OK):
            raise PositionPermissionDenied(f"No read permission on {self.port}")

        try:
            self._serial = serial.Serial(
                self.port,
                baudrate=self.baudrate,
                timeout=READ_TIMEOUT,
            )
        except serial.SerialException as e:
            raise PositionUnavailable(f"Cannot open GPS port {self.port}: {e}") from e

        self.logger.info(f"Opened GPS port {self.port}")
        return self._serial

    def _close(self) -> None:
        if self._serial is not None:
            try:
                self._serial.close()
            except serial.SerialException as e:
                self.logger.warning(f"Error closing GPS port: {e}")
            self._serial = None
