"""
Location Models

Data classes produced by position providers and the geolocation enricher.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional, Union

from config.settings import POSITION_HIGH_ACCURACY, POSITION_MAX_AGE, POSITION_TIMEOUT

TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S"


def format_timestamp(moment: datetime) -> str:
    """Format a timestamp the way it is stamped on screen: 2025-10-04 14:30:25"""
    return moment.strftime(TIMESTAMP_FORMAT)


def format_coordinates(latitude: float, longitude: float) -> str:
    """Coordinate-only text, six decimals, one value per line"""
    return f"Lat: {latitude:.6f}\nLon: {longitude:.6f}"


@dataclass(frozen=True)
class PositionRequest:
    """Options for a single position fix request"""

    high_accuracy: bool = POSITION_HIGH_ACCURACY
    timeout: float = POSITION_TIMEOUT  # seconds to wait for a fix
    max_age: float = POSITION_MAX_AGE  # seconds a cached fix stays acceptable


@dataclass(frozen=True)
class Position:
    """A raw position fix from a provider"""

    latitude: float
    longitude: float
    timestamp: datetime = field(default_factory=datetime.now)
    accuracy_m: Optional[float] = None


@dataclass(frozen=True)
class LocationTag:
    """
    Best-effort geolocation attached to a capture.

    Immutable once created. When the address could not be resolved the
    coordinates alone still produce usable text.
    """

    latitude: float
    longitude: float
    address: Optional[str] = None
    resolved_at: datetime = field(default_factory=datetime.now)

    @property
    def coordinate_text(self) -> str:
        return format_coordinates(self.latitude, self.longitude)

    @property
    def has_address(self) -> bool:
        return bool(self.address)

    @property
    def display_text(self) -> str:
        """
        Address components one per line, followed by the coordinates.

        Example:
            1600 Amphitheatre Pkwy
            Mountain View
            CA 94043
            USA
            Lat: 37.422000
            Lon: -122.084000
        """
        if not self.address:
            return self.coordinate_text

        lines = [part.strip() for part in self.address.split(",") if part.strip()]
        lines.append(self.coordinate_text)
        return "\n".join(lines)

    def to_dict(self) -> dict:
        """Convert to the dictionary stored in metadata records"""
        return {
            "latitude": self.latitude,
            "longitude": self.longitude,
            "address": self.address,
        }

    @classmethod
    def from_dict(cls, data: dict, resolved_at: Optional[datetime] = None) -> "LocationTag":
        return cls(
            latitude=float(data["latitude"]),
            longitude=float(data["longitude"]),
            address=data.get("address") or None,
            resolved_at=resolved_at or datetime.now(),
        )


@dataclass(frozen=True)
class TimestampOnly:
    """Poll result when no position could be obtained"""

    resolved_at: datetime = field(default_factory=datetime.now)

    @property
    def display_text(self) -> str:
        return format_timestamp(self.resolved_at)


PollResult = Union[LocationTag, TimestampOnly]


def format_overlay(result: PollResult) -> str:
    """
    Live on-screen stamp: timestamp, then location text when available.

    Example:
        2025-10-04 14:30:25
        Lat: 37.422000
        Lon: -122.084000
    """
    stamp = format_timestamp(result.resolved_at)
    if isinstance(result, LocationTag):
        return f"{stamp}\n{result.display_text}"
    return stamp
