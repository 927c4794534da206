"""
Settings Snapshot

Immutable view of the user-mutable settings held in the config store.
Components receive a Settings object at call time instead of reading
the store ad hoc; the capture session refreshes it on mount/resume.
"""

import logging
from dataclasses import dataclass
from typing import Dict, Optional

from config.settings import (
    DEFAULT_AUTO_DELETE_DAYS,
    DEFAULT_LOCATION_ENABLED,
    DEFAULT_RESOLUTION,
    KEY_AUTO_DELETE_DAYS,
    KEY_LOCATION_ENABLED,
    KEY_RESOLUTION,
)
from storage.constants import Resolution
from storage.interfaces.config_store_interface import ConfigStoreInterface

logger = logging.getLogger(__name__)

_TRUE_VALUES = ("true", "1", "yes", "on")
_FALSE_VALUES = ("false", "0", "no", "off")


@dataclass(frozen=True)
class Settings:
    """User settings: resolution, location tagging, retention days"""

    resolution: Resolution = Resolution.parse(DEFAULT_RESOLUTION)
    location_enabled: bool = DEFAULT_LOCATION_ENABLED
    auto_delete_days: int = DEFAULT_AUTO_DELETE_DAYS

    def __post_init__(self):
        if self.auto_delete_days < 0:
            raise ValueError(f"auto_delete_days must be >= 0, got {self.auto_delete_days}")

    @classmethod
    def from_store(cls, store: ConfigStoreInterface) -> "Settings":
        """
        Build a snapshot from the config store.

        Missing keys use defaults. Unparseable values are logged and
        replaced by the default, so a corrupted store never blocks capture.
        """
        values = store.get([KEY_RESOLUTION, KEY_LOCATION_ENABLED, KEY_AUTO_DELETE_DAYS])

        return cls(
            resolution=_parse_resolution(values[KEY_RESOLUTION]),
            location_enabled=_parse_bool(values[KEY_LOCATION_ENABLED]),
            auto_delete_days=_parse_days(values[KEY_AUTO_DELETE_DAYS]),
        )

    def to_store_mapping(self) -> Dict[str, str]:
        """String mapping suitable for ConfigStoreInterface.set()"""
        return {
            KEY_RESOLUTION: self.resolution.value,
            KEY_LOCATION_ENABLED: "true" if self.location_enabled else "false",
            KEY_AUTO_DELETE_DAYS: str(self.auto_delete_days),
        }

    def to_dict(self) -> dict:
        return {
            "resolution": self.resolution.value,
            "location_enabled": self.location_enabled,
            "auto_delete_days": self.auto_delete_days,
        }


def _parse_resolution(value: Optional[str]) -> Resolution:
    if value is None:
        return Resolution.parse(DEFAULT_RESOLUTION)
    try:
        return Resolution.parse(value)
    except ValueError:
        logger.warning(f"Invalid stored resolution {value!r}, using {DEFAULT_RESOLUTION}")
        return Resolution.parse(DEFAULT_RESOLUTION)


def _parse_bool(value: Optional[str]) -> bool:
    if value is None:
        return DEFAULT_LOCATION_ENABLED
    normalized = value.strip().lower()
    if normalized in _TRUE_VALUES:
        return True
    if normalized in _FALSE_VALUES:
        return False
    logger.warning(f"Invalid stored locationEnabled {value!r}, using {DEFAULT_LOCATION_ENABLED}")
    return DEFAULT_LOCATION_ENABLED


def _parse_days(value: Optional[str]) -> int:
    if value is None:
        return DEFAULT_AUTO_DELETE_DAYS
    try:
        days = int(value.strip())
    except ValueError:
        logger.warning(f"Invalid stored autoDeleteDays {value!r}, using {DEFAULT_AUTO_DELETE_DAYS}")
        return DEFAULT_AUTO_DELETE_DAYS
    if days < 0:
        logger.warning(f"Negative autoDeleteDays {days}, using {DEFAULT_AUTO_DELETE_DAYS}")
        return DEFAULT_AUTO_DELETE_DAYS
    return days


def normalize_setting(key: str, value: str) -> str:
    """
    Validate a user-supplied settings value and return its stored form.

    Raises:
        ValueError: If the key is unknown or the value invalid
    """
    if key == KEY_RESOLUTION:
        return Resolution.parse(value).value

    if key == KEY_LOCATION_ENABLED:
        normalized = value.strip().lower()
        if normalized in _TRUE_VALUES:
            return "true"
        if normalized in _FALSE_VALUES:
            return "false"
        raise ValueError(f"{key} must be true or false, got {value!r}")

    if key == KEY_AUTO_DELETE_DAYS:
        try:
            days = int(value.strip())
        except ValueError:
            raise ValueError(f"{key} must be a whole number of days, got {value!r}") from None
        if days < 0:
            raise ValueError(f"{key} must be >= 0, got {days}")
        return str(days)

    raise ValueError(f"Unknown setting: {key}")
