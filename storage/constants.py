"""
Storage Module Enums

Type definitions for the storage module.
Configuration values live in config/settings.py following the
"ALL config in config/settings.py" principle.
"""

from enum import Enum

from config.settings import BIT_RATE_1080P, BIT_RATE_4K, BIT_RATE_720P

# =============================================================================
# ENUMS
# =============================================================================


class Resolution(Enum):
    """Capture resolution selected in settings"""

    HD_720 = "720p"
    FULL_HD_1080 = "1080p"
    UHD_4K = "4k"
    AUTO = "Auto"  # device default

    @property
    def bit_rate(self) -> int:
        """Target video bit rate (bits per second)"""
        if self is Resolution.HD_720:
            return BIT_RATE_720P
        if self is Resolution.UHD_4K:
            return BIT_RATE_4K
        return BIT_RATE_1080P

    @property
    def frame_size(self) -> tuple[int, int]:
        """(width, height) in pixels; AUTO uses 1080p"""
        if self is Resolution.HD_720:
            return 1280, 720
        if self is Resolution.UHD_4K:
            return 3840, 2160
        return 1920, 1080

    @classmethod
    def parse(cls, value: str) -> "Resolution":
        """Parse a stored value, case-insensitive ("4K" == "4k")"""
        for member in cls:
            if member.value.lower() == value.strip().lower():
                return member
        raise ValueError(f"Unknown resolution: {value!r}")


class FinalizeFailure(Enum):
    """Fatal finalize outcomes (steps 1-3 of the pipeline)"""

    SOURCE_MISSING = "source_missing"
    DIRECTORY_UNAVAILABLE = "directory_unavailable"
    COPY_FAILED = "copy_failed"


class FinalizeStep(Enum):
    """Non-fatal finalize steps whose failures are reported, not raised"""

    SOURCE_CLEANUP = "source_cleanup"
    GALLERY_REGISTRATION = "gallery_registration"
    METADATA = "metadata"
    PUSH = "push"
