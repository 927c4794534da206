"""
Asset Models

Data classes for durable video assets and retention sweep results.
"""

import json
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import List, Optional

from location.models import LocationTag
from storage.constants import Resolution


@dataclass(frozen=True)
class Asset:
    """
    A finalized video in the canonical asset directory.

    Created only by the asset finalizer after a successful copy;
    never references the transient capture path.
    """

    id: str  # VID_<epoch-millis>
    path: Path
    resolution: Resolution
    created_at: datetime
    location: Optional[LocationTag] = None
    gallery_registered: bool = False
    source_removed: bool = False

    @property
    def filename(self) -> str:
        return self.path.name

    @property
    def saved_to_gallery(self) -> bool:
        """Alias used by status reporting ("Saved to gallery" vs "app only")"""
        return self.gallery_registered

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "path": str(self.path),
            "resolution": self.resolution.value,
            "created_at": self.created_at.isoformat(),
            "location": self.location.to_dict() if self.location else None,
            "gallery_registered": self.gallery_registered,
            "source_removed": self.source_removed,
        }


@dataclass
class SweepReport:
    """Outcome of one retention sweep (asset ids)"""

    deleted: List[str] = field(default_factory=list)
    failed: List[str] = field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return not self.deleted and not self.failed

    def __str__(self) -> str:
        return f"SweepReport(deleted={len(self.deleted)}, failed={len(self.failed)})"


@dataclass(frozen=True)
class MetadataRecord:
    """
    Per-asset record persisted in the config store under video_<epoch-millis>.

    Serialized as JSON: {path, location, timestamp, resolution}
    """

    path: str
    timestamp: datetime
    resolution: str
    location: Optional[LocationTag] = None

    @classmethod
    def for_asset(cls, asset: Asset) -> "MetadataRecord":
        return cls(
            path=str(asset.path),
            timestamp=asset.created_at,
            resolution=asset.resolution.value,
            location=asset.location,
        )

    def to_json(self) -> str:
        return json.dumps(
            {
                "path": self.path,
                "location": self.location.to_dict() if self.location else None,
                "timestamp": self.timestamp.isoformat(),
                "resolution": self.resolution,
            },
        )

    @classmethod
    def from_json(cls, raw: str) -> "MetadataRecord":
        """
        Raises:
            ValueError: If the stored value is not a valid record
        """
        try:
            data = json.loads(raw)
            timestamp = datetime.fromisoformat(data["timestamp"])
            location = (
                LocationTag.from_dict(data["location"], resolved_at=timestamp)
                if data.get("location")
                else None
            )
            return cls(
                path=str(data["path"]),
                timestamp=timestamp,
                resolution=str(data.get("resolution", "")),
                location=location,
            )
        except (KeyError, TypeError, AttributeError) as e:
            raise ValueError(f"Invalid metadata record: {e}") from e
