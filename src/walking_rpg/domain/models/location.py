from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Optional


@dataclass(frozen=True)
class GeoPoint:
    latitude: float
    longitude: float

    def __post_init__(self) -> None:
        if not -90.0 <= float(self.latitude) <= 90.0:
            raise ValueError("Latitude must be within [-90, 90]")
        if not -180.0 <= float(self.longitude) <= 180.0:
            raise ValueError("Longitude must be within [-180, 180]")

    def to_dict(self) -> Dict[str, float]:
        return {"latitude": float(self.latitude), "longitude": float(self.longitude)}

    @classmethod
    def from_dict(cls, payload: Any) -> Optional["GeoPoint"]:
        if isinstance(payload, GeoPoint):
            return payload
        if not isinstance(payload, dict):
            return None
        try:
            return cls(latitude=float(payload["latitude"]), longitude=float(payload["longitude"]))
        except (KeyError, TypeError, ValueError):
            return None


@dataclass(frozen=True)
class DistanceUpdate:
    """One tick from the location feed. ``incremental`` is already filtered for GPS jumps."""

    incremental: float
    total: float
    location: Optional[GeoPoint]
