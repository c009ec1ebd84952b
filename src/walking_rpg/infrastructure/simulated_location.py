from __future__ import annotations

import math
from typing import Optional

from walking_rpg.domain.models.location import DistanceUpdate, GeoPoint
from walking_rpg.domain.repositories import LocationFeed


EARTH_RADIUS_M = 6371e3
METERS_PER_DEGREE_LATITUDE = 111_320.0
MAX_VALID_DISTANCE_M = 1000.0


def haversine_distance_m(start: GeoPoint, end: GeoPoint) -> float:
    phi1 = math.radians(start.latitude)
    phi2 = math.radians(end.latitude)
    delta_phi = math.radians(end.latitude - start.latitude)
    delta_lambda = math.radians(end.longitude - start.longitude)

    a = math.sin(delta_phi / 2) ** 2 + math.cos(phi1) * math.cos(phi2) * math.sin(delta_lambda / 2) ** 2
    c = 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))
    return EARTH_RADIUS_M * c


class SimulatedLocationFeed(LocationFeed):
    """Location source for the debug console.

    ``record_fix`` accepts raw GPS fixes and drops implausible jumps;
    ``advance`` walks north by a given distance.
    """

    def __init__(self, start: GeoPoint, *, max_valid_distance_m: float = MAX_VALID_DISTANCE_M) -> None:
        self._current = start
        self._total = 0.0
        self._max_valid_distance_m = float(max_valid_distance_m)

    @property
    def total_distance(self) -> float:
        return self._total

    def current_location(self) -> GeoPoint:
        return self._current

    def record_fix(self, point: GeoPoint) -> Optional[DistanceUpdate]:
        distance = haversine_distance_m(self._current, point)
        self._current = point
        if distance <= 0 or distance >= self._max_valid_distance_m:
            return None
        self._total += distance
        return DistanceUpdate(incremental=distance, total=self._total, location=point)

    def advance(self, meters: float) -> DistanceUpdate:
        meters = max(0.0, float(meters))
        latitude = self._current.latitude + meters / METERS_PER_DEGREE_LATITUDE
        if latitude > 90.0:
            latitude = self._current.latitude - meters / METERS_PER_DEGREE_LATITUDE
        self._current = GeoPoint(latitude=latitude, longitude=self._current.longitude)
        self._total += meters
        return DistanceUpdate(incremental=meters, total=self._total, location=self._current)
