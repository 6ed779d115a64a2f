"""Offline geocoder backed by a fixed place table."""

from __future__ import annotations

import math
from typing import Dict, Mapping, Optional, Tuple

from . import GeocodeResult, GeocodingServiceError, ReverseGeocodeResult

EARTH_RADIUS_KM = 6371.0
DEFAULT_MAX_DISTANCE_KM = 50.0


def _place_key(city: str, state: str) -> str:
    return f"{city.strip().lower()}, {state.strip().lower()}"


def haversine_km(a: Tuple[float, float], b: Tuple[float, float]) -> float:
    lat1, lon1 = map(math.radians, a)
    lat2, lon2 = map(math.radians, b)
    h = (
        math.sin((lat2 - lat1) / 2) ** 2
        + math.cos(lat1) * math.cos(lat2) * math.sin((lon2 - lon1) / 2) ** 2
    )
    return 2 * EARTH_RADIUS_KM * math.asin(math.sqrt(h))


class StaticGeocodingClient:
    """Resolve ``"City, ST"`` labels from a configured table."""

    def __init__(
        self,
        places: Mapping[str, Tuple[float, float]],
        *,
        max_distance_km: float = DEFAULT_MAX_DISTANCE_KM,
    ) -> None:
        self._labels: Dict[str, Tuple[str, str]] = {}
        self._points: Dict[str, Tuple[float, float]] = {}
        for label, point in places.items():
            city, _, state = label.partition(",")
            key = _place_key(city, state)
            self._labels[key] = (city.strip(), state.strip())
            self._points[key] = (float(point[0]), float(point[1]))
        self._max_distance_km = max_distance_km

    async def forward_geocode(self, city: str, state: str) -> GeocodeResult:
        point = self._points.get(_place_key(city or "", state or ""))
        if point is None:
            raise GeocodingServiceError(
                f"no match for {city!r}, {state!r}", code="no_match", retryable=False
            )
        return GeocodeResult(latitude=str(point[0]), longitude=str(point[1]))

    async def reverse_geocode(
        self, latitude: float, longitude: float
    ) -> ReverseGeocodeResult:
        nearest: Optional[str] = None
        best = self._max_distance_km
        for key, point in self._points.items():
            distance = haversine_km((latitude, longitude), point)
            if distance <= best:
                nearest, best = key, distance
        if nearest is None:
            raise GeocodingServiceError(
                f"no known place within {self._max_distance_km} km",
                code="no_match",
                retryable=False,
            )
        city, state = self._labels[nearest]
        return ReverseGeocodeResult(city=city, state=state)
