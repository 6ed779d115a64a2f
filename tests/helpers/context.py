"""Builders for fully wired, offline application contexts."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Tuple

from backend.app.config import Settings
from backend.app.context import AppContext, build_app_context
from backend.app.infra.blobstore import BlobStorage, InMemoryBlobStorage
from backend.app.infra.geocoding import GeocodingClient
from backend.app.infra.geocoding.static import StaticGeocodingClient
from backend.app.infra.metrics import InMemoryMetricsClient

FIXED_NOW = datetime(2026, 10, 19, 18, 30, tzinfo=timezone.utc)

PLACES: Dict[str, Tuple[float, float]] = {
    "Hermosa Beach, CA": (33.862237, -118.399519),
    "Lewisville, TX": (33.015576, -96.997158),
}


class RecordingEmitter:
    def __init__(self) -> None:
        self.calls: List[Tuple[str, Dict[str, Any]]] = []

    def emit(self, topic: str, payload: Dict[str, Any]) -> None:
        self.calls.append((topic, payload))

    def topics(self) -> List[str]:
        return [topic for topic, _ in self.calls]


def make_context(
    *,
    storage: Optional[BlobStorage] = None,
    reverse_lookup: bool = True,
    places: Optional[Dict[str, Tuple[float, float]]] = None,
    geocoder: Optional[GeocodingClient] = None,
) -> AppContext:
    settings = Settings()
    settings.storage.backend = "memory"
    settings.geo.provider = "static"
    settings.geo.reverse_lookup = reverse_lookup
    return build_app_context(
        settings,
        storage=storage if storage is not None else InMemoryBlobStorage(),
        geocoder=geocoder or StaticGeocodingClient(PLACES if places is None else places),
        metrics=InMemoryMetricsClient(),
        events=RecordingEmitter(),
        clock=lambda: FIXED_NOW,
    )
