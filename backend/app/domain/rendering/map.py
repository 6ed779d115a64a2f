"""Map rendering against the marker capability of a map handle."""

from __future__ import annotations

from dataclasses import dataclass
from html import escape
from typing import List, Optional, Protocol, Sequence, Tuple

from ...infra.logging import get_logger
from ..entrystore.models import Entry

__all__ = ["MapHandle", "MapRenderer", "Marker", "MarkerLayer", "popup_html"]

logger = get_logger(__name__)


class MapHandle(Protocol):  # pragma: no cover - interface only
    def place_marker(self, latitude: float, longitude: float, popup_content: str) -> None: ...

    def clear_markers(self) -> None: ...

    def set_view(self, center: Tuple[float, float], zoom: int) -> None: ...


@dataclass(frozen=True)
class Marker:
    latitude: float
    longitude: float
    popup: str


class MarkerLayer(MapHandle):
    """In-memory map handle; owns the marker set and current viewport."""

    def __init__(self) -> None:
        self.markers: List[Marker] = []
        self.center: Optional[Tuple[float, float]] = None
        self.zoom: Optional[int] = None

    def place_marker(self, latitude: float, longitude: float, popup_content: str) -> None:
        self.markers.append(Marker(latitude, longitude, popup_content))

    def clear_markers(self) -> None:
        self.markers = []

    def set_view(self, center: Tuple[float, float], zoom: int) -> None:
        self.center = center
        self.zoom = zoom


def popup_html(entry: Entry) -> str:
    return (
        f'<a href="{escape(entry.link, quote=True)}" target="_blank">'
        f"{escape(entry.description)}</a>"
    )


def _marker_point(entry: Entry) -> Optional[Tuple[float, float]]:
    if not entry.has_coordinates:
        return None
    try:
        return float(entry.latitude), float(entry.longitude)  # type: ignore[arg-type]
    except ValueError:
        logger.warning(
            "map_marker_skipped_unparseable",
            extra={
                "description": entry.description,
                "latitude": entry.latitude,
                "longitude": entry.longitude,
            },
        )
        return None


class MapRenderer:
    def __init__(self, handle: MapHandle) -> None:
        self._handle = handle

    def render(self, entries: Sequence[Entry]) -> int:
        """Clear every marker, then place one per entry with coordinates."""

        self._handle.clear_markers()
        placed = 0
        for entry in entries:
            point = _marker_point(entry)
            if point is None:
                continue
            self._handle.place_marker(point[0], point[1], popup_html(entry))
            placed += 1
        return placed
