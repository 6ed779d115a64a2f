"""Table and map renderers."""

from .map import MapHandle, MapRenderer, Marker, MarkerLayer, popup_html
from .sync import RenderPass, ViewSync
from .table import TableBuffer, TableRenderer, TableRow, TableSurface

__all__ = [
    "MapHandle",
    "MapRenderer",
    "Marker",
    "MarkerLayer",
    "RenderPass",
    "TableBuffer",
    "TableRenderer",
    "TableRow",
    "TableSurface",
    "ViewSync",
    "popup_html",
]
