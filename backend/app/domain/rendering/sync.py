"""Single render pipeline keeping the table and the map in step."""

from __future__ import annotations

import threading
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Callable, Iterator, Tuple

from ...infra.logging import get_logger
from ..entrystore.models import Entry
from ..projection import ViewProjector
from .map import MapRenderer
from .table import TableRenderer, TableRow

logger = get_logger(__name__)


@dataclass(frozen=True)
class RenderPass:
    entries: Tuple[Entry, ...]
    rows: Tuple[TableRow, ...]
    marker_count: int


class ViewSync:
    """Project once, then redraw both views from that same sequence.

    Redraws, view-state changes and reads of the drawn surfaces all hold
    one lock, so a reader never sees rows and markers from different passes.
    """

    def __init__(
        self,
        projector: ViewProjector,
        table: TableRenderer,
        map_renderer: MapRenderer,
    ) -> None:
        self._projector = projector
        self._table = table
        self._map = map_renderer
        self._lock = threading.RLock()

    @contextmanager
    def hold(self) -> Iterator[None]:
        with self._lock:
            yield

    def update(self, change: Callable[[ViewProjector], None]) -> RenderPass:
        """Apply a view-state change and redraw before anyone else can."""

        with self._lock:
            change(self._projector)
            return self.refresh()

    def refresh(self) -> RenderPass:
        with self._lock:
            entries = self._projector.project()
            rows = self._table.render(entries)
            marker_count = self._map.render(entries)
        logger.debug(
            "views_rendered",
            extra={
                "row_count": len(rows),
                "marker_count": marker_count,
                "sort_key": self._projector.state.sort_key,
                "filter_text": self._projector.state.filter_text,
            },
        )
        return RenderPass(entries=entries, rows=rows, marker_count=marker_count)
