"""Table rendering: one row per projected entry, full redraw each call."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol, Sequence, Tuple

from ..entrystore.models import Entry

__all__ = ["TableBuffer", "TableRenderer", "TableRow", "TableSurface"]


@dataclass(frozen=True)
class TableRow:
    """Link cell (href + label) followed by the display cells."""

    href: str
    label: str
    date_time: str
    city: str
    state: str
    latitude: str
    longitude: str

    @classmethod
    def from_entry(cls, entry: Entry) -> "TableRow":
        return cls(
            href=entry.link,
            label=entry.description,
            date_time=entry.date_time,
            city=entry.city or "",
            state=entry.state or "",
            latitude=entry.latitude or "",
            longitude=entry.longitude or "",
        )

    def cells(self) -> Tuple[str, str, str, str, str]:
        return (self.date_time, self.city, self.state, self.latitude, self.longitude)


class TableSurface(Protocol):  # pragma: no cover - interface only
    def replace_rows(self, rows: Sequence[TableRow]) -> None: ...


class TableBuffer:
    """In-memory table surface read by the JSON view."""

    def __init__(self) -> None:
        self.rows: Tuple[TableRow, ...] = ()

    def replace_rows(self, rows: Sequence[TableRow]) -> None:
        self.rows = tuple(rows)


class TableRenderer:
    def __init__(self, surface: TableSurface) -> None:
        self._surface = surface

    def render(self, entries: Sequence[Entry]) -> Tuple[TableRow, ...]:
        rows = tuple(TableRow.from_entry(entry) for entry in entries)
        self._surface.replace_rows(rows)
        return rows
