"""ViewProjector: the filtered-and-sorted sequence both views render."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Iterable, Protocol, Tuple

from ..entrystore.models import ENTRY_KEYS, Entry

__all__ = [
    "DEFAULT_SORT_KEY",
    "SORTABLE_COLUMNS",
    "SortDirection",
    "ViewProjector",
    "ViewState",
    "collation_key",
    "matches_filter",
    "project",
]

SORTABLE_COLUMNS: Tuple[str, ...] = ENTRY_KEYS
DEFAULT_SORT_KEY = "dateTime"


class SortDirection(str, Enum):
    ASC = "asc"
    DESC = "desc"

    def flipped(self) -> "SortDirection":
        return SortDirection.ASC if self is SortDirection.DESC else SortDirection.DESC


class EntrySource(Protocol):  # pragma: no cover - structural typing hook
    def all(self) -> Tuple[Entry, ...]: ...


def _check_column(column: str) -> str:
    if column not in SORTABLE_COLUMNS:
        raise ValueError(
            f"unknown sort column {column!r}; expected one of {SORTABLE_COLUMNS}"
        )
    return column


def matches_filter(entry: Entry, filter_text: str) -> bool:
    """Case-insensitive substring test over all field values joined by spaces."""

    if not filter_text:
        return True
    haystack = " ".join(entry.field_values()).lower()
    return filter_text.lower() in haystack


def collation_key(value: str) -> Tuple[str, str]:
    """Case-insensitive order; exact case only breaks ties."""

    return value.casefold(), value


def project(
    entries: Iterable[Entry],
    sort_key: str,
    sort_direction: SortDirection | str,
    filter_text: str = "",
) -> Tuple[Entry, ...]:
    """Filter, then stably sort by the string at ``sort_key``."""

    _check_column(sort_key)
    direction = SortDirection(sort_direction)
    visible = [entry for entry in entries if matches_filter(entry, filter_text)]
    visible.sort(
        key=lambda entry: collation_key(entry.value_of(sort_key)),
        reverse=direction is SortDirection.DESC,
    )
    return tuple(visible)


@dataclass
class ViewState:
    sort_key: str = DEFAULT_SORT_KEY
    sort_direction: SortDirection = SortDirection.DESC
    filter_text: str = ""

    def toggle_sort(self, column: str) -> None:
        """Same column flips direction; a new column starts descending."""

        _check_column(column)
        if column == self.sort_key:
            self.sort_direction = self.sort_direction.flipped()
        else:
            self.sort_key = column
            self.sort_direction = SortDirection.DESC


class ViewProjector:
    """Reads the store and applies the active view state; never mutates it."""

    def __init__(self, source: EntrySource, state: ViewState | None = None) -> None:
        self._source = source
        self.state = state or ViewState()

    def toggle_sort(self, column: str) -> None:
        self.state.toggle_sort(column)

    def set_filter(self, text: str) -> None:
        self.state.filter_text = text or ""

    def project(self) -> Tuple[Entry, ...]:
        return project(
            self._source.all(),
            self.state.sort_key,
            self.state.sort_direction,
            self.state.filter_text,
        )
