"""Projection package."""

from .projector import (
    DEFAULT_SORT_KEY,
    SORTABLE_COLUMNS,
    SortDirection,
    ViewProjector,
    ViewState,
    collation_key,
    matches_filter,
    project,
)

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
