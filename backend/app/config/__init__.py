"""Config package exporting loader helpers."""

from .loader import (
    GeoConfig,
    MapViewConfig,
    Settings,
    StorageConfig,
    load_settings,
)

__all__ = [
    "GeoConfig",
    "MapViewConfig",
    "Settings",
    "StorageConfig",
    "load_settings",
]
