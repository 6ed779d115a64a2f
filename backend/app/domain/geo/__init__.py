"""Geographic resolution package."""

from .resolver import Coordinates, GeoResolver, PlaceLabel

__all__ = ["Coordinates", "GeoResolver", "PlaceLabel"]
