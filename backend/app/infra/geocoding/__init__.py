"""Geocoding gateway entry points."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Protocol

from ...config import GeoConfig
from ..logging import get_logger

logger = get_logger(__name__)

__all__ = [
    "GeocodeResult",
    "GeocodingClient",
    "GeocodingServiceError",
    "ReverseGeocodeResult",
    "build_geocoding_client",
]


@dataclass(frozen=True)
class GeocodeResult:
    """Forward geocoding hit; coordinates are kept as the provider's strings."""

    latitude: str
    longitude: str
    display_name: Optional[str] = None


@dataclass(frozen=True)
class ReverseGeocodeResult:
    """Place labels for a coordinate pair."""

    city: str = ""
    state: str = ""
    display_name: Optional[str] = None


class GeocodingServiceError(RuntimeError):
    """Raised when a geocoding provider cannot answer a lookup."""

    def __init__(self, message: str, *, code: str, retryable: bool) -> None:
        super().__init__(message)
        self.code = code
        self.retryable = retryable


class GeocodingClient(Protocol):  # pragma: no cover - interface only
    """Forward and reverse geocoding capability."""

    async def forward_geocode(self, city: str, state: str) -> GeocodeResult: ...

    async def reverse_geocode(
        self, latitude: float, longitude: float
    ) -> ReverseGeocodeResult: ...


def build_geocoding_client(config: GeoConfig) -> GeocodingClient:
    """Return the provider configured for the active profile."""

    if config.provider == "static":
        from .static import StaticGeocodingClient

        client: GeocodingClient = StaticGeocodingClient(config.places)
    else:
        from .nominatim import NominatimGeocodingClient

        client = NominatimGeocodingClient(
            base_url=config.base_url,
            user_agent=config.user_agent,
            timeout_seconds=config.timeout_seconds,
            country_codes=config.country_codes,
        )
    logger.info("geocoding_client_selected", extra={"provider": config.provider})
    return client
