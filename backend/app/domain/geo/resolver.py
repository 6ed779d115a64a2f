"""GeoResolver: place text or device fix -> coordinates, and back."""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
from typing import Optional

from ...infra.geocoding import GeocodingClient, GeocodingServiceError
from ...infra.geocoding.device import DeviceLocator, DevicePositionError
from ...infra.logging import get_logger
from ..errors import (
    GeoLookupFailedError,
    GeolocationDeniedError,
    GeolocationTimeoutError,
    GeolocationUnavailableError,
    ReverseLookupFailedError,
)

__all__ = ["Coordinates", "GeoResolver", "PlaceLabel"]

logger = get_logger(__name__)

DEFAULT_PRECISION = 6


@dataclass(frozen=True)
class Coordinates:
    """Decimal-degree strings, as stored on entries."""

    latitude: str
    longitude: str

    @classmethod
    def from_degrees(
        cls, latitude: float, longitude: float, *, precision: int = DEFAULT_PRECISION
    ) -> "Coordinates":
        return cls(
            latitude=f"{latitude:.{precision}f}",
            longitude=f"{longitude:.{precision}f}",
        )


@dataclass(frozen=True)
class PlaceLabel:
    city: str = ""
    state: str = ""


class GeoResolver:
    """Maps provider and device failures onto the catalog error taxonomy."""

    def __init__(
        self,
        client: GeocodingClient,
        *,
        precision: int = DEFAULT_PRECISION,
        device_timeout_seconds: Optional[float] = 10.0,
    ) -> None:
        self._client = client
        self._precision = precision
        self._device_timeout = device_timeout_seconds

    async def resolve(self, city: str, state: str) -> Coordinates:
        try:
            result = await self._client.forward_geocode(city, state)
        except GeocodingServiceError as exc:
            logger.warning(
                "geo_forward_lookup_failed",
                extra={"city": city, "state": state, "error_code": exc.code},
            )
            raise GeoLookupFailedError(str(exc), retryable=exc.retryable) from exc
        return Coordinates(latitude=result.latitude, longitude=result.longitude)

    async def current_position(self, locator: Optional[DeviceLocator]) -> Coordinates:
        """Return the device fix rounded to the configured precision."""

        if locator is None:
            raise GeolocationUnavailableError("no device locator in this environment")
        try:
            if self._device_timeout is None:
                latitude, longitude = await locator.current_device_position()
            else:
                latitude, longitude = await asyncio.wait_for(
                    locator.current_device_position(), timeout=self._device_timeout
                )
        except asyncio.TimeoutError as exc:
            raise GeolocationTimeoutError(
                f"device fix not available after {self._device_timeout}s",
                retryable=True,
            ) from exc
        except DevicePositionError as exc:
            logger.warning("geo_device_position_failed", extra={"reason": exc.reason})
            if exc.reason == "denied":
                raise GeolocationDeniedError(str(exc)) from exc
            if exc.reason == "timeout":
                raise GeolocationTimeoutError(str(exc), retryable=True) from exc
            raise GeolocationUnavailableError(str(exc)) from exc
        return Coordinates.from_degrees(latitude, longitude, precision=self._precision)

    async def reverse_resolve(self, latitude: float, longitude: float) -> PlaceLabel:
        try:
            result = await self._client.reverse_geocode(latitude, longitude)
        except GeocodingServiceError as exc:
            logger.info(
                "geo_reverse_lookup_failed",
                extra={"latitude": latitude, "longitude": longitude, "error_code": exc.code},
            )
            raise ReverseLookupFailedError(str(exc), retryable=exc.retryable) from exc
        return PlaceLabel(city=result.city, state=result.state)
