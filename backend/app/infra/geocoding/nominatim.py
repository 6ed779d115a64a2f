"""Nominatim (OpenStreetMap) geocoding client built on httpx."""

from __future__ import annotations

from typing import Any, Dict, Optional

import httpx

from ..logging import get_logger
from . import GeocodeResult, GeocodingServiceError, ReverseGeocodeResult

logger = get_logger(__name__)

CITY_ADDRESS_KEYS = ("city", "town", "village", "hamlet", "municipality")
STATE_CODE_KEY = "ISO3166-2-lvl4"


class NominatimGeocodingClient:
    """Async client for the ``/search`` and ``/reverse`` endpoints."""

    def __init__(
        self,
        *,
        base_url: str,
        user_agent: str,
        timeout_seconds: float = 10.0,
        country_codes: Optional[str] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self._base_url = base_url.rstrip("/")
        self._user_agent = user_agent
        self._timeout = timeout_seconds
        self._country_codes = country_codes
        self._transport = transport

    async def forward_geocode(self, city: str, state: str) -> GeocodeResult:
        city = (city or "").strip()
        state = (state or "").strip()
        if not city and not state:
            raise GeocodingServiceError(
                "city or state is required", code="empty_query", retryable=False
            )
        params: Dict[str, Any] = {"format": "jsonv2", "limit": 1}
        if city:
            params["city"] = city
        if state:
            params["state"] = state
        if self._country_codes:
            params["countrycodes"] = self._country_codes

        payload = await self._get_json("/search", params)
        if not isinstance(payload, list) or not payload:
            raise GeocodingServiceError(
                f"no match for {city!r}, {state!r}", code="no_match", retryable=False
            )
        hit = payload[0]
        try:
            latitude = str(hit["lat"])
            longitude = str(hit["lon"])
        except (KeyError, TypeError) as exc:
            raise GeocodingServiceError(
                "search result is missing coordinates",
                code="invalid_response",
                retryable=False,
            ) from exc
        return GeocodeResult(
            latitude=latitude,
            longitude=longitude,
            display_name=hit.get("display_name"),
        )

    async def reverse_geocode(
        self, latitude: float, longitude: float
    ) -> ReverseGeocodeResult:
        params = {
            "format": "jsonv2",
            "lat": latitude,
            "lon": longitude,
            "zoom": 10,
            "addressdetails": 1,
        }
        payload = await self._get_json("/reverse", params)
        if not isinstance(payload, dict) or "error" in payload:
            raise GeocodingServiceError(
                f"no place found at {latitude}, {longitude}",
                code="no_match",
                retryable=False,
            )
        address = payload.get("address") or {}
        if not isinstance(address, dict):
            raise GeocodingServiceError(
                "reverse result address is not an object",
                code="invalid_response",
                retryable=False,
            )
        city = next(
            (str(address[key]) for key in CITY_ADDRESS_KEYS if address.get(key)), ""
        )
        state = _state_label(address)
        if not city and not state:
            raise GeocodingServiceError(
                "reverse result carries no city or state",
                code="no_match",
                retryable=False,
            )
        return ReverseGeocodeResult(
            city=city, state=state, display_name=payload.get("display_name")
        )

    async def _get_json(self, path: str, params: Dict[str, Any]) -> Any:
        url = f"{self._base_url}{path}"
        try:
            async with httpx.AsyncClient(
                timeout=self._timeout, transport=self._transport
            ) as client:
                response = await client.get(
                    url,
                    params=params,
                    headers={"User-Agent": self._user_agent},
                    follow_redirects=True,
                )
        except httpx.TimeoutException as exc:
            raise GeocodingServiceError(
                f"geocoding request timed out: {url}", code="timeout", retryable=True
            ) from exc
        except httpx.HTTPError as exc:
            raise GeocodingServiceError(
                f"geocoding request failed: {exc}",
                code="transport_error",
                retryable=True,
            ) from exc

        if response.status_code != 200:
            logger.warning(
                "nominatim_unexpected_status",
                extra={"path": path, "status_code": response.status_code},
            )
            raise GeocodingServiceError(
                f"geocoding service returned HTTP {response.status_code}",
                code=f"http_{response.status_code}",
                retryable=response.status_code >= 500 or response.status_code == 429,
            )
        try:
            return response.json()
        except ValueError as exc:
            raise GeocodingServiceError(
                "geocoding service returned invalid JSON",
                code="invalid_response",
                retryable=False,
            ) from exc


def _state_label(address: Dict[str, Any]) -> str:
    code = address.get(STATE_CODE_KEY)
    if isinstance(code, str) and "-" in code:
        return code.split("-", 1)[1]
    return str(address.get("state") or "")
