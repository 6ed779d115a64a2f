"""Catalog error taxonomy surfaced to the input boundary."""

from __future__ import annotations

__all__ = [
    "CatalogError",
    "CorruptDataError",
    "GeoLookupFailedError",
    "GeolocationDeniedError",
    "GeolocationTimeoutError",
    "GeolocationUnavailableError",
    "InvalidEntryError",
    "PersistenceFailedError",
    "ReverseLookupFailedError",
]


class CatalogError(Exception):
    """Base class; ``user_message`` is safe to show on the page."""

    code = "catalog_error"
    user_message = "Something went wrong. Please try again."

    def __init__(
        self,
        message: str | None = None,
        *,
        retryable: bool = False,
        user_message: str | None = None,
    ) -> None:
        super().__init__(message or self.user_message)
        self.message = message or self.user_message
        self.retryable = retryable
        if user_message is not None:
            self.user_message = user_message


class CorruptDataError(CatalogError):
    code = "corrupt_data"
    user_message = "Saved streams could not be read; starting from the built-in list."


class PersistenceFailedError(CatalogError):
    code = "persistence_failed"
    user_message = "The stream was added but could not be saved for next time."


class InvalidEntryError(CatalogError):
    code = "invalid_entry"
    user_message = "A link and a description are required."


class GeoLookupFailedError(CatalogError):
    code = "geo_lookup_failed"
    user_message = (
        "Error fetching latitude and longitude. Please check your city and state."
    )


class GeolocationUnavailableError(CatalogError):
    code = "geolocation_unavailable"
    user_message = "Geolocation is not supported in your browser."


class GeolocationDeniedError(CatalogError):
    code = "geolocation_denied"
    user_message = "Location access was denied. Allow it or enter a city and state."


class GeolocationTimeoutError(CatalogError):
    code = "geolocation_timeout"
    user_message = "Error fetching your location. Please try again."


class ReverseLookupFailedError(CatalogError):
    code = "reverse_lookup_failed"
    user_message = "Could not name the place for your location; saved without city and state."
