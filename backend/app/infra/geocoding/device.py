"""Device positioning adapters.

Browsers resolve the device fix on the client; the page forwards either
the coordinates or the refusal reason with the form submission.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Protocol, Tuple

__all__ = [
    "DEVICE_ERROR_REASONS",
    "DeviceLocator",
    "DevicePositionError",
    "ReportedDeviceLocator",
]

DEVICE_ERROR_REASONS = ("unavailable", "denied", "timeout")


class DevicePositionError(RuntimeError):
    """Raised when the device cannot produce a position fix."""

    def __init__(self, reason: str, message: Optional[str] = None) -> None:
        if reason not in DEVICE_ERROR_REASONS:
            raise ValueError(f"unknown device error reason: {reason}")
        super().__init__(message or f"device position {reason}")
        self.reason = reason


class DeviceLocator(Protocol):  # pragma: no cover - interface only
    async def current_device_position(self) -> Tuple[float, float]: ...


@dataclass(frozen=True)
class ReportedDeviceLocator:
    """Replays the fix (or failure) reported by the client."""

    latitude: Optional[float] = None
    longitude: Optional[float] = None
    error: Optional[str] = None

    async def current_device_position(self) -> Tuple[float, float]:
        if self.error:
            raise DevicePositionError(self.error)
        if self.latitude is None or self.longitude is None:
            raise DevicePositionError("unavailable", "no device fix was reported")
        if not (-90.0 <= self.latitude <= 90.0 and -180.0 <= self.longitude <= 180.0):
            raise DevicePositionError(
                "unavailable",
                f"reported fix out of range: {self.latitude}, {self.longitude}",
            )
        return float(self.latitude), float(self.longitude)
