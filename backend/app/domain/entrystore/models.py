"""Entry record and its JSON codec."""

from __future__ import annotations

import json
from dataclasses import dataclass, fields
from datetime import datetime, timezone
from typing import Any, Dict, Iterable, List, Mapping, Optional, Tuple

from ..errors import CorruptDataError, InvalidEntryError

__all__ = [
    "ENTRY_KEYS",
    "Entry",
    "dump_entries",
    "parse_entries",
    "utcnow",
]

# attribute name -> persisted JSON key, in display order
_FIELD_KEYS: Tuple[Tuple[str, str], ...] = (
    ("link", "link"),
    ("description", "description"),
    ("date_time", "dateTime"),
    ("city", "city"),
    ("state", "state"),
    ("latitude", "latitude"),
    ("longitude", "longitude"),
    ("created_at", "createdAt"),
)
ENTRY_KEYS: Tuple[str, ...] = tuple(key for _, key in _FIELD_KEYS)
REQUIRED_KEYS = ("link", "description", "dateTime")
_ATTR_BY_KEY = {key: attr for attr, key in _FIELD_KEYS}


def utcnow() -> datetime:
    """Return timezone-aware UTC timestamp."""

    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class Entry:
    """One cataloged stream.

    Optional fields are ``None`` when absent from the persisted object and
    ``""`` when present but empty; both survive a save/load cycle as-is.
    """

    link: str
    description: str
    date_time: str
    city: Optional[str] = None
    state: Optional[str] = None
    latitude: Optional[str] = None
    longitude: Optional[str] = None
    created_at: Optional[str] = None

    @classmethod
    def new(
        cls,
        *,
        link: str,
        description: str,
        city: str = "",
        state: str = "",
        latitude: Optional[str] = None,
        longitude: Optional[str] = None,
        timestamp: Optional[datetime] = None,
        datetime_format: str = "%Y-%m-%d %I:%M %p",
    ) -> "Entry":
        """Build a user-submitted entry stamped with display and canonical times."""

        link = (link or "").strip()
        description = (description or "").strip()
        if not link or not description:
            raise InvalidEntryError("link and description must not be empty")
        ts = timestamp or utcnow()
        return cls(
            link=link,
            description=description,
            date_time=ts.astimezone().strftime(datetime_format),
            city=city.strip(),
            state=state.strip(),
            latitude=latitude,
            longitude=longitude,
            created_at=ts.astimezone(timezone.utc).isoformat(timespec="seconds"),
        )

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Entry":
        missing = [key for key in REQUIRED_KEYS if data.get(key) is None]
        if missing:
            raise ValueError(f"entry is missing required keys: {missing}")
        values: Dict[str, Optional[str]] = {}
        for attr, key in _FIELD_KEYS:
            raw = data.get(key)
            if raw is None:
                continue
            if isinstance(raw, bool) or not isinstance(raw, (str, int, float)):
                raise ValueError(f"entry field {key!r} must be a string")
            values[attr] = str(raw)
        return cls(**values)  # type: ignore[arg-type]

    def to_dict(self) -> Dict[str, str]:
        return {
            key: getattr(self, attr)
            for attr, key in _FIELD_KEYS
            if getattr(self, attr) is not None
        }

    def value_of(self, key: str) -> str:
        """Return the string at a JSON key; absent fields read as ``""``."""

        attr = _ATTR_BY_KEY.get(key)
        if attr is None:
            raise KeyError(key)
        return getattr(self, attr) or ""

    def field_values(self) -> List[str]:
        return [getattr(self, f.name) for f in fields(self) if getattr(self, f.name) is not None]

    @property
    def has_coordinates(self) -> bool:
        return bool(self.latitude) and bool(self.longitude)


def dump_entries(entries: Iterable[Entry]) -> str:
    return json.dumps([entry.to_dict() for entry in entries])


def parse_entries(blob: str) -> List[Entry]:
    """Decode a persisted collection, raising ``CorruptDataError`` on bad input."""

    try:
        payload = json.loads(blob)
    except ValueError as exc:
        raise CorruptDataError(f"entry blob is not valid JSON: {exc}") from exc
    if not isinstance(payload, list):
        raise CorruptDataError("entry blob must hold a JSON array")
    entries: List[Entry] = []
    for index, item in enumerate(payload):
        if not isinstance(item, dict):
            raise CorruptDataError(f"entry #{index} is not an object")
        try:
            entries.append(Entry.from_dict(item))
        except ValueError as exc:
            raise CorruptDataError(f"entry #{index} is invalid: {exc}") from exc
    return entries
