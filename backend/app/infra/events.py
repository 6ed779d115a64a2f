"""Catalog events: entry creation and store seeding notifications."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, Protocol

from .logging import get_logger

logger = get_logger(__name__)

__all__ = ["CatalogEvent", "EventEmitter", "LoggingEventEmitter", "get_event_emitter"]


@dataclass(frozen=True)
class CatalogEvent:
    topic: str
    payload: Dict[str, Any]
    emitted_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))


class EventEmitter(Protocol):  # pragma: no cover - interface only
    def emit(self, topic: str, payload: Dict[str, Any]) -> None: ...


class LoggingEventEmitter:
    """Writes each event to the log stream under a common topic prefix."""

    def __init__(self, topic_prefix: str = "catalog") -> None:
        self.topic_prefix = topic_prefix

    def emit(self, topic: str, payload: Dict[str, Any]) -> CatalogEvent:
        event = CatalogEvent(topic=f"{self.topic_prefix}.{topic}", payload=dict(payload))
        logger.info(
            "catalog_event",
            extra={
                "topic": event.topic,
                "payload": event.payload,
                "emitted_at": event.emitted_at.isoformat(),
            },
        )
        return event


_singleton: LoggingEventEmitter | None = None


def get_event_emitter() -> EventEmitter:
    """Return the process-wide catalog-event emitter."""

    global _singleton
    if _singleton is None:
        _singleton = LoggingEventEmitter()
    return _singleton
