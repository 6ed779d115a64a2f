"""EntryStore: the owned, persisted entry collection."""

from __future__ import annotations

import threading
from dataclasses import dataclass
from typing import Iterable, List, Optional, Tuple

from ...infra.blobstore import BlobStorage, BlobStorageError
from ...infra.logging import get_logger
from ..errors import CorruptDataError, PersistenceFailedError
from .models import Entry, dump_entries, parse_entries

__all__ = ["DEFAULT_BLOB_NAME", "EntryStore", "LoadResult"]

logger = get_logger(__name__)

DEFAULT_BLOB_NAME = "streamEntries"


@dataclass(frozen=True)
class LoadResult:
    """Outcome of reading the persisted blob."""

    entries: Tuple[Entry, ...]
    needs_seeding: bool
    error: Optional[CorruptDataError] = None


class EntryStore:
    """Append-only collection persisted as one JSON blob.

    Every mutation rewrites the whole collection while holding the store
    lock, so the blob never reflects a partial update.
    """

    def __init__(self, storage: BlobStorage, *, blob_name: str = DEFAULT_BLOB_NAME) -> None:
        self._storage = storage
        self._blob_name = blob_name
        self._entries: List[Entry] = []
        self._lock = threading.RLock()

    @property
    def blob_name(self) -> str:
        return self._blob_name

    def load(self) -> LoadResult:
        with self._lock:
            try:
                blob = self._storage.get(self._blob_name)
            except BlobStorageError as exc:
                return self._reset_after_corruption(
                    CorruptDataError(f"entry blob could not be read: {exc}")
                )
            if blob is None:
                self._entries = []
                logger.info("entry_store_blob_absent", extra={"blob_name": self._blob_name})
                return LoadResult(entries=(), needs_seeding=True)
            try:
                entries = parse_entries(blob)
            except CorruptDataError as exc:
                return self._reset_after_corruption(exc)
            self._entries = entries
            logger.info(
                "entry_store_loaded",
                extra={"blob_name": self._blob_name, "entry_count": len(entries)},
            )
            return LoadResult(entries=tuple(entries), needs_seeding=not entries)

    reload = load

    def add(self, entry: Entry) -> None:
        """Append and persist; on write failure the entry stays in memory."""

        with self._lock:
            self._entries.append(entry)
            self._persist(reason="add")

    def all(self) -> Tuple[Entry, ...]:
        with self._lock:
            return tuple(self._entries)

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def contains_description(self, description: str) -> bool:
        with self._lock:
            return any(entry.description == description for entry in self._entries)

    def replace_all(self, entries: Iterable[Entry]) -> None:
        with self._lock:
            self._entries = list(entries)
            self._persist(reason="replace_all")

    def clear(self) -> None:
        with self._lock:
            self._entries = []
            try:
                self._storage.delete(self._blob_name)
            except BlobStorageError as exc:
                logger.warning(
                    "entry_store_clear_failed",
                    extra={"blob_name": self._blob_name, "error_code": exc.code},
                )
                raise PersistenceFailedError(str(exc), retryable=True) from exc
            logger.info("entry_store_cleared", extra={"blob_name": self._blob_name})

    def _persist(self, *, reason: str) -> None:
        try:
            self._storage.set(self._blob_name, dump_entries(self._entries))
        except BlobStorageError as exc:
            logger.warning(
                "entry_store_persist_failed",
                extra={
                    "blob_name": self._blob_name,
                    "reason": reason,
                    "error_code": exc.code,
                    "entry_count": len(self._entries),
                },
            )
            raise PersistenceFailedError(
                str(exc), retryable=exc.code != "quota_exceeded"
            ) from exc

    def _reset_after_corruption(self, error: CorruptDataError) -> LoadResult:
        logger.warning(
            "entry_store_blob_corrupt",
            extra={"blob_name": self._blob_name, "detail": error.message},
        )
        self._entries = []
        return LoadResult(entries=(), needs_seeding=True, error=error)
