"""Named string-blob storage backends used to persist the entry catalog."""

from __future__ import annotations

import os
import re
import tempfile
import threading
from pathlib import Path
from typing import Dict, Optional, Protocol

from sqlalchemy import Column, DateTime, MetaData, String, Table, Text, func
from sqlalchemy import delete, insert, select, update
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError

from ..config import Settings
from .db import get_engine
from .logging import get_logger

__all__ = [
    "BlobStorage",
    "BlobStorageError",
    "FileBlobStorage",
    "InMemoryBlobStorage",
    "SqlBlobStorage",
    "blob_table",
    "build_blob_storage",
]

logger = get_logger(__name__)

BLOB_TABLE_NAME = "catalog_blobs"
_SAFE_NAME = re.compile(r"^[A-Za-z0-9_.-]+$")


class BlobStorageError(RuntimeError):
    """Raised when a blob cannot be read or written."""

    def __init__(self, message: str, *, code: str = "storage_error") -> None:
        super().__init__(message)
        self.code = code


class BlobStorage(Protocol):  # pragma: no cover - interface only
    """Get/set a named string blob."""

    def get(self, name: str) -> Optional[str]: ...

    def set(self, name: str, value: str) -> None: ...

    def delete(self, name: str) -> None: ...


def _check_quota(name: str, value: str, max_bytes: Optional[int]) -> None:
    if max_bytes is None:
        return
    size = len(value.encode("utf-8"))
    if size > max_bytes:
        raise BlobStorageError(
            f"blob '{name}' is {size} bytes, quota is {max_bytes}",
            code="quota_exceeded",
        )


class InMemoryBlobStorage(BlobStorage):
    """Dictionary-backed blobs for tests and throwaway sessions."""

    def __init__(
        self,
        initial: Optional[Dict[str, str]] = None,
        *,
        max_bytes: Optional[int] = None,
    ) -> None:
        self._blobs: Dict[str, str] = dict(initial or {})
        self._max_bytes = max_bytes

    def get(self, name: str) -> Optional[str]:
        return self._blobs.get(name)

    def set(self, name: str, value: str) -> None:
        _check_quota(name, value, self._max_bytes)
        self._blobs[name] = value

    def delete(self, name: str) -> None:
        self._blobs.pop(name, None)


class FileBlobStorage(BlobStorage):
    """One UTF-8 file per blob under ``root``; writes replace atomically."""

    def __init__(self, root: str | Path, *, max_bytes: Optional[int] = None) -> None:
        self._root = Path(root).expanduser()
        self._max_bytes = max_bytes
        self._lock = threading.Lock()

    def _path_for(self, name: str) -> Path:
        if not _SAFE_NAME.fullmatch(name):
            raise BlobStorageError(f"invalid blob name: {name!r}", code="invalid_name")
        return self._root / f"{name}.json"

    def get(self, name: str) -> Optional[str]:
        path = self._path_for(name)
        try:
            return path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return None
        except OSError as exc:
            raise BlobStorageError(f"failed to read {path}: {exc}", code="read_failed") from exc

    def set(self, name: str, value: str) -> None:
        _check_quota(name, value, self._max_bytes)
        path = self._path_for(name)
        with self._lock:
            tmp_name: Optional[str] = None
            try:
                self._root.mkdir(parents=True, exist_ok=True)
                fd, tmp_name = tempfile.mkstemp(dir=self._root, prefix=f".{name}.")
                with os.fdopen(fd, "w", encoding="utf-8") as handle:
                    handle.write(value)
                os.replace(tmp_name, path)
            except OSError as exc:
                if tmp_name is not None and os.path.exists(tmp_name):
                    os.unlink(tmp_name)
                raise BlobStorageError(
                    f"failed to write {path}: {exc}", code="write_failed"
                ) from exc

    def delete(self, name: str) -> None:
        path = self._path_for(name)
        with self._lock:
            try:
                path.unlink()
            except FileNotFoundError:
                return
            except OSError as exc:
                raise BlobStorageError(
                    f"failed to delete {path}: {exc}", code="write_failed"
                ) from exc


def blob_table(metadata: Optional[MetaData] = None) -> Table:
    """Return the ``catalog_blobs`` table definition."""

    return Table(
        BLOB_TABLE_NAME,
        metadata or MetaData(),
        Column("name", String(length=128), primary_key=True),
        Column("value", Text(), nullable=False),
        Column(
            "updated_at",
            DateTime(timezone=True),
            nullable=False,
            server_default=func.now(),
        ),
    )


class SqlBlobStorage(BlobStorage):
    """SQLAlchemy-backed blobs stored one row per name."""

    def __init__(
        self,
        engine: Engine,
        *,
        table: Optional[Table] = None,
        max_bytes: Optional[int] = None,
        create_schema: bool = False,
    ) -> None:
        self._engine = engine
        self._blobs = table if table is not None else blob_table()
        self._max_bytes = max_bytes
        if create_schema:
            self._blobs.metadata.create_all(self._engine, tables=[self._blobs])

    def get(self, name: str) -> Optional[str]:
        stmt = select(self._blobs.c.value).where(self._blobs.c.name == name)
        try:
            with self._engine.begin() as conn:
                return conn.execute(stmt).scalar_one_or_none()
        except SQLAlchemyError as exc:
            raise BlobStorageError(
                f"failed to read blob '{name}': {exc}", code="read_failed"
            ) from exc

    def set(self, name: str, value: str) -> None:
        _check_quota(name, value, self._max_bytes)
        table = self._blobs
        update_stmt = (
            update(table)
            .where(table.c.name == name)
            .values(value=value, updated_at=func.now())
        )
        try:
            with self._engine.begin() as conn:
                result = conn.execute(update_stmt)
                if result.rowcount == 0:
                    conn.execute(insert(table).values(name=name, value=value))
        except SQLAlchemyError as exc:
            raise BlobStorageError(
                f"failed to write blob '{name}': {exc}", code="write_failed"
            ) from exc

    def delete(self, name: str) -> None:
        try:
            with self._engine.begin() as conn:
                conn.execute(delete(self._blobs).where(self._blobs.c.name == name))
        except SQLAlchemyError as exc:
            raise BlobStorageError(
                f"failed to delete blob '{name}': {exc}", code="write_failed"
            ) from exc


def build_blob_storage(settings: Settings) -> BlobStorage:
    """Factory that returns the configured blob storage backend."""

    storage_cfg = settings.storage
    if storage_cfg.backend == "database":
        engine = get_engine(settings.database_url)
        create_schema = engine.dialect.name == "sqlite"
        storage: BlobStorage = SqlBlobStorage(
            engine,
            max_bytes=storage_cfg.max_blob_bytes,
            create_schema=create_schema,
        )
    elif storage_cfg.backend == "file":
        storage = FileBlobStorage(storage_cfg.path, max_bytes=storage_cfg.max_blob_bytes)
    else:
        storage = InMemoryBlobStorage(max_bytes=storage_cfg.max_blob_bytes)
    logger.info(
        "blob_storage_selected",
        extra={"backend": storage_cfg.backend, "blob_name": storage_cfg.blob_name},
    )
    return storage
