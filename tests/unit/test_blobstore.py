"""Tests for the named blob storage backends."""

from __future__ import annotations

import pytest
from sqlalchemy import create_engine

from backend.app.config import Settings
from backend.app.infra import blobstore as blobstore_module
from backend.app.infra.blobstore import (
    BlobStorageError,
    FileBlobStorage,
    InMemoryBlobStorage,
    SqlBlobStorage,
    build_blob_storage,
)

pytestmark = [pytest.mark.infra]


@pytest.fixture
def sql_storage() -> SqlBlobStorage:
    engine = create_engine("sqlite+pysqlite:///:memory:", future=True)
    return SqlBlobStorage(engine, create_schema=True)


@pytest.fixture(params=["memory", "file", "sql"])
def storage(request, tmp_path):
    if request.param == "memory":
        return InMemoryBlobStorage()
    if request.param == "file":
        return FileBlobStorage(tmp_path / "blobs")
    return request.getfixturevalue("sql_storage")


def test_absent_blob_reads_as_none(storage):
    assert storage.get("streamEntries") is None


def test_set_then_get_returns_latest_value(storage):
    storage.set("streamEntries", "[]")
    storage.set("streamEntries", '[{"link": "x"}]')

    assert storage.get("streamEntries") == '[{"link": "x"}]'


def test_delete_removes_blob_and_tolerates_missing(storage):
    storage.set("streamEntries", "[]")
    storage.delete("streamEntries")
    storage.delete("streamEntries")

    assert storage.get("streamEntries") is None


def test_quota_is_enforced_before_write():
    storage = InMemoryBlobStorage({"streamEntries": "[]"}, max_bytes=8)

    with pytest.raises(BlobStorageError) as excinfo:
        storage.set("streamEntries", "x" * 9)

    assert excinfo.value.code == "quota_exceeded"
    assert storage.get("streamEntries") == "[]"


def test_file_storage_writes_one_json_file_per_blob(tmp_path):
    storage = FileBlobStorage(tmp_path)
    storage.set("streamEntries", "[]")

    assert (tmp_path / "streamEntries.json").read_text(encoding="utf-8") == "[]"
    assert [path.name for path in tmp_path.iterdir()] == ["streamEntries.json"]


def test_failed_file_write_leaves_no_temp_file(monkeypatch, tmp_path):
    storage = FileBlobStorage(tmp_path)
    storage.set("streamEntries", "[]")

    def refuse_replace(src, dst):
        raise OSError("read-only file system")

    monkeypatch.setattr(blobstore_module.os, "replace", refuse_replace)

    with pytest.raises(BlobStorageError) as excinfo:
        storage.set("streamEntries", "[1]")

    assert excinfo.value.code == "write_failed"
    assert [path.name for path in tmp_path.iterdir()] == ["streamEntries.json"]
    assert storage.get("streamEntries") == "[]"


def test_file_storage_rejects_path_like_names(tmp_path):
    storage = FileBlobStorage(tmp_path)

    with pytest.raises(BlobStorageError) as excinfo:
        storage.get("../escape")

    assert excinfo.value.code == "invalid_name"


def test_sql_storage_wraps_driver_errors():
    engine = create_engine("sqlite+pysqlite:///:memory:", future=True)
    storage = SqlBlobStorage(engine)

    with pytest.raises(BlobStorageError) as excinfo:
        storage.get("streamEntries")

    assert excinfo.value.code == "read_failed"


def test_build_blob_storage_honors_backend(tmp_path):
    settings = Settings()
    settings.storage.backend = "file"
    settings.storage.path = str(tmp_path)
    assert isinstance(build_blob_storage(settings), FileBlobStorage)

    settings.storage.backend = "memory"
    assert isinstance(build_blob_storage(settings), InMemoryBlobStorage)

    settings.storage.backend = "database"
    settings.database_url = f"sqlite:///{tmp_path / 'atlas.db'}"
    storage = build_blob_storage(settings)
    assert isinstance(storage, SqlBlobStorage)
    storage.set("streamEntries", "[]")
    assert storage.get("streamEntries") == "[]"
