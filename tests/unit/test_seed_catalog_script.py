"""Tests for the catalog seeding script."""

from __future__ import annotations

import json

import pytest

from scripts.seed_catalog import seed_catalog

pytestmark = [pytest.mark.entrystore]


@pytest.fixture
def file_profile(monkeypatch, tmp_path):
    blobs = tmp_path / "blobs"
    (tmp_path / "local.yaml").write_text(
        f"storage:\n  backend: file\n  path: {blobs}\n  blob_name: streamEntries\n",
        encoding="utf-8",
    )
    monkeypatch.setenv("STREAMATLAS_CONFIG_DIR", str(tmp_path))
    return blobs / "streamEntries.json"


def test_seed_catalog_writes_seeds_once(file_profile):
    assert seed_catalog("local") == 9
    assert len(json.loads(file_profile.read_text(encoding="utf-8"))) == 9

    assert seed_catalog("local") == 0
    assert seed_catalog("local", force=True) == 0


def test_seed_catalog_replaces_unreadable_blob(file_profile):
    file_profile.parent.mkdir(parents=True)
    file_profile.write_text("not json", encoding="utf-8")

    assert seed_catalog("local") == 9
