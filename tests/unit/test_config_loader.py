"""Tests for the profile-based config loader."""

# Coverage: config profiles, DATABASE_URL override, backend validation

from __future__ import annotations

import pytest

from backend.app.config import load_settings

pytestmark = [pytest.mark.config]


def test_load_settings_falls_back_to_defaults(monkeypatch, tmp_path):
    """Missing profiles should default to the built-in configuration."""

    monkeypatch.setenv("STREAMATLAS_CONFIG_PROFILE", "missing")
    monkeypatch.setenv("STREAMATLAS_CONFIG_DIR", str(tmp_path))
    monkeypatch.delenv("DATABASE_URL", raising=False)
    settings = load_settings()

    assert settings.environment == "dev"
    assert settings.database_url.endswith("stream_atlas")
    assert settings.storage.backend == "file"
    assert settings.storage.blob_name == "streamEntries"
    assert settings.geo.provider == "nominatim"
    assert settings.geo.precision == 6
    assert settings.map.center == (39.8282, -98.5795)
    assert settings.map.zoom == 3


def test_load_settings_reads_yaml_profile(monkeypatch, tmp_path):
    """Config loader should parse YAML profiles into typed sections."""

    (tmp_path / "kiosk.yaml").write_text(
        """
environment: staging

storage:
  backend: memory
  blob_name: kioskEntries
  max_blob_bytes: 4096

geo:
  provider: static
  reverse_lookup: true
  timeout_seconds: 3
  places:
    "Aspen, CO": [39.161113, -106.753560]

map:
  center: [33.0, -97.0]
  zoom: 6

display:
  datetime_format: "%d/%m/%Y %H:%M"

logging:
  level: DEBUG
  json: true
""",
        encoding="utf-8",
    )
    monkeypatch.delenv("DATABASE_URL", raising=False)

    settings = load_settings("kiosk", tmp_path)

    assert settings.environment == "staging"
    assert settings.storage.backend == "memory"
    assert settings.storage.blob_name == "kioskEntries"
    assert settings.storage.max_blob_bytes == 4096
    assert settings.geo.provider == "static"
    assert settings.geo.reverse_lookup is True
    assert settings.geo.timeout_seconds == 3.0
    assert settings.geo.places == {"Aspen, CO": (39.161113, -106.75356)}
    assert settings.map.center == (33.0, -97.0)
    assert settings.map.zoom == 6
    assert settings.datetime_format == "%d/%m/%Y %H:%M"
    assert settings.logging == {"level": "DEBUG", "json": True}
    assert settings.raw["environment"] == "staging"


def test_database_url_env_overrides_profile(monkeypatch, tmp_path):
    (tmp_path / "db.yml").write_text(
        "storage:\n  backend: database\ndatabase:\n  url: sqlite:///profile.db\n",
        encoding="utf-8",
    )
    monkeypatch.setenv("DATABASE_URL", "sqlite:///override.db")

    settings = load_settings("db", tmp_path)

    assert settings.storage.backend == "database"
    assert settings.database_url == "sqlite:///override.db"


def test_unknown_storage_backend_is_rejected(tmp_path):
    (tmp_path / "bad.yaml").write_text("storage:\n  backend: cloud\n", encoding="utf-8")

    with pytest.raises(RuntimeError, match="Unsupported storage backend"):
        load_settings("bad", tmp_path)


def test_unknown_geo_provider_is_rejected(tmp_path):
    (tmp_path / "bad.yaml").write_text("geo:\n  provider: bing\n", encoding="utf-8")

    with pytest.raises(RuntimeError, match="Unsupported geo provider"):
        load_settings("bad", tmp_path)


def test_non_mapping_profile_is_rejected(tmp_path):
    (tmp_path / "list.yaml").write_text("- one\n- two\n", encoding="utf-8")

    with pytest.raises(RuntimeError, match="must be a mapping"):
        load_settings("list", tmp_path)


def test_bundled_offline_profile_uses_static_places(monkeypatch):
    monkeypatch.delenv("STREAMATLAS_CONFIG_DIR", raising=False)

    settings = load_settings("offline")

    assert settings.storage.backend == "memory"
    assert settings.geo.provider == "static"
    assert settings.geo.places
