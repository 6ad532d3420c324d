"""Tests for JSON file storage."""

import json
from datetime import timedelta
from pathlib import Path

import pytest

from sunray.adapters.json_file_store import JsonFileStore
from sunray.domain.models import ExposureSession, SkinType, UserSettings
from sunray.services.errors import PersistenceError
from tests.conftest import NOON


def test_missing_files_load_as_empty(tmp_path) -> None:
    store = JsonFileStore(tmp_path / "missing")

    assert store.load_settings() is None
    assert store.load_history() == []


def test_settings_roundtrip(tmp_path) -> None:
    store = JsonFileStore(tmp_path)
    settings = UserSettings(skin_type=SkinType.IV, default_spf=30, daily_goal_iu=1000)

    store.save_settings(settings)

    assert store.load_settings() == settings
    assert json.loads(store.settings_path.read_text())["skin_type"] == "IV"


def test_history_preserves_order_and_fields(tmp_path) -> None:
    store = JsonFileStore(tmp_path)
    older = ExposureSession(
        start=NOON - timedelta(hours=3),
        end=NOON - timedelta(hours=2),
        spf=0,
        exposed_percent=40,
        skin_type=SkinType.II,
        estimated_iu=310.5,
    )
    newer = ExposureSession(
        start=NOON - timedelta(minutes=30),
        end=NOON,
        spf=15,
        exposed_percent=25,
        skin_type=SkinType.II,
        estimated_iu=27.3,
    )

    store.save_history([newer, older])

    assert store.load_history() == [newer, older]
    assert not list(tmp_path.glob("*.tmp"))


def test_corrupt_history_raises_persistence_error(tmp_path) -> None:
    store = JsonFileStore(tmp_path)
    store.history_path.write_text("{not json")

    with pytest.raises(PersistenceError):
        store.load_history()


def test_unexpected_settings_document_raises(tmp_path) -> None:
    store = JsonFileStore(tmp_path)
    store.settings_path.write_text('{"skin_type": "VII"}')

    with pytest.raises(PersistenceError):
        store.load_settings()


def test_failed_write_removes_temporary_file(tmp_path, monkeypatch) -> None:
    store = JsonFileStore(tmp_path)

    def refuse_replace(self: Path, target: Path) -> Path:
        raise OSError("read-only filesystem")

    monkeypatch.setattr(Path, "replace", refuse_replace)

    with pytest.raises(PersistenceError):
        store.save_settings(UserSettings())
    assert not list(tmp_path.glob("*.tmp"))
    assert not store.settings_path.exists()
