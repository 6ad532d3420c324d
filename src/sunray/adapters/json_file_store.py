"""JSON file storage for settings and history."""

import json
import os
import tempfile
from dataclasses import dataclass
from pathlib import Path

from sunray.domain.models import ExposureSession, UserSettings
from sunray.domain.records import (
    session_from_record,
    session_to_record,
    settings_from_record,
    settings_to_record,
)
from sunray.services.errors import PersistenceError
from sunray.services.sessions import HistoryStore
from sunray.services.user_settings import SettingsStore


@dataclass
class JsonFileStore(SettingsStore, HistoryStore):
    """Stores settings and history as JSON documents in a directory."""

    directory: Path

    @property
    def settings_path(self) -> Path:
        return self.directory / "settings.json"

    @property
    def history_path(self) -> Path:
        return self.directory / "history.json"

    def load_settings(self) -> UserSettings | None:
        """Return saved settings, or None when no file exists."""
        payload = self._read(self.settings_path)
        if payload is None:
            return None
        if not isinstance(payload, dict):
            raise PersistenceError(f"Unexpected settings document: {payload!r}")
        try:
            return settings_from_record(payload)
        except (KeyError, TypeError, ValueError) as exc:
            raise PersistenceError(f"Invalid settings document: {exc}") from exc

    def save_settings(self, settings: UserSettings) -> None:
        """Write settings atomically."""
        self._write(self.settings_path, settings_to_record(settings))

    def load_history(self) -> list[ExposureSession]:
        """Return saved sessions, or an empty list when no file exists."""
        payload = self._read(self.history_path)
        if payload is None:
            return []
        if not isinstance(payload, list):
            raise PersistenceError("History document is not a list")
        try:
            return [session_from_record(record) for record in payload]
        except (KeyError, TypeError, ValueError) as exc:
            raise PersistenceError(f"Invalid history document: {exc}") from exc

    def save_history(self, history: list[ExposureSession]) -> None:
        """Write the history list atomically."""
        self._write(self.history_path, [session_to_record(item) for item in history])

    def _read(self, path: Path) -> object | None:
        try:
            with path.open(encoding="utf-8") as handle:
                return json.load(handle)
        except FileNotFoundError:
            return None
        except (OSError, ValueError) as exc:
            raise PersistenceError(f"Failed to read {path}: {exc}") from exc

    def _write(self, path: Path, payload: object) -> None:
        try:
            self.directory.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(dir=self.directory, suffix=".tmp")
        except OSError as exc:
            raise PersistenceError(f"Failed to write {path}: {exc}") from exc
        tmp_path = Path(tmp_name)
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as handle:
                json.dump(payload, handle, indent=2, sort_keys=True)
            tmp_path.replace(path)
        except (OSError, TypeError, ValueError) as exc:
            tmp_path.unlink(missing_ok=True)
            raise PersistenceError(f"Failed to write {path}: {exc}") from exc
