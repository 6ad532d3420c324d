"""User settings service."""

import logging
from dataclasses import dataclass, field
from typing import Protocol

from sunray.domain.models import UserSettings

_logger = logging.getLogger(__name__)


class SettingsStore(Protocol):
    """Persistence interface for user settings."""

    def load_settings(self) -> UserSettings | None:
        """Return the saved settings, if any."""

    def save_settings(self, settings: UserSettings) -> None:
        """Persist the settings."""


@dataclass
class UserSettingsService:
    """Holds user settings in memory and persists changes best effort."""

    store: SettingsStore
    settings: UserSettings = field(default_factory=UserSettings)

    def load(self) -> UserSettings:
        """Load saved settings, keeping the current ones when none are stored."""
        try:
            saved = self.store.load_settings()
        except Exception as exc:  # noqa: BLE001
            _logger.warning("Settings load failed: %s", exc)
            return self.settings
        if saved is not None:
            self.settings = saved
        return self.settings

    def update(self, settings: UserSettings) -> UserSettings:
        """Replace the settings and persist them."""
        self.settings = settings
        try:
            self.store.save_settings(settings)
        except Exception as exc:  # noqa: BLE001
            _logger.warning("Settings save failed: %s", exc)
        return self.settings
