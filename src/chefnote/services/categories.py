"""Category list and app settings services."""

from dataclasses import dataclass
from typing import Protocol

from chefnote.domain.app_settings import AppSettings, validate_settings
from chefnote.domain.recipes import DEFAULT_CATEGORIES
from chefnote.domain.validation import validate_categories


class CategoryRepository(Protocol):
    """Persistence interface for the ordered category list."""

    def get_categories(self) -> list[str] | None:
        """Return the stored list, or None when never saved."""

    def set_categories(self, categories: list[str]) -> None:
        """Replace the stored list."""


class AppSettingsRepository(Protocol):
    """Persistence interface for app settings."""

    def get_settings(self) -> dict[str, object] | None:
        """Return the stored settings record, if any."""

    def set_settings(self, settings: dict[str, object]) -> None:
        """Replace the stored settings record."""


@dataclass
class CategoryService:
    """Service for the ordered category list."""

    repository: CategoryRepository

    def list_categories(self) -> list[str]:
        """Return stored categories, seeding defaults on first use."""
        stored = self.repository.get_categories()
        if stored is None:
            return list(DEFAULT_CATEGORIES)
        return stored

    def replace_categories(self, categories: list[str]) -> list[str]:
        """Validate and store a new ordered list."""
        validate_categories(categories)
        self.repository.set_categories(list(categories))
        return list(categories)


@dataclass
class AppSettingsService:
    """Service for AI model selection."""

    repository: AppSettingsRepository
    defaults: AppSettings

    def get_settings(self) -> AppSettings:
        """Return stored settings merged over defaults."""
        return self.defaults.merged(self.repository.get_settings() or {})

    def update_settings(self, changes: dict[str, object]) -> AppSettings:
        """Merge partial changes into the stored settings."""
        merged = self.get_settings().merged(changes)
        validate_settings(merged)
        self.repository.set_settings(
            {"ai_model": merged.ai_model, "image_model": merged.image_model}
        )
        return merged
