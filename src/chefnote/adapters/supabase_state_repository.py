"""Supabase key/value storage for categories and settings."""

from dataclasses import dataclass

from supabase import Client

from chefnote.services.categories import AppSettingsRepository, CategoryRepository

_TABLE = "app_state"


def _read_value(client: Client, key: str) -> object | None:
    response = (
        client.table(_TABLE).select("value").eq("key", key).limit(1).execute()
    )
    if not response.data:
        return None
    return response.data[0].get("value")


def _write_value(client: Client, key: str, value: object) -> None:
    client.table(_TABLE).upsert({"key": key, "value": value}).execute()


@dataclass
class SupabaseCategoryRepository(CategoryRepository):
    """Stores the ordered category list under the ``categories`` key."""

    client: Client

    def get_categories(self) -> list[str] | None:
        """Return the stored list, if any."""
        value = _read_value(self.client, "categories")
        if not isinstance(value, list):
            return None
        return [str(item) for item in value]

    def set_categories(self, categories: list[str]) -> None:
        """Replace the stored list."""
        _write_value(self.client, "categories", categories)


@dataclass
class SupabaseAppSettingsRepository(AppSettingsRepository):
    """Stores app settings under the ``settings`` key."""

    client: Client

    def get_settings(self) -> dict[str, object] | None:
        """Return the stored settings record, if any."""
        value = _read_value(self.client, "settings")
        return value if isinstance(value, dict) else None

    def set_settings(self, settings: dict[str, object]) -> None:
        """Replace the stored settings record."""
        _write_value(self.client, "settings", settings)
