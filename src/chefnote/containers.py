"""Dependency container wiring for the application."""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass

from supabase import create_client

from chefnote.adapters.openai_chef_client import OpenAIChefClient
from chefnote.adapters.supabase_recipe_repository import SupabaseRecipeRepository
from chefnote.adapters.supabase_state_repository import (
    SupabaseAppSettingsRepository,
    SupabaseCategoryRepository,
)
from chefnote.config import Settings, ai_enabled
from chefnote.domain.app_settings import AppSettings
from chefnote.services.ai import AiService
from chefnote.services.categories import AppSettingsService, CategoryService
from chefnote.services.recipes import RecipeService


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    recipe_service: RecipeService
    category_service: CategoryService
    app_settings_service: AppSettingsService
    ai_service: AiService | None
    close_resources: Callable[[], Awaitable[None]]


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or Settings()
    supabase_client = create_client(
        resolved_settings.supabase_url, resolved_settings.supabase_service_key
    )
    recipe_service = RecipeService(SupabaseRecipeRepository(supabase_client))
    category_service = CategoryService(SupabaseCategoryRepository(supabase_client))
    app_settings_service = AppSettingsService(
        repository=SupabaseAppSettingsRepository(supabase_client),
        defaults=AppSettings(
            ai_model=resolved_settings.openai_text_model,
            image_model=resolved_settings.openai_image_model,
        ),
    )
    ai_client: OpenAIChefClient | None = None
    ai_service: AiService | None = None
    if ai_enabled(resolved_settings):
        ai_client = OpenAIChefClient.create(resolved_settings.openai_api_key or "")
        ai_service = AiService(client=ai_client, settings_service=app_settings_service)

    async def close_resources() -> None:
        if ai_client is not None:
            await ai_client.close()

    return AppContainer(
        settings=resolved_settings,
        recipe_service=recipe_service,
        category_service=category_service,
        app_settings_service=app_settings_service,
        ai_service=ai_service,
        close_resources=close_resources,
    )
