"""Shared test fixtures."""

from collections.abc import Callable
from dataclasses import dataclass, field

import pytest

from chefnote.adapters.chefnote_api_client import ChefNoteApi, ChefNoteApiError
from chefnote.adapters.memory_location import InMemoryLocationBar
from chefnote.client.shell import ChefNoteApp
from chefnote.config import ClientSettings, Settings
from chefnote.containers import AppContainer
from chefnote.domain.app_settings import AppSettings
from chefnote.domain.menu import MenuRecommendation, MenuTheme
from chefnote.domain.recipes import DEFAULT_COVER_IMAGE, Ingredient, Recipe
from chefnote.services.ai import AiService, ChefAiClient
from chefnote.services.categories import (
    AppSettingsRepository,
    AppSettingsService,
    CategoryRepository,
    CategoryService,
)
from chefnote.services.recipes import RecipeRepository, RecipeService


def make_recipe(
    recipe_id: str,
    title: str = "番茄炒蛋",
    category: str = "炒菜",
    created_at: int = 1_700_000_000_000,
    ingredients: list[Ingredient] | None = None,
) -> Recipe:
    """Build a complete recipe with sensible defaults."""
    return Recipe(
        id=recipe_id,
        title=title,
        category=category,
        cover_image=DEFAULT_COVER_IMAGE,
        proficiency=3,
        ingredients=ingredients
        if ingredients is not None
        else [Ingredient("鸡蛋", "3个"), Ingredient("番茄", "2个")],
        steps=["打蛋", "翻炒"],
        created_at=created_at,
    )


@dataclass
class InMemoryRecipeRepository(RecipeRepository):
    """In-memory recipe repository for tests."""

    recipes: dict[str, Recipe] = field(default_factory=dict)

    def list_recipes(self) -> list[Recipe]:
        return list(self.recipes.values())

    def get_recipe(self, recipe_id: str) -> Recipe | None:
        return self.recipes.get(recipe_id)

    def insert_recipe(self, recipe: Recipe) -> Recipe:
        self.recipes[recipe.id] = recipe
        return recipe

    def replace_recipe(self, recipe: Recipe) -> Recipe:
        self.recipes[recipe.id] = recipe
        return recipe

    def delete_recipe(self, recipe_id: str) -> None:
        self.recipes.pop(recipe_id, None)


@dataclass
class InMemoryCategoryRepository(CategoryRepository):
    """In-memory category repository for tests."""

    categories: list[str] | None = None

    def get_categories(self) -> list[str] | None:
        return None if self.categories is None else list(self.categories)

    def set_categories(self, categories: list[str]) -> None:
        self.categories = list(categories)


@dataclass
class InMemoryAppSettingsRepository(AppSettingsRepository):
    """In-memory settings repository for tests."""

    record: dict[str, object] | None = None

    def get_settings(self) -> dict[str, object] | None:
        return None if self.record is None else dict(self.record)

    def set_settings(self, settings: dict[str, object]) -> None:
        self.record = dict(settings)


@dataclass
class FakeChefAiClient(ChefAiClient):
    """Fake model client returning queued payloads."""

    json_payloads: list[dict[str, object]] = field(default_factory=list)
    text: str = "• 鸡蛋 x3"
    image: bytes = b"fake-image"
    error: Exception | None = None
    calls: list[tuple[str, str]] = field(default_factory=list)
    last_image: tuple[bytes, str] | None = None

    async def generate_json(
        self, *, model: str, prompt: str, schema: dict[str, object], name: str
    ) -> dict[str, object]:
        self.calls.append((name, model))
        if self.error is not None:
            raise self.error
        return self.json_payloads.pop(0) if self.json_payloads else {}

    async def generate_text(self, *, model: str, prompt: str) -> str:
        self.calls.append(("text", model))
        if self.error is not None:
            raise self.error
        return self.text

    async def edit_image(
        self, *, model: str, image_bytes: bytes, mime_type: str, prompt: str
    ) -> bytes:
        self.calls.append(("edit_image", model))
        self.last_image = (image_bytes, mime_type)
        if self.error is not None:
            raise self.error
        return self.image

    async def generate_image(self, *, model: str, prompt: str) -> bytes:
        self.calls.append(("generate_image", model))
        if self.error is not None:
            raise self.error
        return self.image


@dataclass
class FakeChefNoteApi(ChefNoteApi):
    """In-memory stand-in for the remote API with failure injection.

    ``fail`` names operations that raise; ``fail_update_ids`` makes updates of
    specific recipes raise. ``on_call`` runs before each operation resolves.
    """

    recipes: list[Recipe] = field(default_factory=list)
    categories: list[str] = field(default_factory=lambda: ["炒菜", "甜品"])
    settings: AppSettings = field(default_factory=AppSettings)
    fail: set[str] = field(default_factory=set)
    fail_update_ids: set[str] = field(default_factory=set)
    calls: list[str] = field(default_factory=list)
    on_call: Callable[[str], None] | None = None
    recommendation: MenuRecommendation = field(
        default_factory=lambda: MenuRecommendation(selected_ids=[], reasoning="")
    )
    theme: MenuTheme = field(
        default_factory=lambda: MenuTheme(
            title="家宴", description="秋风起", idiom="团圆", theme_color="orange"
        )
    )
    search_ids: list[str] = field(default_factory=list)
    closed: bool = False

    def _enter(self, operation: str) -> None:
        self.calls.append(operation)
        if self.on_call is not None:
            self.on_call(operation)
        if operation in self.fail:
            raise ChefNoteApiError(f"{operation} failed", status_code=500)

    async def list_recipes(self) -> list[Recipe]:
        self._enter("list_recipes")
        return list(self.recipes)

    async def create_recipe(self, recipe: Recipe) -> Recipe:
        self._enter("create_recipe")
        self.recipes.insert(0, recipe)
        return recipe

    async def update_recipe(self, recipe: Recipe) -> Recipe:
        self._enter("update_recipe")
        if recipe.id in self.fail_update_ids:
            raise ChefNoteApiError(f"update {recipe.id} failed", status_code=500)
        self.recipes = [recipe if r.id == recipe.id else r for r in self.recipes]
        return recipe

    async def delete_recipe(self, recipe_id: str) -> None:
        self._enter("delete_recipe")
        self.recipes = [r for r in self.recipes if r.id != recipe_id]

    async def list_categories(self) -> list[str]:
        self._enter("list_categories")
        return list(self.categories)

    async def replace_categories(self, categories: list[str]) -> list[str]:
        self._enter("replace_categories")
        self.categories = list(categories)
        return list(categories)

    async def get_settings(self) -> AppSettings:
        self._enter("get_settings")
        return self.settings

    async def update_settings(self, changes: dict[str, object]) -> AppSettings:
        self._enter("update_settings")
        self.settings = self.settings.merged(changes)
        return self.settings

    async def optimize_image(self, image: str) -> str:
        self._enter("optimize_image")
        return "data:image/png;base64,b3B0aW1pemVk"

    async def generate_image(self, prompt: str) -> str:
        self._enter("generate_image")
        return "data:image/png;base64,Z2VuZXJhdGVk"

    async def recommend_menu(
        self, recipes: list[Recipe], people_count: int
    ) -> MenuRecommendation:
        self._enter("recommend_menu")
        return self.recommendation

    async def generate_menu_theme(
        self, recipes: list[Recipe], selected_ids: list[str]
    ) -> MenuTheme:
        self._enter("generate_menu_theme")
        return self.theme

    async def generate_prep_list(
        self, recipes: list[Recipe], selected_ids: list[str]
    ) -> str:
        self._enter("generate_prep_list")
        return "• 鸡蛋: 3个"

    async def search_recipes(self, query: str, recipes: list[Recipe]) -> list[str]:
        self._enter("search_recipes")
        return list(self.search_ids)

    async def close(self) -> None:
        self.closed = True


@dataclass
class FakeTimer:
    delay: float
    callback: Callable[[], None]
    cancelled: bool = False

    def cancel(self) -> None:
        self.cancelled = True


@dataclass
class FakeScheduler:
    """Records scheduled callbacks instead of running an event loop."""

    timers: list[FakeTimer] = field(default_factory=list)

    def call_later(self, delay: float, callback: Callable[[], None]) -> FakeTimer:
        timer = FakeTimer(delay, callback)
        self.timers.append(timer)
        return timer

    def fire_all(self) -> None:
        for timer in list(self.timers):
            if not timer.cancelled:
                timer.callback()


def build_app(
    api: FakeChefNoteApi,
    scheduler: FakeScheduler,
    location: InMemoryLocationBar | None = None,
) -> ChefNoteApp:
    """Create a client app over a fake API and a fake timer."""
    app = ChefNoteApp.create(
        ClientSettings(), location=location or InMemoryLocationBar(), api=api
    )
    app.notifications.scheduler_factory = lambda: scheduler
    return app


@pytest.fixture
def settings() -> Settings:
    return Settings(
        supabase_url="https://example.supabase.co",
        supabase_service_key="eyJhbGciOiJIUzI1NiJ9.eyJyb2xlIjoic2VydmljZSJ9.c2ln",
        openai_api_key="openai-key",
    )


@pytest.fixture
def scheduler() -> FakeScheduler:
    return FakeScheduler()


@pytest.fixture
def api() -> FakeChefNoteApi:
    return FakeChefNoteApi(
        recipes=[
            make_recipe("3", "红烧肉", "炖菜", created_at=3_000),
            make_recipe("2", "番茄炒蛋", "炒菜", created_at=2_000),
            make_recipe("1", "双皮奶", "甜品", created_at=1_000),
        ],
        categories=["炒菜", "炖菜", "甜品"],
    )


@pytest.fixture
def ai_client() -> FakeChefAiClient:
    return FakeChefAiClient()


@pytest.fixture
def container(settings: Settings, ai_client: FakeChefAiClient) -> AppContainer:
    app_settings_service = AppSettingsService(
        repository=InMemoryAppSettingsRepository(),
        defaults=AppSettings(
            ai_model=settings.openai_text_model,
            image_model=settings.openai_image_model,
        ),
    )

    async def close_resources() -> None:
        return None

    return AppContainer(
        settings=settings,
        recipe_service=RecipeService(InMemoryRecipeRepository()),
        category_service=CategoryService(InMemoryCategoryRepository()),
        app_settings_service=app_settings_service,
        ai_service=AiService(client=ai_client, settings_service=app_settings_service),
        close_resources=close_resources,
    )
