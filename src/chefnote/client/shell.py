"""Application shell: wiring and user-facing handlers."""

import asyncio
import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field

from chefnote.adapters.chefnote_api_client import (
    ChefNoteApi,
    ChefNoteApiError,
    HttpxChefNoteApiClient,
)
from chefnote.adapters.memory_location import InMemoryLocationBar
from chefnote.app_logging import configure_logging
from chefnote.client.category_editor import CategoryEditor
from chefnote.client.coordinator import MutationCoordinator
from chefnote.client.notifications import NotificationChannel
from chefnote.client.recipe_form import RecipeForm
from chefnote.client.router import LocationBar, RouteState, ViewRouter
from chefnote.client.screens import (
    CookingLogDraft,
    Screen,
    ViewContext,
    build_screen,
    shows_navbar,
)
from chefnote.client.store import EntityStore
from chefnote.client.transitions import TransitionFrame, TransitionPresenter
from chefnote.config import ClientSettings
from chefnote.domain.app_settings import AppSettings
from chefnote.domain.errors import (
    CategoryCascadeError,
    CategoryValidationError,
    RecipeValidationError,
)
from chefnote.domain.navigation import Direction, View
from chefnote.domain.recipes import Recipe
from chefnote.domain.validation import validate_cooking_log

logger = logging.getLogger(__name__)


@dataclass
class ChefNoteApp:
    """Owns the store, router and coordinator for one running client."""

    api: ChefNoteApi
    store: EntityStore
    router: ViewRouter
    coordinator: MutationCoordinator
    notifications: NotificationChannel
    presenter: TransitionPresenter = field(default_factory=TransitionPresenter)
    image_cdn_host: str | None = None
    frame: TransitionFrame | None = None
    _local: object = None

    def __post_init__(self) -> None:
        self.router.add_listener(self._on_route_change)
        self.router.sync()
        self._on_route_change(self.router.state)

    @classmethod
    def create(
        cls,
        settings: ClientSettings,
        location: LocationBar | None = None,
        api: ChefNoteApi | None = None,
    ) -> "ChefNoteApp":
        """Build an app wired to the HTTP API described by ``settings``."""
        configure_logging()
        if api is None:
            api = HttpxChefNoteApiClient.create(
                settings.api_base_url, timeout=settings.api_timeout_seconds
            )
        store = EntityStore()
        router = ViewRouter(location or InMemoryLocationBar(), store)
        notifications = NotificationChannel(duration=settings.notification_seconds)
        coordinator = MutationCoordinator(api, store, router, notifications)
        return cls(
            api=api,
            store=store,
            router=router,
            coordinator=coordinator,
            notifications=notifications,
            presenter=TransitionPresenter(reduced_motion=settings.reduced_motion),
            image_cdn_host=settings.image_cdn_host,
        )

    @property
    def context(self) -> ViewContext:
        return ViewContext(
            store=self.store,
            api=self.api,
            coordinator=self.coordinator,
            notifications=self.notifications,
            image_cdn_host=self.image_cdn_host,
        )

    @property
    def screen(self) -> Screen:
        """The current screen, reusing local state while the key is stable."""
        state = self.router.state
        screen = build_screen(state.view, state.entity, self.context, self._local)
        self._local = screen.state
        return screen

    @property
    def show_navbar(self) -> bool:
        return shows_navbar(self.router.current_view, self.store)

    async def start(self) -> None:
        """Load recipes, categories and settings in parallel.

        A failed load still leaves a usable, empty app.
        """
        try:
            recipes, categories, settings = await asyncio.gather(
                self.api.list_recipes(),
                self.api.list_categories(),
                self.api.get_settings(),
            )
        except Exception:
            logger.exception("Initial load failed")
            self.store.mark_loaded()
            self.notifications.error("数据加载失败，请刷新重试")
        else:
            self.store.load(recipes, categories, settings)
            logger.info(
                "Loaded %s recipes and %s categories", len(recipes), len(categories)
            )
        self.router.sync()

    async def close(self) -> None:
        await self.api.close()

    def open_recipe(self, recipe: Recipe) -> None:
        self.router.navigate(View.RECIPE_DETAIL, Direction.FORWARD, recipe)

    def edit_recipe(self, recipe: Recipe) -> None:
        self.router.navigate(View.ADD_RECIPE, Direction.FORWARD, recipe)

    def open_order_mode(self) -> None:
        self.router.navigate(View.ORDER_MODE, Direction.FORWARD)

    def open_settings(self) -> None:
        self.router.navigate(View.SETTINGS, Direction.FORWARD)

    def select_tab(self, view: View) -> None:
        """Navbar tap; "add" always opens a blank form."""
        entity = None if view is View.ADD_RECIPE else self.router.selected
        self.router.navigate(view, Direction.FORWARD, entity)

    def go_back(self) -> None:
        """Leave the current view: the edit form returns to its recipe."""
        selected = self.router.selected
        if self.router.current_view is View.ADD_RECIPE and selected is not None:
            self.router.navigate(View.RECIPE_DETAIL, Direction.BACKWARD, selected)
        else:
            self.router.navigate(View.HOME, Direction.BACKWARD)

    async def save_form(self) -> Recipe | None:
        """Submit the add/edit form; edits land back on the recipe."""
        form = self.screen.state
        if not isinstance(form, RecipeForm):
            return None
        try:
            saved = await form.submit(self.coordinator)
        except RecipeValidationError as exc:
            self.notifications.error(str(exc))
            return None
        except ChefNoteApiError:
            return None
        if saved is not None and form.is_editing:
            self.router.navigate(View.RECIPE_DETAIL, Direction.FORWARD, saved)
        return saved

    async def optimize_cover(self) -> bool:
        form = self.screen.state
        if not isinstance(form, RecipeForm):
            return False
        return await form.optimize_cover(self.api, self.notifications)

    async def delete_recipe(self) -> bool:
        recipe = self.router.selected
        if recipe is None:
            return False
        try:
            await self.coordinator.delete_recipe(recipe.id)
        except ChefNoteApiError:
            return False
        return True

    async def save_cooking_log(self) -> Recipe | None:
        recipe = self.router.selected
        draft = self.screen.state
        if recipe is None or not isinstance(draft, CookingLogDraft):
            return None
        try:
            validate_cooking_log(draft.image, draft.note)
            saved = await self.coordinator.add_cooking_log(
                recipe, draft.image.strip(), draft.note.strip()
            )
        except RecipeValidationError as exc:
            self.notifications.error(str(exc))
            return None
        except ChefNoteApiError:
            return None
        draft.image = ""
        draft.note = ""
        return saved

    async def delete_cooking_log(self, log_id: str) -> Recipe | None:
        recipe = self.router.selected
        if recipe is None:
            return None
        try:
            return await self.coordinator.delete_cooking_log(recipe, log_id)
        except ChefNoteApiError:
            return None

    async def use_log_as_cover(self, log_id: str) -> Recipe | None:
        recipe = self.router.selected
        if recipe is None:
            return None
        log = next((entry for entry in recipe.logs if entry.id == log_id), None)
        if log is None or not log.image:
            return None
        try:
            return await self.coordinator.set_cover_image(recipe, log.image)
        except ChefNoteApiError:
            return None

    async def add_category(self, name: str) -> bool:
        return await self._edit_categories(lambda editor: editor.add(name))

    async def remove_category(self, index: int) -> bool:
        return await self._edit_categories(lambda editor: editor.remove(index))

    async def rename_category(self, index: int, new_name: str) -> bool:
        return await self._edit_categories(
            lambda editor: editor.rename(index, new_name)
        )

    async def drop_category(self) -> bool:
        return await self._edit_categories(lambda editor: editor.drop())

    async def update_settings(self, **changes: object) -> AppSettings | None:
        try:
            return await self.coordinator.update_settings(changes)
        except ChefNoteApiError:
            return None

    async def ai_search(self, query: str) -> list[Recipe]:
        """Semantic search; results keep collection order."""
        if not query.strip():
            return []
        recipes = list(self.store.recipes)
        try:
            ids = set(await self.api.search_recipes(query.strip(), recipes))
        except ChefNoteApiError as exc:
            logger.warning("AI search failed: %s", exc)
            self.notifications.error("AI 搜索失败")
            return []
        return [recipe for recipe in recipes if recipe.id in ids]

    async def _edit_categories(
        self, action: Callable[[CategoryEditor], Awaitable[bool]]
    ) -> bool:
        editor = self.screen.state
        if not isinstance(editor, CategoryEditor):
            return False
        try:
            return await action(editor)
        except CategoryValidationError as exc:
            self.notifications.error(str(exc))
            return False
        except (CategoryCascadeError, ChefNoteApiError):
            # Already logged and reported by the coordinator.
            return False

    def _on_route_change(self, state: RouteState) -> None:
        frame = self.presenter.present(state.view, state.direction, state.entity)
        if self.frame is None or frame.key != self.frame.key:
            self._local = None
        self.frame = frame
