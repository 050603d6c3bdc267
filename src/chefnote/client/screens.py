"""Screen models produced from the router state.

``build_screen`` is the only place that maps a ``View`` to what is shown.
Per-view local state (filters, drafts, carts) is passed back in while the
mounted view keeps its key, and rebuilt from scratch when the key changes.
"""

from dataclasses import dataclass, field
from typing import assert_never

from chefnote.adapters.chefnote_api_client import ChefNoteApi
from chefnote.client.category_editor import CategoryEditor
from chefnote.client.coordinator import MutationCoordinator
from chefnote.client.filters import RecipeFilter, category_chips
from chefnote.client.notifications import NotificationChannel
from chefnote.client.order import OrderSession
from chefnote.client.recipe_form import RecipeForm
from chefnote.client.store import EntityStore
from chefnote.domain.app_settings import IMAGE_MODELS, TEXT_MODELS, AppSettings
from chefnote.domain.images import optimized_image_url
from chefnote.domain.navigation import View
from chefnote.domain.recipes import PROFICIENCY_LABELS, Recipe

LIST_IMAGE_WIDTH = 400
DETAIL_IMAGE_WIDTH = 800


@dataclass
class CookingLogDraft:
    """Unsaved cooking log on the detail view."""

    image: str = ""
    note: str = ""


@dataclass(frozen=True)
class ViewContext:
    """Collaborators shared by every screen."""

    store: EntityStore
    api: ChefNoteApi
    coordinator: MutationCoordinator
    notifications: NotificationChannel
    image_cdn_host: str | None = None


@dataclass(frozen=True)
class HomeScreen:
    recipes: list[Recipe]
    chips: list[str]
    state: RecipeFilter
    cover_urls: dict[str, str] = field(default_factory=dict)


@dataclass(frozen=True)
class RecipeFormScreen:
    categories: list[str]
    state: RecipeForm


@dataclass(frozen=True)
class OrderScreen:
    recipes: list[Recipe]
    chips: list[str]
    state: OrderSession


@dataclass(frozen=True)
class CategoryManagerScreen:
    recipe_counts: dict[str, int]
    state: CategoryEditor


@dataclass(frozen=True)
class RecipeDetailScreen:
    recipe: Recipe
    proficiency_label: str
    cover_url: str
    state: CookingLogDraft


@dataclass(frozen=True)
class SettingsScreen:
    settings: AppSettings
    text_models: tuple[str, ...]
    image_models: tuple[str, ...]
    state: None = None


Screen = (
    HomeScreen
    | RecipeFormScreen
    | OrderScreen
    | CategoryManagerScreen
    | RecipeDetailScreen
    | SettingsScreen
)


def shows_navbar(view: View, store: EntityStore) -> bool:
    """The navbar is visible on top-level views once data has loaded."""
    return store.loaded and view.traits.shows_navbar


def _cover(recipe: Recipe, width: int, cdn_host: str | None) -> str:
    return optimized_image_url(recipe.cover_image, width, cdn_host)


def build_screen(
    view: View, entity: Recipe | None, context: ViewContext, local: object = None
) -> Screen:
    """Build the screen model for a view.

    ``local`` is the previous screen's state for the same mount key, if any.
    """
    store = context.store
    match view:
        case View.HOME:
            recipe_filter = local if isinstance(local, RecipeFilter) else RecipeFilter()
            recipes = recipe_filter.apply(store.recipes, store.categories)
            return HomeScreen(
                recipes=recipes,
                chips=category_chips(store.categories, store.recipes),
                state=recipe_filter,
                cover_urls={
                    recipe.id: _cover(recipe, LIST_IMAGE_WIDTH, context.image_cdn_host)
                    for recipe in recipes
                },
            )
        case View.ADD_RECIPE:
            form = (
                local
                if isinstance(local, RecipeForm)
                else RecipeForm.for_recipe(entity, store.categories)
            )
            return RecipeFormScreen(categories=list(store.categories), state=form)
        case View.ORDER_MODE:
            session = (
                local
                if isinstance(local, OrderSession)
                else OrderSession(store, context.api, context.notifications)
            )
            return OrderScreen(
                recipes=session.visible_recipes(),
                chips=category_chips(store.categories, store.recipes),
                state=session,
            )
        case View.CATEGORY_MANAGER:
            editor = (
                local
                if isinstance(local, CategoryEditor)
                else CategoryEditor(store, context.coordinator)
            )
            counts = {label: 0 for label in store.categories}
            for recipe in store.recipes:
                if recipe.category in counts:
                    counts[recipe.category] += 1
            return CategoryManagerScreen(recipe_counts=counts, state=editor)
        case View.RECIPE_DETAIL:
            if entity is None:
                raise ValueError("Recipe detail needs a recipe")
            draft = local if isinstance(local, CookingLogDraft) else CookingLogDraft()
            return RecipeDetailScreen(
                recipe=entity,
                proficiency_label=PROFICIENCY_LABELS.get(entity.proficiency, ""),
                cover_url=_cover(entity, DETAIL_IMAGE_WIDTH, context.image_cdn_host),
                state=draft,
            )
        case View.SETTINGS:
            return SettingsScreen(
                settings=store.settings or AppSettings(),
                text_models=TEXT_MODELS,
                image_models=IMAGE_MODELS,
            )
        case _:
            assert_never(view)
