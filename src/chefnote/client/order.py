"""Order mode: pick dishes for a meal and prepare them."""

import logging
from dataclasses import dataclass, field

from chefnote.adapters.chefnote_api_client import ChefNoteApi
from chefnote.client.filters import RecipeFilter
from chefnote.client.notifications import NotificationChannel
from chefnote.client.store import EntityStore
from chefnote.domain.menu import MenuTheme
from chefnote.domain.recipes import Recipe

logger = logging.getLogger(__name__)

EMPTY_PREP_LIST = "未找到食材信息"


def aggregate_prep_list(recipes: list[Recipe]) -> str:
    """Merge ingredient amounts by name into a bullet list.

    Amounts for the same ingredient are joined with " + " in recipe order;
    ingredients without any amount are listed by name only.
    """
    amounts: dict[str, list[str]] = {}
    for recipe in recipes:
        for ingredient in recipe.ingredients:
            name = ingredient.name.strip()
            if not name:
                continue
            bucket = amounts.setdefault(name, [])
            if ingredient.amount.strip():
                bucket.append(ingredient.amount.strip())
    lines = [
        f"• {name}: {' + '.join(values)}" if values else f"• {name}"
        for name, values in amounts.items()
    ]
    return "\n".join(lines) if lines else EMPTY_PREP_LIST


@dataclass
class OrderSession:
    """Cart and AI helpers for one visit to order mode."""

    store: EntityStore
    api: ChefNoteApi
    notifications: NotificationChannel
    filter: RecipeFilter = field(default_factory=RecipeFilter)
    cart: list[str] = field(default_factory=list)
    people_count: int = 2
    theme: MenuTheme | None = None
    prep_text: str | None = None
    busy: bool = False
    error_detail: str | None = None

    def is_selected(self, recipe_id: str) -> bool:
        return recipe_id in self.cart

    def toggle(self, recipe_id: str) -> None:
        if recipe_id in self.cart:
            self.cart.remove(recipe_id)
        else:
            self.cart.append(recipe_id)

    def clear(self) -> None:
        self.cart.clear()
        self.theme = None
        self.prep_text = None

    def set_people_count(self, count: int) -> None:
        if count < 1:
            raise ValueError("用餐人数至少为 1")
        self.people_count = count

    @property
    def selected_recipes(self) -> list[Recipe]:
        """Selected recipes in collection order; unknown ids are skipped."""
        return [recipe for recipe in self.store.recipes if recipe.id in self.cart]

    def visible_recipes(self) -> list[Recipe]:
        return self.filter.apply(self.store.recipes, self.store.categories)

    def grouped_menu(self) -> dict[str, list[Recipe]]:
        """Selected recipes grouped by their own category label."""
        groups: dict[str, list[Recipe]] = {}
        for recipe in self.selected_recipes:
            groups.setdefault(recipe.category, []).append(recipe)
        return groups

    def build_prep_list(self) -> str | None:
        """Aggregate ingredients locally; no-op with an empty cart."""
        if not self.cart:
            return None
        self.prep_text = aggregate_prep_list(self.selected_recipes)
        return self.prep_text

    async def recommend(self) -> list[str]:
        """Let the AI fill the cart, then theme the resulting menu.

        The selection is kept even when theming fails.
        """
        if self.busy:
            return []
        self.busy = True
        self.error_detail = None
        try:
            recipes = list(self.store.recipes)
            try:
                recommendation = await self.api.recommend_menu(
                    recipes, self.people_count
                )
            except Exception as exc:
                logger.warning("Menu recommendation failed: %s", exc)
                self.error_detail = str(exc)
                self.notifications.error("AI 推荐失败")
                return []
            self.cart = list(recommendation.selected_ids)
            try:
                self.theme = await self.api.generate_menu_theme(recipes, self.cart)
            except Exception as exc:
                logger.warning("Menu theme generation failed: %s", exc)
                self.notifications.error(
                    "菜单海报生成失败，但菜品已选好"
                )
            return list(self.cart)
        finally:
            self.busy = False

    async def generate_theme(self) -> MenuTheme | None:
        if not self.cart or self.busy:
            return None
        self.busy = True
        self.error_detail = None
        try:
            self.theme = await self.api.generate_menu_theme(
                list(self.store.recipes), list(self.cart)
            )
        except Exception as exc:
            logger.warning("Menu theme generation failed: %s", exc)
            self.error_detail = str(exc)
            self.notifications.error("菜单生成失败")
            return None
        finally:
            self.busy = False
        return self.theme

    async def generate_ai_prep_list(self) -> str | None:
        """Ask the AI for a consolidated shopping and prep list."""
        if not self.cart or self.busy:
            return None
        self.busy = True
        try:
            self.prep_text = await self.api.generate_prep_list(
                list(self.store.recipes), list(self.cart)
            )
        except Exception as exc:
            logger.warning("Prep list generation failed: %s", exc)
            self.notifications.error("备菜清单生成失败")
            return None
        finally:
            self.busy = False
        return self.prep_text
