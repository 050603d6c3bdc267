"""Mutation coordinator for recipes, categories and settings.

Invariant: local collection mutation happens strictly after remote
acknowledgment, never before. A failed remote call leaves the entity store
exactly as it was, posts one error notification and re-raises so the caller
can stop its loading state and keep its draft. Nothing is retried here, and
concurrent calls are not sequenced against each other.
"""

import asyncio
import logging
import time
from collections.abc import Callable
from dataclasses import dataclass, field, replace

from chefnote.adapters.chefnote_api_client import ChefNoteApi
from chefnote.client.notifications import NotificationChannel
from chefnote.client.router import ViewRouter
from chefnote.client.store import EntityStore
from chefnote.domain.app_settings import AppSettings
from chefnote.domain.errors import CategoryCascadeError, RecipeNotFoundError
from chefnote.domain.navigation import Direction, View
from chefnote.domain.recipes import CookingLog, Recipe, RecipeDraft

logger = logging.getLogger(__name__)


def _now_ms() -> int:
    return time.time_ns() // 1_000_000


def _new_id() -> str:
    return str(time.time_ns())


@dataclass
class MutationCoordinator:
    """The only writer of the entity store after the initial load."""

    api: ChefNoteApi
    store: EntityStore
    router: ViewRouter
    notifications: NotificationChannel
    clock: Callable[[], int] = field(default=_now_ms)
    id_factory: Callable[[], str] = field(default=_new_id)

    async def create_recipe(self, draft: RecipeDraft) -> Recipe:
        """Create a recipe, prepend it locally and go home."""
        recipe = Recipe.from_draft(
            draft, recipe_id=self.id_factory(), created_at=self.clock()
        )
        try:
            saved = await self.api.create_recipe(recipe)
        except Exception as exc:
            self._report_failure("创建失败", exc)
            raise
        self.store.prepend_recipe(saved)
        self.router.navigate(View.HOME, Direction.BACKWARD)
        self.notifications.success("新菜谱已添加")
        return saved

    async def update_recipe(
        self, recipe: Recipe, message: str = "菜谱更新成功"
    ) -> Recipe:
        """Replace a recipe remotely, then locally by id."""
        try:
            saved = await self.api.update_recipe(recipe)
        except Exception as exc:
            self._report_failure("保存失败", exc)
            raise
        self.store.replace_recipe(saved)
        self.router.sync()
        self.notifications.success(message)
        return saved

    async def add_cooking_log(self, recipe: Recipe, image: str, note: str) -> Recipe:
        """Prepend a cooking log (newest first)."""
        log = CookingLog(
            id=self.id_factory(), date=self.clock(), image=image, note=note
        )
        return await self.update_recipe(
            replace(recipe, logs=[log, *recipe.logs]), message="烹饪记录已保存"
        )

    async def delete_cooking_log(self, recipe: Recipe, log_id: str) -> Recipe:
        """Remove one cooking log from a recipe."""
        logs = [log for log in recipe.logs if log.id != log_id]
        return await self.update_recipe(
            replace(recipe, logs=logs), message="烹饪记录已删除"
        )

    async def set_cover_image(self, recipe: Recipe, image: str) -> Recipe:
        """Use an image (e.g. from a cooking log) as the cover."""
        return await self.update_recipe(
            replace(recipe, cover_image=image), message="封面已更新"
        )

    async def delete_recipe(self, recipe_id: str) -> None:
        """Delete a recipe remotely, then locally, and go home."""
        if self.store.recipe_by_id(recipe_id) is None:
            raise RecipeNotFoundError(recipe_id)
        try:
            await self.api.delete_recipe(recipe_id)
        except Exception as exc:
            self._report_failure("删除失败", exc)
            raise
        self.store.remove_recipe(recipe_id)
        self.router.navigate(View.HOME, Direction.BACKWARD)
        self.notifications.success("菜谱已删除")

    async def update_categories(self, categories: list[str]) -> list[str]:
        """Replace the whole ordered category list."""
        try:
            stored = await self.api.replace_categories(list(categories))
        except Exception as exc:
            self._report_failure("分类更新失败", exc)
            raise
        self.store.set_categories(stored)
        self.notifications.success("分类已更新")
        return stored

    async def rename_category(self, old_name: str, new_name: str) -> list[Recipe]:
        """Rename a category and move every recipe carrying it.

        The list update must succeed before any recipe is touched. Recipe
        updates then run in parallel and are all awaited; successful ones are
        committed even when others fail, and the failures are reported via
        CategoryCascadeError.
        """
        if old_name == new_name:
            return []
        renamed = [
            new_name if label == old_name else label
            for label in self.store.categories
        ]
        try:
            stored = await self.api.replace_categories(renamed)
        except Exception as exc:
            self._report_failure("重命名失败", exc)
            raise
        self.store.set_categories(stored)

        dependents = [r for r in self.store.recipes if r.category == old_name]
        results = await asyncio.gather(
            *(
                self.api.update_recipe(replace(recipe, category=new_name))
                for recipe in dependents
            ),
            return_exceptions=True,
        )
        committed: list[Recipe] = []
        failed_ids: list[str] = []
        for recipe, result in zip(dependents, results, strict=True):
            if isinstance(result, BaseException):
                logger.warning(
                    "Recipe %s kept category %r after rename: %s",
                    recipe.id,
                    old_name,
                    result,
                )
                failed_ids.append(recipe.id)
            else:
                committed.append(result)
        self.store.replace_recipes(committed)
        self.router.sync()

        if failed_ids:
            error = CategoryCascadeError(old_name, new_name, failed_ids)
            self.notifications.error(
                f"分类已重命名，但有 {len(failed_ids)} 个菜谱未能更新"
            )
            raise error
        self.notifications.success("分类重命名成功")
        return committed

    async def update_settings(self, changes: dict[str, object]) -> AppSettings:
        """Merge partial settings remotely, then locally."""
        try:
            stored = await self.api.update_settings(changes)
        except Exception as exc:
            self._report_failure("设置保存失败", exc)
            raise
        self.store.set_settings(stored)
        self.notifications.success("设置已保存")
        return stored

    def _report_failure(self, action: str, exc: Exception) -> None:
        logger.warning("%s: %s", action, exc)
        self.notifications.error(f"{action}: {exc}")
