"""Draft state of the add/edit recipe form."""

import logging
from collections.abc import Sequence
from dataclasses import dataclass, field

from chefnote.adapters.chefnote_api_client import ChefNoteApi
from chefnote.client.coordinator import MutationCoordinator
from chefnote.client.notifications import NotificationChannel
from chefnote.domain.recipes import (
    DEFAULT_COVER_IMAGE,
    Ingredient,
    Recipe,
    RecipeDraft,
)
from chefnote.domain.validation import normalize_draft, validate_draft

logger = logging.getLogger(__name__)

FALLBACK_CATEGORY = "其他"


def _blank_ingredients() -> list[Ingredient]:
    return [Ingredient(name="")]


def _blank_steps() -> list[str]:
    return [""]


@dataclass
class RecipeForm:
    """Editable rows for one recipe.

    The form keeps whatever the user typed when a save fails; it is only
    discarded when the view it belongs to is unmounted.
    """

    title: str = ""
    category: str = FALLBACK_CATEGORY
    cover_image: str | None = None
    proficiency: int = 1
    source_link: str = ""
    ingredients: list[Ingredient] = field(default_factory=_blank_ingredients)
    steps: list[str] = field(default_factory=_blank_steps)
    editing: Recipe | None = None
    saving: bool = False
    optimizing: bool = False

    @classmethod
    def for_recipe(
        cls, recipe: Recipe | None, categories: Sequence[str]
    ) -> "RecipeForm":
        """Seed the form from a recipe (edit mode) or defaults (create mode)."""
        if recipe is None:
            return cls(category=categories[0] if categories else FALLBACK_CATEGORY)
        return cls(
            title=recipe.title,
            category=recipe.category,
            cover_image=recipe.cover_image,
            proficiency=recipe.proficiency,
            source_link=recipe.source_link or "",
            ingredients=list(recipe.ingredients) or _blank_ingredients(),
            steps=list(recipe.steps) or _blank_steps(),
            editing=recipe,
        )

    @property
    def is_editing(self) -> bool:
        return self.editing is not None

    def add_ingredient(self) -> None:
        self.ingredients.append(Ingredient(name=""))

    def update_ingredient(
        self, index: int, *, name: str | None = None, amount: str | None = None
    ) -> None:
        current = self.ingredients[index]
        self.ingredients[index] = Ingredient(
            name=current.name if name is None else name,
            amount=current.amount if amount is None else amount,
        )

    def remove_ingredient(self, index: int) -> None:
        del self.ingredients[index]

    def add_step(self) -> None:
        self.steps.append("")

    def update_step(self, index: int, text: str) -> None:
        self.steps[index] = text

    def remove_step(self, index: int) -> None:
        del self.steps[index]

    def to_draft(self) -> RecipeDraft:
        """Return a normalized draft or raise RecipeValidationError."""
        draft = normalize_draft(
            RecipeDraft(
                title=self.title,
                category=self.category,
                cover_image=self.cover_image or DEFAULT_COVER_IMAGE,
                proficiency=self.proficiency,
                ingredients=list(self.ingredients),
                steps=list(self.steps),
                source_link=self.source_link,
            )
        )
        validate_draft(draft)
        return draft

    async def submit(self, coordinator: MutationCoordinator) -> Recipe | None:
        """Validate and save; returns None when a save is already running.

        Validation errors are raised before any remote call. Remote failures
        are reported by the coordinator and re-raised here.
        """
        if self.saving:
            return None
        draft = self.to_draft()
        self.saving = True
        try:
            if self.editing is None:
                return await coordinator.create_recipe(draft)
            return await coordinator.update_recipe(self.editing.with_draft(draft))
        finally:
            self.saving = False

    async def optimize_cover(
        self, api: ChefNoteApi, notifications: NotificationChannel
    ) -> bool:
        """Replace the cover with an AI-enhanced version of itself."""
        if not self.cover_image or self.optimizing:
            return False
        self.optimizing = True
        try:
            self.cover_image = await api.optimize_image(self.cover_image)
        except Exception as exc:
            logger.warning("Cover optimization failed: %s", exc)
            notifications.error("图片优化失败，请稍后重试")
            return False
        finally:
            self.optimizing = False
        notifications.success("图片已优化")
        return True
