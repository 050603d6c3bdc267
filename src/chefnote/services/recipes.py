"""Server-side recipe service."""

from dataclasses import dataclass, replace
from typing import Protocol

from chefnote.domain.errors import RecipeNotFoundError
from chefnote.domain.recipes import Recipe, sort_newest_first


class RecipeRepository(Protocol):
    """Persistence interface for recipes."""

    def list_recipes(self) -> list[Recipe]:
        """Return all stored recipes."""

    def get_recipe(self, recipe_id: str) -> Recipe | None:
        """Return a recipe by id, if present."""

    def insert_recipe(self, recipe: Recipe) -> Recipe:
        """Store a new recipe and return it."""

    def replace_recipe(self, recipe: Recipe) -> Recipe:
        """Overwrite an existing recipe and return it."""

    def delete_recipe(self, recipe_id: str) -> None:
        """Delete a recipe by id."""


@dataclass
class RecipeService:
    """Application service for recipe storage."""

    repository: RecipeRepository

    def list_recipes(self) -> list[Recipe]:
        """Return recipes newest first."""
        return sort_newest_first(self.repository.list_recipes())

    def create_recipe(self, recipe: Recipe) -> Recipe:
        """Store a client-identified recipe."""
        if not recipe.id or not recipe.title:
            raise ValueError("Missing required fields")
        return self.repository.insert_recipe(recipe)

    def update_recipe(self, recipe_id: str, recipe: Recipe) -> Recipe:
        """Replace a recipe wholesale, keeping its identity and creation time."""
        existing = self.repository.get_recipe(recipe_id)
        if existing is None:
            raise RecipeNotFoundError(recipe_id)
        updated = replace(recipe, id=existing.id, created_at=existing.created_at)
        return self.repository.replace_recipe(updated)

    def delete_recipe(self, recipe_id: str) -> None:
        """Delete a recipe, failing for unknown ids."""
        if self.repository.get_recipe(recipe_id) is None:
            raise RecipeNotFoundError(recipe_id)
        self.repository.delete_recipe(recipe_id)
