"""In-memory entity store mirrored from the remote API."""

from dataclasses import dataclass, field

from chefnote.domain.app_settings import AppSettings
from chefnote.domain.recipes import Recipe, sort_newest_first


@dataclass
class EntityStore:
    """Single owned state object for recipes, categories and settings.

    Reads return immutable snapshots. Writes come from the initial load and
    from the mutation coordinator only.
    """

    _recipes: list[Recipe] = field(default_factory=list)
    _categories: list[str] = field(default_factory=list)
    _settings: AppSettings | None = None
    loaded: bool = False

    @property
    def recipes(self) -> tuple[Recipe, ...]:
        return tuple(self._recipes)

    @property
    def categories(self) -> tuple[str, ...]:
        return tuple(self._categories)

    @property
    def settings(self) -> AppSettings | None:
        return self._settings

    def recipe_by_id(self, recipe_id: str) -> Recipe | None:
        """Return the recipe with the given id, if loaded."""
        for recipe in self._recipes:
            if recipe.id == recipe_id:
                return recipe
        return None

    def load(
        self,
        recipes: list[Recipe],
        categories: list[str],
        settings: AppSettings | None,
    ) -> None:
        """Replace everything with freshly fetched data."""
        self._recipes = sort_newest_first(list(recipes))
        self._categories = list(categories)
        self._settings = settings
        self.loaded = True

    def mark_loaded(self) -> None:
        """Mark the initial load as finished even if it failed."""
        self.loaded = True

    def prepend_recipe(self, recipe: Recipe) -> None:
        self._recipes = [recipe, *self._recipes]

    def replace_recipe(self, recipe: Recipe) -> None:
        self._recipes = [
            recipe if existing.id == recipe.id else existing
            for existing in self._recipes
        ]

    def replace_recipes(self, recipes: list[Recipe]) -> None:
        """Replace several recipes by id in one pass."""
        by_id = {recipe.id: recipe for recipe in recipes}
        self._recipes = [by_id.get(existing.id, existing) for existing in self._recipes]

    def remove_recipe(self, recipe_id: str) -> None:
        self._recipes = [r for r in self._recipes if r.id != recipe_id]

    def set_categories(self, categories: list[str]) -> None:
        self._categories = list(categories)

    def set_settings(self, settings: AppSettings) -> None:
        self._settings = settings
