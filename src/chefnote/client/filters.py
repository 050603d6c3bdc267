"""Category chips and title search over the recipe collection."""

from collections.abc import Iterable, Sequence
from dataclasses import dataclass

from chefnote.domain.recipes import Recipe

ALL = "All"
UNCATEGORIZED = "Uncategorized"


def category_chips(categories: Sequence[str], recipes: Iterable[Recipe]) -> list[str]:
    """Chips to show above a recipe list.

    Recipes may carry a label that is no longer in the category list; those
    are collected under an extra "Uncategorized" chip.
    """
    chips = [ALL, *categories]
    known = set(categories)
    if any(recipe.category not in known for recipe in recipes):
        chips.append(UNCATEGORIZED)
    return chips


@dataclass
class RecipeFilter:
    """Active chip plus free-text query."""

    category: str = ALL
    query: str = ""

    def matches(self, recipe: Recipe, categories: Sequence[str]) -> bool:
        if self.category == UNCATEGORIZED:
            in_category = recipe.category not in categories
        else:
            in_category = self.category == ALL or recipe.category == self.category
        needle = self.query.strip().lower()
        return in_category and needle in recipe.title.lower()

    def apply(
        self, recipes: Iterable[Recipe], categories: Sequence[str]
    ) -> list[Recipe]:
        """Return matching recipes in their original order."""
        return [recipe for recipe in recipes if self.matches(recipe, categories)]

    def select(self, category: str, categories: Sequence[str]) -> None:
        """Switch chips; an unknown chip falls back to "All"."""
        if category in {ALL, UNCATEGORIZED} or category in categories:
            self.category = category
        else:
            self.category = ALL
