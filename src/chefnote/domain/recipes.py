"""Domain models for recipes and cooking logs."""

from dataclasses import dataclass, field, replace


@dataclass(frozen=True)
class Ingredient:
    """A named ingredient with a free-text amount."""

    name: str
    amount: str = ""


@dataclass(frozen=True)
class CookingLog:
    """A single cooking attempt attached to a recipe."""

    id: str
    date: int
    image: str = ""
    note: str = ""


@dataclass(frozen=True)
class RecipeDraft:
    """Recipe fields supplied by a form, without identity or history."""

    title: str
    category: str
    cover_image: str
    proficiency: int
    ingredients: list[Ingredient]
    steps: list[str]
    source_link: str | None = None


@dataclass(frozen=True)
class Recipe:
    """A recorded recipe.

    ``id`` and ``created_at`` never change after creation. Every other field is
    replaced wholesale on update.
    """

    id: str
    title: str
    category: str
    cover_image: str
    proficiency: int
    ingredients: list[Ingredient]
    steps: list[str]
    created_at: int
    logs: list[CookingLog] = field(default_factory=list)
    source_link: str | None = None

    @classmethod
    def from_draft(
        cls, draft: RecipeDraft, recipe_id: str, created_at: int
    ) -> "Recipe":
        """Build a brand-new recipe from a draft."""
        return cls(
            id=recipe_id,
            title=draft.title,
            category=draft.category,
            cover_image=draft.cover_image,
            proficiency=draft.proficiency,
            ingredients=list(draft.ingredients),
            steps=list(draft.steps),
            created_at=created_at,
            logs=[],
            source_link=draft.source_link,
        )

    def with_draft(self, draft: RecipeDraft) -> "Recipe":
        """Return this recipe with its editable fields taken from a draft."""
        return replace(
            self,
            title=draft.title,
            category=draft.category,
            cover_image=draft.cover_image,
            proficiency=draft.proficiency,
            ingredients=list(draft.ingredients),
            steps=list(draft.steps),
            source_link=draft.source_link,
        )

    def to_draft(self) -> RecipeDraft:
        """Return the editable fields of this recipe."""
        return RecipeDraft(
            title=self.title,
            category=self.category,
            cover_image=self.cover_image,
            proficiency=self.proficiency,
            ingredients=list(self.ingredients),
            steps=list(self.steps),
            source_link=self.source_link,
        )


def sort_newest_first(recipes: list[Recipe]) -> list[Recipe]:
    """Order recipes by creation time, newest first."""
    return sorted(recipes, key=lambda recipe: recipe.created_at, reverse=True)


PROFICIENCY_LABELS: dict[int, str] = {
    1: "初次尝试",
    2: "略知一二",
    3: "渐入佳境",
    4: "得心应手",
    5: "炉火纯青",
}

DEFAULT_CATEGORIES: list[str] = ["炒菜", "炖菜", "清蒸", "甜品", "凉菜", "汤羹", "其他"]

DEFAULT_COVER_IMAGE = "https://picsum.photos/400/400"
