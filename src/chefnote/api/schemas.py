"""Pydantic models for the JSON wire format (camelCase)."""

from pydantic import BaseModel, ConfigDict, Field

from chefnote.domain.app_settings import AppSettings
from chefnote.domain.recipes import CookingLog, Ingredient, Recipe


class _CamelModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True)


class IngredientPayload(_CamelModel):
    """Ingredient payload."""

    name: str
    amount: str = ""


class CookingLogPayload(_CamelModel):
    """Cooking log payload."""

    id: str
    date: int
    image: str = ""
    note: str = ""


class RecipePayload(_CamelModel):
    """Recipe payload as stored and exchanged with the client."""

    id: str | None = None
    title: str | None = None
    category: str = ""
    cover_image: str = Field(default="", alias="coverImage")
    proficiency: int = Field(default=1, ge=1, le=5)
    source_link: str | None = Field(default=None, alias="sourceLink")
    ingredients: list[IngredientPayload] = Field(default_factory=list)
    steps: list[str] = Field(default_factory=list)
    logs: list[CookingLogPayload] = Field(default_factory=list)
    created_at: int = Field(default=0, alias="createdAt")

    @classmethod
    def from_domain(cls, recipe: Recipe) -> "RecipePayload":
        """Build a payload from a domain recipe."""
        return cls(
            id=recipe.id,
            title=recipe.title,
            category=recipe.category,
            cover_image=recipe.cover_image,
            proficiency=recipe.proficiency,
            source_link=recipe.source_link,
            ingredients=[
                IngredientPayload(name=item.name, amount=item.amount)
                for item in recipe.ingredients
            ],
            steps=list(recipe.steps),
            logs=[
                CookingLogPayload(
                    id=log.id, date=log.date, image=log.image, note=log.note
                )
                for log in recipe.logs
            ],
            created_at=recipe.created_at,
        )

    def to_domain(self) -> Recipe:
        """Convert to a domain recipe; id and title must be present."""
        if not self.id or not self.title:
            raise ValueError("Missing required fields")
        return Recipe(
            id=self.id,
            title=self.title,
            category=self.category,
            cover_image=self.cover_image,
            proficiency=self.proficiency,
            source_link=self.source_link or None,
            ingredients=[
                Ingredient(name=item.name, amount=item.amount)
                for item in self.ingredients
            ],
            steps=list(self.steps),
            logs=[
                CookingLog(id=log.id, date=log.date, image=log.image, note=log.note)
                for log in self.logs
            ],
            created_at=self.created_at,
        )

    def to_json(self) -> dict[str, object]:
        """Serialize with camelCase keys."""
        return self.model_dump(by_alias=True, mode="json")


class SettingsPayload(_CamelModel):
    """Partial or full settings record."""

    ai_model: str | None = Field(default=None, alias="aiModel")
    image_model: str | None = Field(default=None, alias="imageModel")

    @classmethod
    def from_domain(cls, settings: AppSettings) -> "SettingsPayload":
        """Build a payload from domain settings."""
        return cls(ai_model=settings.ai_model, image_model=settings.image_model)

    def changes(self) -> dict[str, object]:
        """Return only the fields that were provided."""
        return self.model_dump(exclude_none=True)


class RecommendMenuRequest(_CamelModel):
    """Request body for menu recommendations."""

    recipes: list[RecipePayload]
    people_count: int = Field(alias="peopleCount", ge=1)


class SelectedRecipesRequest(_CamelModel):
    """Request body for AI helpers operating on a selection."""

    recipes: list[RecipePayload]
    selected_ids: list[str] = Field(alias="selectedIds")


class SearchRequest(_CamelModel):
    """Request body for AI recipe search."""

    query: str
    recipes: list[RecipePayload]


class ImageRequest(_CamelModel):
    """Request body carrying a data URL."""

    image: str


class GenerateImageRequest(_CamelModel):
    """Request body for image generation."""

    prompt: str


def recipes_to_domain(payloads: list[RecipePayload]) -> list[Recipe]:
    """Convert payloads, skipping entries without id or title."""
    return [payload.to_domain() for payload in payloads if payload.id and payload.title]
