"""Models for AI menu suggestions."""

from typing import Literal

from pydantic import BaseModel, Field


class MenuRecommendation(BaseModel):
    """Recipes picked for a meal by the model."""

    selected_ids: list[str] = Field(alias="selectedIds")
    reasoning: str | None = None

    model_config = {"populate_by_name": True}


class MenuTheme(BaseModel):
    """Poster-style theme for a selected set of dishes."""

    title: str
    description: str
    idiom: str
    theme_color: Literal["red", "orange", "green", "blue", "neutral"] = Field(
        default="neutral", alias="themeColor"
    )

    model_config = {"populate_by_name": True}


FALLBACK_MENU_THEME = MenuTheme(
    title="ChefNote·私宴",
    description="人间至味是清欢",
    idiom="知味",
    theme_color="neutral",
)
