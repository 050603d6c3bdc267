"""AI helpers for menus, prep lists, search and food photos."""

import json
import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import UTC, date, datetime
from typing import Protocol

from pydantic import ValidationError

from chefnote.domain.images import parse_data_url, to_data_url
from chefnote.domain.menu import FALLBACK_MENU_THEME, MenuRecommendation, MenuTheme
from chefnote.domain.recipes import Recipe
from chefnote.services.categories import AppSettingsService

logger = logging.getLogger(__name__)

RECOMMENDATION_SCHEMA: dict[str, object] = {
    "type": "object",
    "properties": {
        "selectedIds": {"type": "array", "items": {"type": "string"}},
        "reasoning": {"type": "string"},
    },
    "required": ["selectedIds", "reasoning"],
    "additionalProperties": False,
}

MENU_THEME_SCHEMA: dict[str, object] = {
    "type": "object",
    "properties": {
        "title": {"type": "string"},
        "description": {"type": "string"},
        "idiom": {"type": "string"},
        "themeColor": {
            "type": "string",
            "enum": ["red", "orange", "green", "blue", "neutral"],
        },
    },
    "required": ["title", "description", "idiom", "themeColor"],
    "additionalProperties": False,
}

SEARCH_SCHEMA: dict[str, object] = {
    "type": "object",
    "properties": {"ids": {"type": "array", "items": {"type": "string"}}},
    "required": ["ids"],
    "additionalProperties": False,
}

OPTIMIZE_IMAGE_PROMPT = (
    "Enhance this food photo. Make it look like professional high-end food "
    "photography with warm lighting, appetizing glossy texture, and studio "
    "quality. Improve color grading, contrast and sharpness."
)


class ChefAiClient(Protocol):
    """Interface for the text and image model provider."""

    async def generate_json(
        self, *, model: str, prompt: str, schema: dict[str, object], name: str
    ) -> dict[str, object]:
        """Return structured output matching the schema."""

    async def generate_text(self, *, model: str, prompt: str) -> str:
        """Return free-form text."""

    async def edit_image(
        self, *, model: str, image_bytes: bytes, mime_type: str, prompt: str
    ) -> bytes:
        """Return an edited image."""

    async def generate_image(self, *, model: str, prompt: str) -> bytes:
        """Return a generated image."""


def season_for(day: date) -> str:
    """Return the northern-hemisphere season for a date."""
    month = day.month
    if 3 <= month <= 5:
        return "Spring"
    if 6 <= month <= 8:
        return "Summer"
    if 9 <= month <= 11:
        return "Autumn"
    return "Winter"


def _recipe_brief(recipe: Recipe) -> dict[str, object]:
    return {
        "id": recipe.id,
        "title": recipe.title,
        "category": recipe.category,
        "ingredients": [
            {"name": item.name, "amount": item.amount} for item in recipe.ingredients
        ],
    }


def _selected(recipes: list[Recipe], selected_ids: list[str]) -> list[Recipe]:
    wanted = set(selected_ids)
    return [recipe for recipe in recipes if recipe.id in wanted]


def _today() -> date:
    return datetime.now(tz=UTC).date()


@dataclass
class AiService:
    """Service that builds prompts and validates model output."""

    client: ChefAiClient
    settings_service: AppSettingsService
    today: Callable[[], date] = field(default=_today)

    def _text_model(self) -> str:
        return self.settings_service.get_settings().ai_model

    def _image_model(self) -> str:
        return self.settings_service.get_settings().image_model

    async def recommend_menu(
        self, recipes: list[Recipe], people_count: int
    ) -> MenuRecommendation:
        """Pick a balanced, seasonal set of dishes for a group."""
        model = self._text_model()
        logger.info("AI request: recommend menu (model=%s)", model)
        season = season_for(self.today())
        prompt = (
            f"Select dishes for a meal for {people_count} people. "
            f"Current season: {season}.\n"
            "Rules: about one dish per person plus one; mix meat, vegetables "
            "and soup when available; prefer seasonal dishes; avoid repeating "
            "main ingredients. Explain the choice briefly in Chinese.\n"
            f"Available recipes: "
            f"{json.dumps([_recipe_brief(r) for r in recipes], ensure_ascii=False)}"
        )
        raw = await self.client.generate_json(
            model=model,
            prompt=prompt,
            schema=RECOMMENDATION_SCHEMA,
            name="menu_recommendation",
        )
        recommendation = MenuRecommendation.model_validate(raw)
        known = {recipe.id for recipe in recipes}
        return MenuRecommendation(
            selected_ids=[rid for rid in recommendation.selected_ids if rid in known],
            reasoning=recommendation.reasoning,
        )

    async def generate_menu_theme(
        self, recipes: list[Recipe], selected_ids: list[str]
    ) -> MenuTheme:
        """Generate a banquet theme; malformed output falls back to a default."""
        model = self._text_model()
        logger.info("AI request: generate menu theme (model=%s)", model)
        names = ", ".join(recipe.title for recipe in _selected(recipes, selected_ids))
        prompt = (
            f"Today is {self.today().isoformat()}. "
            f"I have selected these dishes for a meal: {names}. "
            "Generate a sophisticated Chinese banquet menu theme. The description "
            "must not describe the dishes; it is a short poetic, seasonal or "
            "atmospheric sentence under 20 words. The idiom has 3-4 characters."
        )
        raw = await self.client.generate_json(
            model=model, prompt=prompt, schema=MENU_THEME_SCHEMA, name="menu_theme"
        )
        try:
            return MenuTheme.model_validate(raw)
        except ValidationError:
            logger.warning("Menu theme output did not match schema: %s", raw)
            return FALLBACK_MENU_THEME

    async def generate_prep_list(
        self, recipes: list[Recipe], selected_ids: list[str]
    ) -> str:
        """Generate a consolidated shopping and prep checklist."""
        model = self._text_model()
        logger.info("AI request: generate prep list (model=%s)", model)
        lines = [
            f"{recipe.title}: "
            + ", ".join(f"{item.name} ({item.amount})" for item in recipe.ingredients)
            for recipe in _selected(recipes, selected_ids)
        ]
        prompt = (
            "Based on these dishes and ingredients:\n"
            + "\n".join(lines)
            + "\nGenerate a consolidated shopping/prep list. Combine identical "
            "ingredients. Format as a simple checklist."
        )
        return await self.client.generate_text(model=model, prompt=prompt)

    async def search_recipes(self, query: str, recipes: list[Recipe]) -> list[str]:
        """Return ids of recipes matching a natural-language query."""
        model = self._text_model()
        logger.info("AI request: search (model=%s)", model)
        prompt = (
            f"User query: {query}\n"
            "Return the ids of the recipes that match the query, best first.\n"
            f"Recipes: "
            f"{json.dumps([_recipe_brief(r) for r in recipes], ensure_ascii=False)}"
        )
        raw = await self.client.generate_json(
            model=model, prompt=prompt, schema=SEARCH_SCHEMA, name="recipe_search"
        )
        ids = raw.get("ids", [])
        known = {recipe.id for recipe in recipes}
        if not isinstance(ids, list):
            return []
        return [str(rid) for rid in ids if str(rid) in known]

    async def optimize_image(self, image: str) -> str:
        """Enhance a food photo given as a data URL."""
        model = self._image_model()
        mime_type, image_bytes = parse_data_url(image)
        logger.info(
            "AI request: optimize image (model=%s, type=%s, bytes=%d)",
            model,
            mime_type,
            len(image_bytes),
        )
        result = await self.client.edit_image(
            model=model,
            image_bytes=image_bytes,
            mime_type=mime_type,
            prompt=OPTIMIZE_IMAGE_PROMPT,
        )
        return to_data_url(result, "image/png")

    async def generate_image(self, prompt: str) -> str:
        """Generate a cover image from a text prompt."""
        model = self._image_model()
        logger.info("AI request: generate image (model=%s)", model)
        result = await self.client.generate_image(model=model, prompt=prompt)
        return to_data_url(result, "image/png")
