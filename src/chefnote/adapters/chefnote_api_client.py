"""HTTP client for the ChefNote JSON API."""

from collections.abc import Callable
from dataclasses import dataclass
from typing import Any, Protocol, TypeVar
from urllib.parse import quote

import httpx

from chefnote.api.schemas import RecipePayload, SettingsPayload
from chefnote.domain.app_settings import AppSettings
from chefnote.domain.menu import MenuRecommendation, MenuTheme
from chefnote.domain.recipes import Recipe

T = TypeVar("T")


class ChefNoteApiError(RuntimeError):
    """Raised when the API rejects a request or cannot be reached."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class ChefNoteApi(Protocol):
    """Interface for the remote recipe store and AI helpers."""

    async def list_recipes(self) -> list[Recipe]:
        """Return recipes newest first."""

    async def create_recipe(self, recipe: Recipe) -> Recipe:
        """Create a recipe and return the stored version."""

    async def update_recipe(self, recipe: Recipe) -> Recipe:
        """Replace a recipe and return the stored version."""

    async def delete_recipe(self, recipe_id: str) -> None:
        """Delete a recipe."""

    async def list_categories(self) -> list[str]:
        """Return the ordered category list."""

    async def replace_categories(self, categories: list[str]) -> list[str]:
        """Replace the category list and return the stored list."""

    async def get_settings(self) -> AppSettings:
        """Return app settings."""

    async def update_settings(self, changes: dict[str, object]) -> AppSettings:
        """Merge partial settings and return the result."""

    async def optimize_image(self, image: str) -> str:
        """Return an enhanced copy of a data-URL image."""

    async def generate_image(self, prompt: str) -> str:
        """Return a generated data-URL image."""

    async def recommend_menu(
        self, recipes: list[Recipe], people_count: int
    ) -> MenuRecommendation:
        """Return recommended recipe ids."""

    async def generate_menu_theme(
        self, recipes: list[Recipe], selected_ids: list[str]
    ) -> MenuTheme:
        """Return a menu theme for the selection."""

    async def generate_prep_list(
        self, recipes: list[Recipe], selected_ids: list[str]
    ) -> str:
        """Return a prep list for the selection."""

    async def search_recipes(self, query: str, recipes: list[Recipe]) -> list[str]:
        """Return ids of matching recipes."""

    async def close(self) -> None:
        """Release network resources."""


def _brief(recipe: Recipe) -> dict[str, object]:
    """Lightweight recipe payload for AI endpoints (no images or logs)."""
    return {
        "id": recipe.id,
        "title": recipe.title,
        "category": recipe.category,
        "ingredients": [
            {"name": item.name, "amount": item.amount} for item in recipe.ingredients
        ],
    }


@dataclass
class HttpxChefNoteApiClient(ChefNoteApi):
    """ChefNote API client implemented with httpx."""

    base_url: str
    http_client: httpx.AsyncClient
    timeout: float = 30.0

    @classmethod
    def create(
        cls, base_url: str, timeout: float = 30.0
    ) -> "HttpxChefNoteApiClient":
        """Create an API client with a managed httpx session."""
        return cls(
            base_url=base_url.rstrip("/"),
            http_client=httpx.AsyncClient(),
            timeout=timeout,
        )

    async def _request(
        self, method: str, path: str, json: object | None = None
    ) -> httpx.Response:
        url = f"{self.base_url}{path}"
        try:
            response = await self.http_client.request(
                method, url, json=json, timeout=self.timeout
            )
        except httpx.HTTPError as exc:
            raise ChefNoteApiError(f"{method} {path} failed: {exc}") from exc
        if response.is_error:
            raise ChefNoteApiError(
                _error_message(response, f"{method} {path} failed"),
                status_code=response.status_code,
            )
        return response

    async def _fetch(
        self,
        method: str,
        path: str,
        parse: Callable[[Any], T],
        json: object | None = None,
    ) -> T:
        """Send a request and parse its JSON body.

        Undecodable or unexpected bodies are reported as ChefNoteApiError.
        """
        response = await self._request(method, path, json=json)
        try:
            return parse(response.json())
        except (ValueError, TypeError, KeyError, AttributeError) as exc:
            raise ChefNoteApiError(
                f"{method} {path} returned an unexpected response: {exc}",
                status_code=response.status_code,
            ) from exc

    async def list_recipes(self) -> list[Recipe]:
        """Fetch all recipes."""
        return await self._fetch(
            "GET", "/recipes", lambda body: [_parse_recipe(row) for row in body]
        )

    async def create_recipe(self, recipe: Recipe) -> Recipe:
        """Create a recipe."""
        payload = RecipePayload.from_domain(recipe).to_json()
        return await self._fetch("POST", "/recipes", _parse_recipe, json=payload)

    async def update_recipe(self, recipe: Recipe) -> Recipe:
        """Replace a recipe."""
        payload = RecipePayload.from_domain(recipe).to_json()
        path = f"/recipes/{quote(recipe.id, safe='')}"
        return await self._fetch("PUT", path, _parse_recipe, json=payload)

    async def delete_recipe(self, recipe_id: str) -> None:
        """Delete a recipe."""
        await self._request("DELETE", f"/recipes/{quote(recipe_id, safe='')}")

    async def list_categories(self) -> list[str]:
        """Fetch the category list."""
        return await self._fetch("GET", "/categories", _parse_labels)

    async def replace_categories(self, categories: list[str]) -> list[str]:
        """Replace the category list."""
        return await self._fetch("PUT", "/categories", _parse_labels, json=categories)

    async def get_settings(self) -> AppSettings:
        """Fetch settings."""
        return await self._fetch("GET", "/settings", _parse_settings)

    async def update_settings(self, changes: dict[str, object]) -> AppSettings:
        """Send a partial settings update."""
        payload = SettingsPayload.model_validate(changes).model_dump(
            by_alias=True, exclude_none=True
        )
        return await self._fetch("PUT", "/settings", _parse_settings, json=payload)

    async def optimize_image(self, image: str) -> str:
        """Request an enhanced cover photo."""
        return await self._fetch(
            "POST",
            "/ai/optimize-image",
            lambda body: str(body["image"]),
            json={"image": image},
        )

    async def generate_image(self, prompt: str) -> str:
        """Request a generated cover photo."""
        return await self._fetch(
            "POST",
            "/ai/generate-image",
            lambda body: str(body["image"]),
            json={"prompt": prompt},
        )

    async def recommend_menu(
        self, recipes: list[Recipe], people_count: int
    ) -> MenuRecommendation:
        """Request recommended dishes."""
        return await self._fetch(
            "POST",
            "/ai/recommend-menu",
            MenuRecommendation.model_validate,
            json={
                "recipes": [_brief(recipe) for recipe in recipes],
                "peopleCount": people_count,
            },
        )

    async def generate_menu_theme(
        self, recipes: list[Recipe], selected_ids: list[str]
    ) -> MenuTheme:
        """Request a menu theme."""
        return await self._fetch(
            "POST",
            "/ai/generate-menu",
            MenuTheme.model_validate,
            json={
                "recipes": [_brief(recipe) for recipe in recipes],
                "selectedIds": selected_ids,
            },
        )

    async def generate_prep_list(
        self, recipes: list[Recipe], selected_ids: list[str]
    ) -> str:
        """Request a prep list."""
        return await self._fetch(
            "POST",
            "/ai/generate-prep",
            lambda body: str(body.get("text", "")),
            json={
                "recipes": [_brief(recipe) for recipe in recipes],
                "selectedIds": selected_ids,
            },
        )

    async def search_recipes(self, query: str, recipes: list[Recipe]) -> list[str]:
        """Request an AI search over the given recipes."""
        return await self._fetch(
            "POST",
            "/ai/search",
            lambda body: [str(item) for item in body.get("ids", [])],
            json={"query": query, "recipes": [_brief(recipe) for recipe in recipes]},
        )

    async def close(self) -> None:
        """Close the underlying HTTP session."""
        await self.http_client.aclose()


def _error_message(response: httpx.Response, default: str) -> str:
    """Extract the server's ``error`` field when present."""
    try:
        body = response.json()
    except ValueError:
        return default
    if isinstance(body, dict) and body.get("error"):
        return str(body["error"])
    return default


def _parse_recipe(body: Any) -> Recipe:
    return RecipePayload.model_validate(body).to_domain()


def _parse_labels(body: Any) -> list[str]:
    if not isinstance(body, list):
        raise TypeError(f"expected a list of categories, got {type(body).__name__}")
    return [str(item) for item in body]


def _parse_settings(body: Any) -> AppSettings:
    return AppSettings().merged(SettingsPayload.model_validate(body).changes())
