"""Recipe, category and settings endpoints."""

from __future__ import annotations

from typing import TYPE_CHECKING

from fastapi import APIRouter, Request, Response, status

from chefnote.api.schemas import RecipePayload, SettingsPayload

if TYPE_CHECKING:
    from chefnote.containers import AppContainer

router = APIRouter(prefix="/api", tags=["recipes"])


def _container(request: Request) -> AppContainer:
    return request.app.state.container


@router.get("/recipes")
async def list_recipes(request: Request) -> list[dict[str, object]]:
    """Return all recipes, newest first."""
    recipes = _container(request).recipe_service.list_recipes()
    return [RecipePayload.from_domain(recipe).to_json() for recipe in recipes]


@router.post("/recipes", status_code=status.HTTP_201_CREATED)
async def create_recipe(payload: RecipePayload, request: Request) -> dict[str, object]:
    """Store a recipe whose id was assigned by the client."""
    recipe = _container(request).recipe_service.create_recipe(payload.to_domain())
    return RecipePayload.from_domain(recipe).to_json()


@router.put("/recipes/{recipe_id}")
async def update_recipe(
    recipe_id: str, payload: RecipePayload, request: Request
) -> dict[str, object]:
    """Replace a recipe; the stored id and creation time win."""
    if not payload.id:
        payload = payload.model_copy(update={"id": recipe_id})
    recipe = _container(request).recipe_service.update_recipe(
        recipe_id, payload.to_domain()
    )
    return RecipePayload.from_domain(recipe).to_json()


@router.delete("/recipes/{recipe_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_recipe(recipe_id: str, request: Request) -> Response:
    """Delete a recipe."""
    _container(request).recipe_service.delete_recipe(recipe_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get("/categories")
async def list_categories(request: Request) -> list[str]:
    """Return the ordered category list."""
    return _container(request).category_service.list_categories()


@router.put("/categories")
async def replace_categories(categories: list[str], request: Request) -> list[str]:
    """Replace the whole category list."""
    return _container(request).category_service.replace_categories(categories)


@router.get("/settings")
async def get_settings(request: Request) -> dict[str, object]:
    settings = _container(request).app_settings_service.get_settings()
    return SettingsPayload.from_domain(settings).model_dump(by_alias=True)


@router.put("/settings")
async def update_settings(
    payload: SettingsPayload, request: Request
) -> dict[str, object]:
    """Merge a partial settings update."""
    settings = _container(request).app_settings_service.update_settings(
        payload.changes()
    )
    return SettingsPayload.from_domain(settings).model_dump(by_alias=True)
