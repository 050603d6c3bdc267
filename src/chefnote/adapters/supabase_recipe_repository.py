"""Supabase repository for recipes."""

from dataclasses import dataclass

from supabase import Client

from chefnote.domain.recipes import CookingLog, Ingredient, Recipe
from chefnote.services.recipes import RecipeRepository


@dataclass
class SupabaseRecipeRepository(RecipeRepository):
    """Supabase-backed recipe storage.

    Ingredients, steps and logs live in JSON columns of the ``recipes`` table.
    """

    client: Client

    def list_recipes(self) -> list[Recipe]:
        """Return all recipes."""
        response = (
            self.client.table("recipes")
            .select("*")
            .order("created_at", desc=True)
            .execute()
        )
        return [_parse_recipe(row) for row in response.data or []]

    def get_recipe(self, recipe_id: str) -> Recipe | None:
        """Return a recipe by id, if present."""
        response = (
            self.client.table("recipes")
            .select("*")
            .eq("id", recipe_id)
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        return _parse_recipe(response.data[0])

    def insert_recipe(self, recipe: Recipe) -> Recipe:
        """Insert a recipe row."""
        response = self.client.table("recipes").insert(_to_row(recipe)).execute()
        if not response.data:
            raise RuntimeError("Failed to create recipe")
        return _parse_recipe(response.data[0])

    def replace_recipe(self, recipe: Recipe) -> Recipe:
        """Overwrite every column of a recipe row."""
        row = _to_row(recipe)
        row.pop("id")
        response = (
            self.client.table("recipes").update(row).eq("id", recipe.id).execute()
        )
        if not response.data:
            raise RuntimeError("Failed to update recipe")
        return _parse_recipe(response.data[0])

    def delete_recipe(self, recipe_id: str) -> None:
        """Delete a recipe row."""
        self.client.table("recipes").delete().eq("id", recipe_id).execute()


def _to_row(recipe: Recipe) -> dict[str, object]:
    return {
        "id": recipe.id,
        "title": recipe.title,
        "category": recipe.category,
        "cover_image": recipe.cover_image,
        "proficiency": recipe.proficiency,
        "source_link": recipe.source_link,
        "ingredients": [
            {"name": item.name, "amount": item.amount} for item in recipe.ingredients
        ],
        "steps": list(recipe.steps),
        "logs": [
            {"id": log.id, "date": log.date, "image": log.image, "note": log.note}
            for log in recipe.logs
        ],
        "created_at": recipe.created_at,
    }


def _parse_recipe(row: dict[str, object]) -> Recipe:
    """Parse a recipe row into a domain model."""
    ingredients = row.get("ingredients") or []
    steps = row.get("steps") or []
    logs = row.get("logs") or []
    return Recipe(
        id=str(row["id"]),
        title=str(row.get("title", "")),
        category=str(row.get("category", "")),
        cover_image=str(row.get("cover_image") or ""),
        proficiency=int(row.get("proficiency", 1)),
        source_link=row.get("source_link") or None,
        ingredients=[
            Ingredient(
                name=str(item.get("name", "")), amount=str(item.get("amount", ""))
            )
            for item in ingredients
            if isinstance(item, dict)
        ],
        steps=[str(step) for step in steps],
        logs=[
            CookingLog(
                id=str(log.get("id", "")),
                date=int(log.get("date", 0)),
                image=str(log.get("image") or ""),
                note=str(log.get("note") or ""),
            )
            for log in logs
            if isinstance(log, dict)
        ],
        created_at=int(row.get("created_at", 0)),
    )
