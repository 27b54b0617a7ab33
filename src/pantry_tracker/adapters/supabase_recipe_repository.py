"""Supabase implementation for saved recipes."""

import logging
from dataclasses import dataclass
from datetime import datetime
from uuid import UUID

from supabase import Client

from pantry_tracker.domain.generation import GeneratedRecipe
from pantry_tracker.domain.recipes import Recipe, RecipeIngredient
from pantry_tracker.services.recipes import RecipeRepository

_logger = logging.getLogger(__name__)

_RECIPE_COLUMNS = "*, recipe_ingredients(*)"


@dataclass
class SupabaseRecipeRepository(RecipeRepository):
    """Supabase-backed repository for recipes and ingredient lines."""

    client: Client

    def list_recipes(self, user_id: UUID) -> list[Recipe]:
        """Return a user's recipes, newest first."""
        response = (
            self.client.table("recipes")
            .select(_RECIPE_COLUMNS)
            .eq("user_id", str(user_id))
            .order("created_at", desc=True)
            .execute()
        )
        return [_parse_recipe(row) for row in response.data or []]

    def get_recipe(self, recipe_id: UUID) -> Recipe | None:
        """Return a recipe with its ingredients, if present."""
        response = (
            self.client.table("recipes")
            .select(_RECIPE_COLUMNS)
            .eq("id", str(recipe_id))
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        return _parse_recipe(response.data[0])

    def create_recipe(self, user_id: UUID, recipe: GeneratedRecipe) -> Recipe:
        """Insert the recipe row, then its ingredient rows.

        The recipe row is removed again when the ingredient insert fails, so a
        saved recipe never silently loses its ingredients.
        """
        response = (
            self.client.table("recipes")
            .insert(
                {
                    "user_id": str(user_id),
                    "title": recipe.title,
                    "description": recipe.description or None,
                    "servings": recipe.servings or None,
                    "prep_time": recipe.prep_time or None,
                    "cook_time": recipe.cook_time or None,
                    "steps": recipe.steps,
                }
            )
            .execute()
        )
        if not response.data:
            raise RuntimeError("Failed to create recipe")
        row = response.data[0]
        ingredient_rows: list[dict[str, object]] = []
        if recipe.used_ingredients:
            try:
                ingredient_rows = self._insert_ingredients(row["id"], recipe)
            except Exception:
                _logger.warning(
                    "Ingredient insert failed; removing recipe %s", row["id"]
                )
                self.client.table("recipes").delete().eq("id", row["id"]).execute()
                raise
        return _parse_recipe({**row, "recipe_ingredients": ingredient_rows})

    def _insert_ingredients(
        self, recipe_id: str, recipe: GeneratedRecipe
    ) -> list[dict[str, object]]:
        response = (
            self.client.table("recipe_ingredients")
            .insert(
                [
                    {
                        "recipe_id": recipe_id,
                        "user_food_item_id": (
                            str(item.user_food_item_id)
                            if item.user_food_item_id
                            else None
                        ),
                        "fdc_id": item.fdc_id,
                        "name": item.name,
                        "quantity_used": item.quantity_used,
                        "unit": item.unit,
                        "position": position,
                    }
                    for position, item in enumerate(recipe.used_ingredients)
                ]
            )
            .execute()
        )
        rows = response.data or []
        if len(rows) != len(recipe.used_ingredients):
            raise RuntimeError(f"Failed to create ingredients for recipe {recipe_id}")
        return rows

    def delete_recipe(self, recipe_id: UUID) -> None:
        """Delete a recipe; ingredient rows cascade in the database."""
        self.client.table("recipes").delete().eq("id", str(recipe_id)).execute()


def _parse_recipe(row: dict[str, object]) -> Recipe:
    """Parse a recipe row with embedded ingredients into a domain model."""
    created_raw = str(row["created_at"]).replace("Z", "+00:00")
    return Recipe(
        id=UUID(row["id"]),
        user_id=UUID(row["user_id"]),
        title=str(row.get("title", "")),
        description=row.get("description"),
        servings=row.get("servings"),
        prep_time=row.get("prep_time"),
        cook_time=row.get("cook_time"),
        steps=[str(step) for step in row.get("steps") or []],
        created_at=datetime.fromisoformat(created_raw),
        ingredients=[
            _parse_ingredient(item)
            for item in sorted(
                row.get("recipe_ingredients") or [],
                key=lambda item: item.get("position", 0),
            )
        ],
    )


def _parse_ingredient(row: dict[str, object]) -> RecipeIngredient:
    user_food_item_id = row.get("user_food_item_id")
    fdc_id = row.get("fdc_id")
    return RecipeIngredient(
        id=UUID(row["id"]),
        recipe_id=UUID(row["recipe_id"]),
        name=str(row.get("name", "")),
        fdc_id=int(fdc_id) if fdc_id is not None else None,
        quantity_used=float(row.get("quantity_used", 0.0)),
        unit=str(row.get("unit", "")),
        user_food_item_id=UUID(user_food_item_id) if user_food_item_id else None,
    )
