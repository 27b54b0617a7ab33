"""Saved recipe services."""

from dataclasses import dataclass
from typing import Protocol
from uuid import UUID

from pantry_tracker.domain.generation import GeneratedRecipe, RecipeIngredientInput
from pantry_tracker.domain.recipes import Recipe
from pantry_tracker.services.authorization import authorize_resource
from pantry_tracker.services.recipe_generation import RecipeGenerator


class RecipeRepository(Protocol):
    """Persistence interface for saved recipes and their ingredients."""

    def list_recipes(self, user_id: UUID) -> list[Recipe]:
        """Return a user's recipes, newest first."""

    def get_recipe(self, recipe_id: UUID) -> Recipe | None:
        """Return a recipe with its ingredients, if present."""

    def create_recipe(self, user_id: UUID, recipe: GeneratedRecipe) -> Recipe:
        """Persist a generated recipe and its used ingredients."""

    def delete_recipe(self, recipe_id: UUID) -> None:
        """Delete a recipe and its ingredients."""


@dataclass
class RecipeService:
    """Application service for generating and saving recipes."""

    repository: RecipeRepository
    generator: RecipeGenerator

    async def generate(
        self, ingredients: list[RecipeIngredientInput]
    ) -> GeneratedRecipe:
        """Generate a recipe from ingredients the caller sorted by priority."""
        return await self.generator.generate(ingredients)

    def list_recipes(self, user_id: UUID) -> list[Recipe]:
        """Return the user's saved recipes."""
        return self.repository.list_recipes(user_id)

    def save_recipe(self, user_id: UUID, recipe: GeneratedRecipe) -> Recipe:
        """Save a generated recipe for the user."""
        return self.repository.create_recipe(user_id, recipe)

    def delete_recipe(self, user_id: UUID, recipe_id: UUID) -> None:
        """Delete a recipe the user owns."""
        authorize_resource(
            self.repository.get_recipe(recipe_id),
            lambda recipe: recipe.user_id,
            user_id,
            "Recipe",
        )
        self.repository.delete_recipe(recipe_id)
