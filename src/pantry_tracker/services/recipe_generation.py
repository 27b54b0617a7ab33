"""Recipe generation from prioritized pantry ingredients."""

import json
import logging
from dataclasses import dataclass

import pydantic

from pantry_tracker.domain.errors import GenerationError, ValidationError
from pantry_tracker.domain.generation import GeneratedRecipe, RecipeIngredientInput
from pantry_tracker.services.text_generation import (
    TextGenerationClient,
    strip_code_fences,
)

_logger = logging.getLogger(__name__)

_RECIPE_SHAPE = """{
  "title": "string",
  "description": "string (optional)",
  "servings": integer (optional),
  "prepTime": "string (optional)",
  "cookTime": "string (optional)",
  "steps": ["string", ...],
  "usedIngredients": [
    {
      "userFoodItemId": "the id given for the ingredient, copied exactly",
      "fdcId": integer or null,
      "name": "string",
      "quantityUsed": number greater than 0,
      "unit": "string"
    }
  ]
}"""


@dataclass
class RecipeGenerator:
    """Generate a recipe that favours the earliest-listed ingredients."""

    client: TextGenerationClient

    async def generate(
        self, ingredients: list[RecipeIngredientInput]
    ) -> GeneratedRecipe:
        """Generate a recipe from ingredients sorted by priority."""
        if not ingredients:
            raise ValidationError("At least one ingredient is required")
        prompt = build_recipe_prompt(ingredients)
        try:
            raw = await self.client.generate_text(prompt)
        except Exception as exc:
            _logger.warning("Recipe generation call failed: %s", exc)
            raise GenerationError("Failed to generate recipe") from exc
        recipe = parse_recipe(raw)
        return _drop_unknown_references(recipe, ingredients)


def build_recipe_prompt(ingredients: list[RecipeIngredientInput]) -> str:
    """Build the generation prompt, listing ingredients in priority order."""
    lines = [
        f"{index}. id={item.user_food_item_id} | {item.name} | "
        f"{_format_quantity(item.quantity)} {item.unit}"
        + (f" | fdcId={item.fdc_id}" if item.fdc_id is not None else "")
        for index, item in enumerate(ingredients, start=1)
    ]
    return (
        "Create one recipe using ingredients from this pantry list. "
        "The list is ordered by priority: prefer ingredients that appear "
        "earlier, since they expire sooner. You do not have to use every "
        "ingredient and must not use more of one than is listed. Standard "
        "pantry staples such as salt, pepper and oil may be assumed available "
        "and must not be listed as used ingredients.\n\n"
        "Pantry ingredients:\n"
        + "\n".join(lines)
        + "\n\nFor every ingredient you use, copy its id exactly into "
        '"userFoodItemId" and give the amount used in the listed unit.\n'
        "Respond with only a JSON object of this shape and no other text:\n"
        + _RECIPE_SHAPE
    )


def parse_recipe(raw: str) -> GeneratedRecipe:
    """Parse a model reply into a recipe, raising GenerationError on mismatch."""
    try:
        payload = json.loads(strip_code_fences(raw))
    except json.JSONDecodeError as exc:
        _logger.warning("Recipe reply is not JSON: %r", raw)
        raise GenerationError("Recipe generation returned invalid JSON") from exc
    if not isinstance(payload, dict):
        raise GenerationError("Recipe generation returned an unexpected shape")
    try:
        return GeneratedRecipe.model_validate(payload)
    except pydantic.ValidationError as exc:
        _logger.warning("Recipe reply failed validation: %s", exc)
        raise GenerationError(
            "Recipe generation returned an unexpected shape"
        ) from exc


def _drop_unknown_references(
    recipe: GeneratedRecipe, ingredients: list[RecipeIngredientInput]
) -> GeneratedRecipe:
    known = {item.user_food_item_id for item in ingredients}
    used = []
    for ingredient in recipe.used_ingredients:
        reference = ingredient.user_food_item_id
        if reference is not None and reference not in known:
            _logger.info("Dropping unknown pantry reference %s", reference)
            ingredient = ingredient.model_copy(update={"user_food_item_id": None})
        used.append(ingredient)
    return recipe.model_copy(update={"used_ingredients": used})


def _format_quantity(quantity: float) -> str:
    return f"{quantity:g}"
