"""Domain models for saved recipes."""

from dataclasses import dataclass, field
from datetime import datetime
from uuid import UUID


@dataclass(frozen=True)
class RecipeIngredient:
    """Ingredient line of a saved recipe.

    ``user_food_item_id`` is a lookup key into the pantry, not an ownership
    relation. The referenced record may have been deleted since the recipe was
    saved, in which case the ingredient has no linked stock.
    """

    id: UUID
    recipe_id: UUID
    name: str
    fdc_id: int | None
    quantity_used: float
    unit: str
    user_food_item_id: UUID | None


@dataclass(frozen=True)
class Recipe:
    """A recipe saved by a user."""

    id: UUID
    user_id: UUID
    title: str
    description: str | None
    servings: int | None
    prep_time: str | None
    cook_time: str | None
    steps: list[str]
    created_at: datetime
    ingredients: list[RecipeIngredient] = field(default_factory=list)


@dataclass(frozen=True)
class CookResult:
    """Outcome of cooking a recipe against the current pantry."""

    success: bool
    message: str
    missing: list[str] = field(default_factory=list)
    insufficient: list[str] = field(default_factory=list)
