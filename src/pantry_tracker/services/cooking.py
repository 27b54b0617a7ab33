"""Cooking a saved recipe against the user's pantry.

Cooking is all-or-nothing. Every ingredient is checked first: an ingredient
with no pantry reference, or whose referenced record no longer exists for the
user, is *missing*; one whose record holds less than the recipe uses is
*insufficient*. Any missing or insufficient ingredient rejects the whole
attempt and nothing is decremented.

When every ingredient is covered, the decrements are handed to the pantry
repository as a single unit of work. The repository re-checks each quantity
while applying it, so stock consumed by a concurrent request between the check
and the write surfaces as ``StockConflictError`` instead of driving a record
negative. Records that reach zero are deleted. The recipe itself is never
modified and can be cooked again.
"""

import logging
from dataclasses import dataclass
from uuid import UUID

from pantry_tracker.domain.errors import StockConflictError
from pantry_tracker.domain.pantry import StockDecrement
from pantry_tracker.domain.recipes import CookResult, Recipe
from pantry_tracker.services.authorization import authorize_resource
from pantry_tracker.services.pantry import PantryRepository
from pantry_tracker.services.recipes import RecipeRepository

_logger = logging.getLogger(__name__)

COOKED_MESSAGE = (
    "Recipe cooked successfully! Ingredients have been subtracted from your pantry."
)
CONFLICT_MESSAGE = (
    "Cannot cook this recipe: your pantry changed while cooking. Please try again."
)


@dataclass(frozen=True)
class _StockCheck:
    missing: list[str]
    insufficient: list[str]
    decrements: list[StockDecrement]

    @property
    def ok(self) -> bool:
        return not self.missing and not self.insufficient


@dataclass
class CookService:
    """Validate pantry stock for a recipe and consume it."""

    recipe_repository: RecipeRepository
    pantry_repository: PantryRepository

    def cook(self, user_id: UUID, recipe_id: UUID) -> CookResult:
        """Cook a recipe the user owns, decrementing pantry stock."""
        recipe = authorize_resource(
            self.recipe_repository.get_recipe(recipe_id),
            lambda item: item.user_id,
            user_id,
            "Recipe",
        )
        check = self._check_stock(user_id, recipe)
        if not check.ok:
            _logger.info(
                "Rejected cooking recipe %s: missing=%s insufficient=%s",
                recipe.id,
                len(check.missing),
                len(check.insufficient),
            )
            return _rejected(check)

        try:
            self.pantry_repository.consume_stock(user_id, check.decrements)
        except StockConflictError:
            _logger.info("Pantry changed while cooking recipe %s", recipe.id)
            recheck = self._check_stock(user_id, recipe)
            if not recheck.ok:
                return _rejected(recheck)
            return CookResult(success=False, message=CONFLICT_MESSAGE)

        return CookResult(success=True, message=COOKED_MESSAGE)

    def _check_stock(self, user_id: UUID, recipe: Recipe) -> _StockCheck:
        missing: list[str] = []
        insufficient: list[str] = []
        decrements: list[StockDecrement] = []
        remaining: dict[UUID, float] = {}

        for ingredient in recipe.ingredients:
            record_id = ingredient.user_food_item_id
            if record_id is None:
                missing.append(ingredient.name)
                continue
            if record_id not in remaining:
                record = self.pantry_repository.get_record(record_id)
                if record is None or record.user_id != user_id:
                    missing.append(ingredient.name)
                    continue
                remaining[record_id] = record.quantity

            available = remaining[record_id]
            if available < ingredient.quantity_used:
                insufficient.append(
                    f"{ingredient.name} (have {_format_amount(available)} "
                    f"{ingredient.unit}, need "
                    f"{_format_amount(ingredient.quantity_used)} {ingredient.unit})"
                )
                continue
            remaining[record_id] = available - ingredient.quantity_used
            decrements.append(
                StockDecrement(
                    user_food_item_id=record_id,
                    quantity=ingredient.quantity_used,
                )
            )

        return _StockCheck(
            missing=missing, insufficient=insufficient, decrements=decrements
        )


def _rejected(check: _StockCheck) -> CookResult:
    clauses = []
    if check.missing:
        clauses.append(f"Missing ingredients: {', '.join(check.missing)}.")
    if check.insufficient:
        clauses.append(f"Insufficient quantities: {', '.join(check.insufficient)}.")
    return CookResult(
        success=False,
        message="Cannot cook this recipe: " + " ".join(clauses),
        missing=check.missing,
        insufficient=check.insufficient,
    )


def _format_amount(value: float) -> str:
    return f"{value:.12g}"
