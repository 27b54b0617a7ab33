"""Tests for cooking recipes against the pantry."""

from uuid import uuid4

import pytest

from pantry_tracker.domain.errors import (
    ForbiddenError,
    NotFoundError,
    StockConflictError,
)
from pantry_tracker.services.cooking import COOKED_MESSAGE, CONFLICT_MESSAGE, CookService
from tests.conftest import InMemoryPantryRepository, InMemoryRecipeRepository


def _setup() -> tuple[CookService, InMemoryPantryRepository, InMemoryRecipeRepository]:
    pantry = InMemoryPantryRepository()
    recipes = InMemoryRecipeRepository()
    return CookService(recipe_repository=recipes, pantry_repository=pantry), pantry, recipes


def test_exact_exhaustion_deletes_record() -> None:
    service, pantry, recipes = _setup()
    user_id = uuid4()
    flour = pantry.add_record(user_id, "flour", 2, unit_short_name="cup")
    recipe = recipes.add_recipe(user_id, [("flour", 2, "cup", flour.id)])

    result = service.cook(user_id, recipe.id)

    assert result.success
    assert result.message == COOKED_MESSAGE
    assert flour.id not in pantry.records


def test_partial_consumption_persists_difference() -> None:
    service, pantry, recipes = _setup()
    user_id = uuid4()
    rice = pantry.add_record(user_id, "rice", 500, unit_short_name="g")
    recipe = recipes.add_recipe(user_id, [("rice", 180, "g", rice.id)])

    result = service.cook(user_id, recipe.id)

    assert result.success
    assert pantry.records[rice.id].quantity == 320


def test_insufficient_quantity_is_rejected_with_detail() -> None:
    service, pantry, recipes = _setup()
    user_id = uuid4()
    eggs = pantry.add_record(user_id, "eggs", 1)
    recipe = recipes.add_recipe(user_id, [("eggs", 3, "count", eggs.id)])

    result = service.cook(user_id, recipe.id)

    assert not result.success
    assert "eggs (have 1 count, need 3 count)" in result.message
    assert result.message.startswith("Cannot cook this recipe: Insufficient quantities:")
    assert pantry.records[eggs.id].quantity == 1
    assert pantry.consumed == []


def test_unlinked_ingredient_is_missing() -> None:
    service, pantry, recipes = _setup()
    user_id = uuid4()
    recipe = recipes.add_recipe(user_id, [("saffron", 1, "pinch", None)])

    result = service.cook(user_id, recipe.id)

    assert not result.success
    assert result.message == "Cannot cook this recipe: Missing ingredients: saffron."
    assert result.missing == ["saffron"]


def test_dangling_reference_is_missing() -> None:
    service, pantry, recipes = _setup()
    user_id = uuid4()
    milk = pantry.add_record(user_id, "milk", 1, unit_short_name="l")
    recipe = recipes.add_recipe(user_id, [("milk", 0.5, "l", milk.id)])
    pantry.delete_record(milk.id)

    result = service.cook(user_id, recipe.id)

    assert not result.success
    assert result.missing == ["milk"]


def test_another_users_record_counts_as_missing() -> None:
    service, pantry, recipes = _setup()
    user_id = uuid4()
    theirs = pantry.add_record(uuid4(), "butter", 10, unit_short_name="tbsp")
    recipe = recipes.add_recipe(user_id, [("butter", 1, "tbsp", theirs.id)])

    result = service.cook(user_id, recipe.id)

    assert result.missing == ["butter"]
    assert pantry.records[theirs.id].quantity == 10


def test_rejection_lists_every_offender_and_changes_nothing() -> None:
    service, pantry, recipes = _setup()
    user_id = uuid4()
    flour = pantry.add_record(user_id, "flour", 5, unit_short_name="cup")
    eggs = pantry.add_record(user_id, "eggs", 1)
    sugar = pantry.add_record(user_id, "sugar", 0.5, unit_short_name="cup")
    recipe = recipes.add_recipe(
        user_id,
        [
            ("flour", 2, "cup", flour.id),
            ("vanilla", 1, "tsp", None),
            ("eggs", 3, "count", eggs.id),
            ("baking soda", 1, "tsp", uuid4()),
            ("sugar", 1, "cup", sugar.id),
        ],
    )

    first = service.cook(user_id, recipe.id)
    second = service.cook(user_id, recipe.id)

    assert first == second
    assert first.message == (
        "Cannot cook this recipe: Missing ingredients: vanilla, baking soda. "
        "Insufficient quantities: eggs (have 1 count, need 3 count), "
        "sugar (have 0.5 cup, need 1 cup)."
    )
    assert pantry.records[flour.id].quantity == 5
    assert pantry.records[eggs.id].quantity == 1
    assert pantry.records[sugar.id].quantity == 0.5


def test_recipe_can_be_cooked_again_against_remaining_stock() -> None:
    service, pantry, recipes = _setup()
    user_id = uuid4()
    pasta = pantry.add_record(user_id, "pasta", 500, unit_short_name="g")
    recipe = recipes.add_recipe(user_id, [("pasta", 200, "g", pasta.id)])

    assert service.cook(user_id, recipe.id).success
    assert service.cook(user_id, recipe.id).success
    third = service.cook(user_id, recipe.id)

    assert not third.success
    assert "pasta (have 100 g, need 200 g)" in third.message
    assert pantry.records[pasta.id].quantity == 100
    assert recipe.id in recipes.recipes
    assert len(recipes.recipes[recipe.id].ingredients) == 1


def test_repeated_reference_checks_running_total() -> None:
    service, pantry, recipes = _setup()
    user_id = uuid4()
    butter = pantry.add_record(user_id, "butter", 3, unit_short_name="tbsp")
    recipe = recipes.add_recipe(
        user_id,
        [("butter", 2, "tbsp", butter.id), ("butter", 2, "tbsp", butter.id)],
    )

    result = service.cook(user_id, recipe.id)

    assert not result.success
    assert "butter (have 1 tbsp, need 2 tbsp)" in result.message
    assert pantry.records[butter.id].quantity == 3


def test_multiple_ingredients_are_all_decremented() -> None:
    service, pantry, recipes = _setup()
    user_id = uuid4()
    eggs = pantry.add_record(user_id, "eggs", 6)
    milk = pantry.add_record(user_id, "milk", 0.25, unit_short_name="l")
    recipe = recipes.add_recipe(
        user_id,
        [("eggs", 2, "count", eggs.id), ("milk", 0.25, "l", milk.id)],
    )

    result = service.cook(user_id, recipe.id)

    assert result.success
    assert pantry.records[eggs.id].quantity == 4
    assert milk.id not in pantry.records
    assert len(pantry.consumed) == 1


def test_concurrent_change_is_reported_as_rejection() -> None:
    service, pantry, recipes = _setup()
    user_id = uuid4()
    eggs = pantry.add_record(user_id, "eggs", 6)
    cheese = pantry.add_record(user_id, "cheese", 100, unit_short_name="g")
    recipe = recipes.add_recipe(
        user_id,
        [("eggs", 2, "count", eggs.id), ("cheese", 50, "g", cheese.id)],
    )
    pantry.before_consume = lambda: pantry.delete_record(cheese.id)

    result = service.cook(user_id, recipe.id)

    assert not result.success
    assert result.missing == ["cheese"]
    assert pantry.records[eggs.id].quantity == 6


def test_conflict_without_visible_shortage_asks_to_retry() -> None:
    service, pantry, recipes = _setup()
    user_id = uuid4()
    eggs = pantry.add_record(user_id, "eggs", 6)
    recipe = recipes.add_recipe(user_id, [("eggs", 2, "count", eggs.id)])

    def locked() -> None:
        raise StockConflictError("row locked by another cook")

    pantry.before_consume = locked

    result = service.cook(user_id, recipe.id)

    assert not result.success
    assert result.message == CONFLICT_MESSAGE
    assert pantry.records[eggs.id].quantity == 6


def test_cook_checks_recipe_ownership() -> None:
    service, pantry, recipes = _setup()
    recipe = recipes.add_recipe(uuid4(), [("eggs", 1, "count", None)])

    with pytest.raises(ForbiddenError):
        service.cook(uuid4(), recipe.id)
    with pytest.raises(NotFoundError):
        service.cook(recipe.user_id, uuid4())
