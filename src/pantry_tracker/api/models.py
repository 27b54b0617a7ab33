"""Pydantic models for API requests and responses."""

from datetime import date, datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from pantry_tracker.domain.generation import GeneratedRecipe, RecipeIngredientInput
from pantry_tracker.domain.pantry import FoodItem, PantryRecord, Unit
from pantry_tracker.domain.recipes import Recipe, RecipeIngredient
from pantry_tracker.services.food_search import FoodSearchResult


class ApiModel(BaseModel):
    """Base model exchanging camelCase JSON."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class CreatePantryItemRequest(ApiModel):
    """Add-item payload; required fields are checked by the service."""

    fdc_id: int | str | None = None
    food_name: str | None = None
    food_category: str | None = None
    unit_id: str | None = None
    quantity: float | str | None = None
    purchase_date: str | None = None


class UpdatePantryItemRequest(ApiModel):
    """Partial pantry item update."""

    food_item_id: str | None = None
    unit_id: str | None = None
    quantity: float | str | None = None
    purchase_date: str | None = None
    estimated_expiration_date: str | None = None

    def changes(self) -> dict[str, object]:
        """Return only the fields the caller sent."""
        return {name: getattr(self, name) for name in self.model_fields_set}


class LifespanRequest(ApiModel):
    """Lifespan estimate request."""

    food_name: str


class GenerateRecipeRequest(ApiModel):
    """Recipe generation request, ingredients sorted by priority."""

    ingredients: list[RecipeIngredientInput] = []


class SaveRecipeRequest(ApiModel):
    """Save a previously generated recipe."""

    recipe: GeneratedRecipe


class FoodItemResponse(ApiModel):
    id: UUID
    name: str
    category: str
    fdc_id: int | None

    @classmethod
    def from_domain(cls, item: FoodItem) -> "FoodItemResponse":
        return cls(id=item.id, name=item.name, category=item.category, fdc_id=item.fdc_id)


class UnitResponse(ApiModel):
    id: UUID
    short_name: str
    display_name: str

    @classmethod
    def from_domain(cls, unit: Unit) -> "UnitResponse":
        return cls(
            id=unit.id, short_name=unit.short_name, display_name=unit.display_name
        )


class PantryItemResponse(ApiModel):
    """Pantry record as exposed to clients."""

    id: UUID
    quantity: float
    purchase_date: date
    estimated_expiration_date: date | None
    food_item: FoodItemResponse
    unit: UnitResponse

    @classmethod
    def from_domain(cls, record: PantryRecord) -> "PantryItemResponse":
        return cls(
            id=record.id,
            quantity=record.quantity,
            purchase_date=record.purchase_date,
            estimated_expiration_date=record.estimated_expiration_date,
            food_item=FoodItemResponse.from_domain(record.food_item),
            unit=UnitResponse.from_domain(record.unit),
        )


class RecipeIngredientResponse(ApiModel):
    id: UUID
    name: str
    fdc_id: int | None
    quantity_used: float
    unit: str
    user_food_item_id: UUID | None

    @classmethod
    def from_domain(cls, item: RecipeIngredient) -> "RecipeIngredientResponse":
        return cls(
            id=item.id,
            name=item.name,
            fdc_id=item.fdc_id,
            quantity_used=item.quantity_used,
            unit=item.unit,
            user_food_item_id=item.user_food_item_id,
        )


class SavedRecipeResponse(ApiModel):
    """Saved recipe with ingredient lines."""

    id: UUID
    title: str
    description: str | None
    servings: int | None
    prep_time: str | None
    cook_time: str | None
    steps: list[str]
    created_at: datetime
    ingredients: list[RecipeIngredientResponse]

    @classmethod
    def from_domain(cls, recipe: Recipe) -> "SavedRecipeResponse":
        return cls(
            id=recipe.id,
            title=recipe.title,
            description=recipe.description,
            servings=recipe.servings,
            prep_time=recipe.prep_time,
            cook_time=recipe.cook_time,
            steps=recipe.steps,
            created_at=recipe.created_at,
            ingredients=[
                RecipeIngredientResponse.from_domain(item)
                for item in recipe.ingredients
            ],
        )


class FoodSearchResponse(ApiModel):
    results: list[FoodSearchResult]
    total_hits: int


def dump(model: BaseModel) -> dict[str, object]:
    """Serialize a model to camelCase JSON-compatible data."""
    return model.model_dump(mode="json", by_alias=True)
