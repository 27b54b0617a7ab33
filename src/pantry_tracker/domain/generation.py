"""Models for model-generated lifespan estimates and recipes."""

from enum import StrEnum
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel


class _CamelModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        coerce_numbers_to_str=True,
    )


class StorageType(StrEnum):
    """Storage condition a lifespan estimate applies to."""

    FRIDGE = "FRIDGE"
    FREEZER = "FREEZER"
    AMBIENT = "AMBIENT"


class LifespanEstimate(_CamelModel):
    """Most likely storage condition and how long the food keeps there."""

    storage_type: StorageType
    duration_days: int = Field(gt=0)


class RecipeIngredientInput(_CamelModel):
    """Pantry item offered to the recipe generator."""

    user_food_item_id: UUID
    fdc_id: int | None = None
    name: str
    quantity: float
    unit: str


class UsedIngredient(_CamelModel):
    """Ingredient the generated recipe consumes."""

    user_food_item_id: UUID | None = None
    fdc_id: int | None = None
    name: str
    quantity_used: float = Field(gt=0)
    unit: str

    @field_validator("user_food_item_id", mode="before")
    @classmethod
    def _drop_malformed_reference(cls, value: object) -> object:
        if value is None or isinstance(value, UUID):
            return value
        if isinstance(value, str):
            try:
                return UUID(value.strip())
            except ValueError:
                return None
        return None


class GeneratedRecipe(_CamelModel):
    """Structured recipe returned by the generator."""

    title: str = Field(min_length=1)
    description: str | None = None
    servings: int | None = None
    prep_time: str | None = None
    cook_time: str | None = None
    steps: list[str]
    used_ingredients: list[UsedIngredient] = Field(default_factory=list)

    @field_validator("used_ingredients", mode="before")
    @classmethod
    def _coerce_ingredient_array(cls, value: object) -> object:
        if isinstance(value, list):
            return value
        return []
