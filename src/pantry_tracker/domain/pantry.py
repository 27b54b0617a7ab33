"""Domain models for pantry stock."""

from dataclasses import dataclass
from datetime import date
from uuid import UUID


@dataclass(frozen=True)
class FoodItem:
    """Catalog entry, de-duplicated by FoodData Central id."""

    id: UUID
    name: str
    category: str
    fdc_id: int | None


@dataclass(frozen=True)
class Unit:
    """Measurement unit reference data."""

    id: UUID
    short_name: str
    display_name: str


@dataclass(frozen=True)
class PantryRecord:
    """A quantity of a food item owned by a user."""

    id: UUID
    user_id: UUID
    food_item: FoodItem
    unit: Unit
    quantity: float
    purchase_date: date
    estimated_expiration_date: date | None


@dataclass(frozen=True)
class StockDecrement:
    """Quantity to remove from a single pantry record."""

    user_food_item_id: UUID
    quantity: float
