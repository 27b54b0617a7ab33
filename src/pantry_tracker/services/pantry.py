"""Pantry stock services, including the add-item workflow."""

import logging
import math
from dataclasses import dataclass
from datetime import date, datetime, timedelta
from typing import Protocol
from uuid import UUID

from pantry_tracker.domain.errors import EstimationError, ValidationError
from pantry_tracker.domain.pantry import FoodItem, PantryRecord, StockDecrement, Unit
from pantry_tracker.services.authorization import authorize_resource
from pantry_tracker.services.lifespan import LifespanEstimator

_logger = logging.getLogger(__name__)

_UPDATABLE_FIELDS = {
    "food_item_id",
    "unit_id",
    "quantity",
    "purchase_date",
    "estimated_expiration_date",
}


class PantryRepository(Protocol):
    """Persistence interface for pantry records, catalog items and units."""

    def list_records(self, user_id: UUID) -> list[PantryRecord]:
        """Return a user's records, soonest expiring first."""

    def get_record(self, record_id: UUID) -> PantryRecord | None:
        """Return a pantry record by id, if present."""

    def create_record(  # noqa: PLR0913
        self,
        user_id: UUID,
        food_item_id: UUID,
        unit_id: UUID,
        quantity: float,
        purchase_date: date,
        estimated_expiration_date: date | None,
    ) -> PantryRecord:
        """Create a pantry record and return it."""

    def update_record(self, record_id: UUID, payload: dict[str, object]) -> PantryRecord:
        """Update a pantry record and return it."""

    def delete_record(self, record_id: UUID) -> None:
        """Delete a pantry record."""

    def consume_stock(self, user_id: UUID, decrements: list[StockDecrement]) -> None:
        """Apply all decrements atomically or raise StockConflictError."""

    def find_food_item_by_fdc_id(self, fdc_id: int) -> FoodItem | None:
        """Return the catalog entry for a FoodData Central id."""

    def create_food_item(self, name: str, category: str, fdc_id: int | None) -> FoodItem:
        """Create a catalog entry and return it."""

    def get_food_item(self, food_item_id: UUID) -> FoodItem | None:
        """Return a catalog entry by id."""

    def get_unit(self, unit_id: UUID) -> Unit | None:
        """Return a unit by id."""

    def list_units(self) -> list[Unit]:
        """Return all units ordered by display name."""


@dataclass
class PantryService:
    """Application service for pantry stock."""

    repository: PantryRepository
    estimator: LifespanEstimator

    def list_items(self, user_id: UUID) -> list[PantryRecord]:
        """Return the user's pantry."""
        return self.repository.list_records(user_id)

    def list_units(self) -> list[Unit]:
        """Return available measurement units."""
        return self.repository.list_units()

    async def add_item(  # noqa: PLR0913
        self,
        user_id: UUID,
        *,
        fdc_id: object,
        food_name: str | None,
        food_category: str | None,
        unit_id: object,
        quantity: object,
        purchase_date: object,
    ) -> PantryRecord:
        """Resolve the catalog entry, estimate expiration and store the item."""
        if any(
            _is_blank(value)
            for value in (
                fdc_id,
                food_name,
                food_category,
                unit_id,
                quantity,
                purchase_date,
            )
        ):
            raise ValidationError("Missing required fields")
        parsed_fdc_id = _parse_int(fdc_id, "fdcId")
        parsed_unit_id = _parse_uuid(unit_id, "unitId")
        parsed_quantity = _parse_positive_float(quantity, "quantity")
        parsed_purchase_date = _parse_date(purchase_date, "purchaseDate")
        name = str(food_name).strip()

        if self.repository.get_unit(parsed_unit_id) is None:
            raise ValidationError("Unknown unit")

        food_item = self.repository.find_food_item_by_fdc_id(parsed_fdc_id)
        if food_item is None:
            food_item = self.repository.create_food_item(
                name=name,
                category=str(food_category).strip(),
                fdc_id=parsed_fdc_id,
            )

        estimate = await self.estimator.estimate(name)
        if estimate is None:
            raise EstimationError("Couldn't estimate lifespan")

        try:
            expires_on = expiration_date(parsed_purchase_date, estimate.duration_days)
        except OverflowError as exc:
            raise EstimationError("Couldn't estimate lifespan") from exc

        record = self.repository.create_record(
            user_id=user_id,
            food_item_id=food_item.id,
            unit_id=parsed_unit_id,
            quantity=parsed_quantity,
            purchase_date=parsed_purchase_date,
            estimated_expiration_date=expires_on,
        )
        _logger.info(
            "Added pantry item %s (%s, %s days)",
            record.id,
            estimate.storage_type.value,
            estimate.duration_days,
        )
        return record

    def update_item(
        self, user_id: UUID, item_id: UUID, changes: dict[str, object]
    ) -> PantryRecord:
        """Apply a partial update to a pantry item the user owns."""
        authorize_resource(
            self.repository.get_record(item_id),
            lambda record: record.user_id,
            user_id,
            "Pantry item",
        )
        payload = self._build_update(changes)
        if not payload:
            return self.repository.get_record(item_id)
        return self.repository.update_record(item_id, payload)

    def delete_item(self, user_id: UUID, item_id: UUID) -> None:
        """Delete a pantry item the user owns."""
        authorize_resource(
            self.repository.get_record(item_id),
            lambda record: record.user_id,
            user_id,
            "Pantry item",
        )
        self.repository.delete_record(item_id)

    def _build_update(self, changes: dict[str, object]) -> dict[str, object]:
        unknown = set(changes) - _UPDATABLE_FIELDS
        if unknown:
            raise ValidationError(f"Unknown fields: {', '.join(sorted(unknown))}")
        payload: dict[str, object] = {}
        if changes.get("food_item_id") is not None:
            food_item_id = _parse_uuid(changes["food_item_id"], "foodItemId")
            if self.repository.get_food_item(food_item_id) is None:
                raise ValidationError("Unknown food item")
            payload["food_item_id"] = food_item_id
        if changes.get("unit_id") is not None:
            unit_id = _parse_uuid(changes["unit_id"], "unitId")
            if self.repository.get_unit(unit_id) is None:
                raise ValidationError("Unknown unit")
            payload["unit_id"] = unit_id
        if changes.get("quantity") is not None:
            payload["quantity"] = _parse_positive_float(changes["quantity"], "quantity")
        if changes.get("purchase_date") is not None:
            payload["purchase_date"] = _parse_date(
                changes["purchase_date"], "purchaseDate"
            )
        if "estimated_expiration_date" in changes:
            raw = changes["estimated_expiration_date"]
            payload["estimated_expiration_date"] = (
                None
                if _is_blank(raw)
                else _parse_date(raw, "estimatedExpirationDate")
            )
        return payload


def expiration_date(purchase_date: date, duration_days: int) -> date:
    """Add a lifespan in calendar days to a purchase date."""
    return purchase_date + timedelta(days=duration_days)


def _is_blank(value: object) -> bool:
    if value is None:
        return True
    if isinstance(value, str):
        return not value.strip()
    return False


def _parse_int(value: object, field_name: str) -> int:
    if isinstance(value, bool):
        raise ValidationError(f"Invalid {field_name}")
    if isinstance(value, int):
        return value
    if isinstance(value, str):
        try:
            return int(value.strip())
        except ValueError:
            pass
    raise ValidationError(f"Invalid {field_name}")


def _parse_uuid(value: object, field_name: str) -> UUID:
    if isinstance(value, UUID):
        return value
    if isinstance(value, str):
        try:
            return UUID(value.strip())
        except ValueError:
            pass
    raise ValidationError(f"Invalid {field_name}")


def _parse_positive_float(value: object, field_name: str) -> float:
    parsed: float | None = None
    if isinstance(value, int | float) and not isinstance(value, bool):
        parsed = float(value)
    elif isinstance(value, str):
        try:
            parsed = float(value.strip())
        except ValueError:
            parsed = None
    if parsed is None or not math.isfinite(parsed):
        raise ValidationError(f"Invalid {field_name}")
    if parsed <= 0:
        raise ValidationError(f"{field_name} must be greater than zero")
    return parsed


def _parse_date(value: object, field_name: str) -> date:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        cleaned = value.strip()
        try:
            return datetime.fromisoformat(cleaned).date()
        except ValueError:
            pass
        try:
            return date.fromisoformat(cleaned[:10])
        except ValueError:
            pass
    raise ValidationError(f"Invalid {field_name}")
